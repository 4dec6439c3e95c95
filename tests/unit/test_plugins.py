from __future__ import annotations

import pytest

from crumb.services.plugins import (
    TASTY_LAYOUT,
    AdapterRegistry,
    PluginAdapter,
    default_registry,
    extract_card,
)
from crumb.services.types import Page, RecipeDraft

URL = "https://blog.example.com/chili"

WPRM_HTML = """
<html><head><meta property="og:title" content="Weeknight Chili | Example Blog"></head><body>
<div class="wprm-recipe-container"><div class="wprm-recipe">
  <h2 class="wprm-recipe-name">Weeknight Chili</h2>
  <div class="wprm-recipe-image"><img data-lazy-src="/chili.jpg" src="data:image/gif;base64,R0lG"></div>
  <span class="wprm-recipe-author">Sam Cook</span>
  <span class="wprm-recipe-course">Dinner</span>
  <div class="wprm-recipe-prep_time-container">Prep
    <span class="wprm-recipe-prep_time-minutes">15<span> mins</span></span>
  </div>
  <div class="wprm-recipe-cook_time-container">Cook
    <span class="wprm-recipe-cook_time-hours">1<span> hr</span></span>
    <span class="wprm-recipe-cook_time-minutes">10<span> mins</span></span>
  </div>
  <div class="wprm-recipe-ingredients-container"><ul>
    <li class="wprm-recipe-ingredient"><span class="wprm-recipe-ingredient-amount">1</span>
      <span class="wprm-recipe-ingredient-unit">lb</span>
      <span class="wprm-recipe-ingredient-name">ground beef</span></li>
    <li class="wprm-recipe-ingredient"><span class="wprm-recipe-ingredient-amount">1</span>
      <span class="wprm-recipe-ingredient-name">onion</span></li>
    <li class="wprm-recipe-ingredient"><span class="wprm-recipe-ingredient-amount">2</span>
      <span class="wprm-recipe-ingredient-unit">cans</span>
      <span class="wprm-recipe-ingredient-name">beans</span></li>
  </ul></div>
  <div class="wprm-recipe-instructions-container">
    <div class="wprm-recipe-instruction-group">
      <h4 class="wprm-recipe-group-name">Brown</h4>
      <ul>
        <li class="wprm-recipe-instruction"><div class="wprm-recipe-instruction-text">Brown the beef.</div></li>
        <li class="wprm-recipe-instruction"><div class="wprm-recipe-instruction-text">Add the onion.</div></li>
      </ul>
    </div>
    <div class="wprm-recipe-instruction-group">
      <h4 class="wprm-recipe-group-name">Simmer</h4>
      <ul>
        <li class="wprm-recipe-instruction"><div class="wprm-recipe-instruction-text">Simmer for 1 hour.</div></li>
      </ul>
    </div>
  </div>
</div></div>
</body></html>
"""

TASTY_HTML = """
<html><body>
<div class="tasty-recipes">
  <h2 class="tasty-recipes-title">Pancakes</h2>
  <span class="tasty-recipes-prep-time">10 minutes</span>
  <span class="tasty-recipes-cook-time">20 minutes</span>
  <div class="tasty-recipes-ingredients"><ul>
    <li>1 cup flour</li><li>1 egg</li><li>1 cup milk</li>
  </ul></div>
  <div class="tasty-recipes-instructions">
    <h4>Batter</h4>
    <ol><li>Whisk everything.</li><li>Rest 5 minutes.</li></ol>
    <h4>Cook</h4>
    <ol><li>Fry in a hot pan.</li></ol>
  </div>
</div>
</body></html>
"""

WPZOOM_HTML = """
<html><body>
<div class="wp-block-wpzoom-recipe-card-block-recipe-card">
  <h2 class="recipe-card-title">Salsa</h2>
  <div class="detail-item"><span class="detail-item-label">Prep time</span> <span>10 minutes</span></div>
  <div class="detail-item"><span class="detail-item-label">Servings</span> <span>4</span></div>
  <ul>
    <li class="ingredient-item-group-title ingredient-item">Base</li>
    <li class="ingredient-item">3 tomatoes</li>
    <li class="ingredient-item">1 onion</li>
    <li class="ingredient-item">1 lime</li>
  </ul>
  <ul class="directions-list">
    <li class="directions-group-title">Prep</li>
    <li class="direction-step">Chop everything.</li>
    <li class="direction-step">Squeeze the lime.</li>
    <li class="direction-step">Stir and season.</li>
  </ul>
</div>
</body></html>
"""


class TestDefaultRegistry:
    def test_priority_order(self) -> None:
        assert default_registry().names() == ["wprm", "tasty", "mv-create", "wpzoom"]

    def test_detects_plugin(self) -> None:
        registry = default_registry()

        assert registry.match(Page.from_html(WPRM_HTML, URL).soup).name == "wprm"
        assert registry.match(Page.from_html(TASTY_HTML, URL).soup).name == "tasty"
        assert registry.match(Page.from_html(WPZOOM_HTML, URL).soup).name == "wpzoom"

    def test_no_plugin(self) -> None:
        page = Page.from_html("<html><body><p>hi</p></body></html>", URL)

        assert default_registry().match(page.soup) is None

    def test_first_match_wins(self) -> None:
        page = Page.from_html(WPRM_HTML.replace("</body>", TASTY_HTML + "</body>"), URL)

        assert default_registry().match(page.soup).name == "wprm"

    def test_without_and_with_adapter(self) -> None:
        def extract(page: Page) -> RecipeDraft:
            return RecipeDraft(source_url=page.url)

        custom = PluginAdapter(name="custom", label="Custom", detect=lambda soup: True, extract=extract)
        registry = default_registry().without("wprm").with_adapter(custom, first=True)

        assert registry.names() == ["custom", "tasty", "mv-create", "wpzoom"]
        assert len(registry) == 4
        assert len(default_registry()) == 4

    def test_empty_registry(self) -> None:
        page = Page.from_html(WPRM_HTML, URL)

        assert AdapterRegistry().match(page.soup) is None


class TestWprm:
    def _draft(self) -> RecipeDraft:
        page = Page.from_html(WPRM_HTML, URL)
        adapter = default_registry().match(page.soup)
        return adapter.extract(page)

    def test_fields(self) -> None:
        draft = self._draft()

        assert draft.title == "Weeknight Chili"
        assert draft.author == "Sam Cook"
        assert draft.category == "Dinner"
        assert draft.image_url == "https://blog.example.com/chili.jpg"
        assert draft.extracted_by == "plugin:wprm"

    def test_ingredient_parts(self) -> None:
        first, second, _ = self._draft().ingredients

        assert (first.quantity, first.unit, first.name) == ("1", "lb", "ground beef")
        assert (second.quantity, second.unit, second.name) == ("1", None, "onion")

    def test_instruction_groups(self) -> None:
        assert [(s.text, s.is_header) for s in self._draft().steps] == [
            ("**Brown:**", True),
            ("Brown the beef.", False),
            ("Add the onion.", False),
            ("**Simmer:**", True),
            ("Simmer for 1 hour.", False),
        ]

    def test_times(self) -> None:
        times = self._draft().times

        assert times.prep_seconds == 15 * 60
        assert times.cook_seconds == 3600 + 10 * 60
        assert times.total_seconds is None


class TestCardLayouts:
    def test_tasty_headers_and_times(self) -> None:
        draft = extract_card(Page.from_html(TASTY_HTML, URL), TASTY_LAYOUT, "tasty")

        assert draft.title == "Pancakes"
        assert [i.raw for i in draft.ingredients] == ["1 cup flour", "1 egg", "1 cup milk"]
        assert [(s.text, s.is_header) for s in draft.steps] == [
            ("**Batter:**", True),
            ("Whisk everything.", False),
            ("Rest 5 minutes.", False),
            ("**Cook:**", True),
            ("Fry in a hot pan.", False),
        ]
        assert draft.times.prep_seconds == 600
        assert draft.times.cook_seconds == 1200

    def test_missing_container_raises(self) -> None:
        page = Page.from_html("<html><body></body></html>", URL)

        with pytest.raises(ValueError):
            extract_card(page, TASTY_LAYOUT, "tasty")

    def test_wpzoom(self) -> None:
        page = Page.from_html(WPZOOM_HTML, URL)
        draft = default_registry().match(page.soup).extract(page)

        assert draft.title == "Salsa"
        assert [i.raw for i in draft.ingredients] == ["3 tomatoes", "1 onion", "1 lime"]
        assert draft.steps[0].is_header
        assert [s.text for s in draft.steps[1:]] == ["Chop everything.", "Squeeze the lime.", "Stir and season."]
        assert draft.times.prep_seconds == 600
        assert draft.times.cook_seconds is None


TASTY_BODY_HTML = """
<html><body>
<div class="tasty-recipes" id="tasty-recipes-123">
  <div class="tasty-recipes-entry-header"><h2 class="tasty-recipes-title">Lemon Cake</h2></div>
  <div class="tasty-recipes-ingredients">
    <div class="tasty-recipes-ingredients-header"><h3>Ingredients</h3></div>
    <div class="tasty-recipes-ingredients-body"><ul>
      <li>2 cups flour</li><li>1 cup sugar</li><li>2 lemons</li>
    </ul></div>
  </div>
  <div class="tasty-recipes-instructions">
    <div class="tasty-recipes-instructions-header"><h3>Instructions</h3></div>
    <div class="tasty-recipes-instructions-body">
      <p><strong>For the cake:</strong></p>
      <ol><li>Cream butter and sugar.</li><li>Bake 35 minutes.</li></ol>
      <p><strong>For the glaze:</strong></p>
      <p><strong>Tip</strong> use fresh lemons.</p>
      <ol><li>Whisk sugar and juice.</li></ol>
    </div>
  </div>
</div>
</body></html>
"""

MV_CREATE_HTML = """
<html><body>
<div class="mv-create-card">
  <h1 class="mv-create-title">Granola</h1>
  <span class="mv-create-author">Pat Baker</span>
  <div class="mv-create-time-prep">10 minutes</div>
  <div class="mv-create-time-active">30 minutes</div>
  <div class="mv-create-time-total">40 minutes</div>
  <div class="mv-create-ingredients"><ul>
    <li>3 cups oats</li><li>1/2 cup honey</li><li>1 cup nuts</li>
  </ul></div>
  <div class="mv-create-instructions">
    <h3>Mix</h3>
    <ol><li>Stir oats and nuts.</li><li>Pour over honey.</li></ol>
    <h4>Bake</h4>
    <ol><li>Bake 30 minutes.</li></ol>
  </div>
</div>
</body></html>
"""


class TestTastyBody:
    def _draft(self) -> RecipeDraft:
        page = Page.from_html(TASTY_BODY_HTML, URL)
        return default_registry().match(page.soup).extract(page)

    def test_section_title_is_not_a_step(self) -> None:
        texts = [s.text for s in self._draft().steps]

        assert "**Instructions:**" not in texts

    def test_bold_paragraphs_become_headers(self) -> None:
        assert [(s.text, s.is_header) for s in self._draft().steps] == [
            ("**For the cake:**", True),
            ("Cream butter and sugar.", False),
            ("Bake 35 minutes.", False),
            ("**For the glaze:**", True),
            ("Whisk sugar and juice.", False),
        ]

    def test_ingredients_and_title(self) -> None:
        draft = self._draft()

        assert draft.title == "Lemon Cake"
        assert [i.raw for i in draft.ingredients] == ["2 cups flour", "1 cup sugar", "2 lemons"]


class TestMvCreate:
    def _draft(self) -> RecipeDraft:
        page = Page.from_html(MV_CREATE_HTML, URL)
        adapter = default_registry().match(page.soup)
        assert adapter.name == "mv-create"
        return adapter.extract(page)

    def test_fields(self) -> None:
        draft = self._draft()

        assert draft.title == "Granola"
        assert draft.author == "Pat Baker"
        assert draft.extracted_by == "plugin:mv-create"
        assert [i.raw for i in draft.ingredients] == ["3 cups oats", "1/2 cup honey", "1 cup nuts"]

    def test_headers_and_steps(self) -> None:
        assert [(s.text, s.is_header) for s in self._draft().steps] == [
            ("**Mix:**", True),
            ("Stir oats and nuts.", False),
            ("Pour over honey.", False),
            ("**Bake:**", True),
            ("Bake 30 minutes.", False),
        ]

    def test_times(self) -> None:
        times = self._draft().times

        assert times.prep_seconds == 600
        assert times.cook_seconds == 1800
        assert times.total_seconds == 2400
