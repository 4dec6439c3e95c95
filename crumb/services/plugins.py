# crumb/services/plugins.py
"""
Adapters for recipe-card plugins whose markup is fixed and predictable.

Each adapter pairs a signature check with an extractor that assumes the
plugin's DOM. The registry keeps them in priority order; the first adapter
whose signature matches the page is the one that runs.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, Iterator, Optional

from bs4 import BeautifulSoup, Tag

from .durations import SECONDS_PER_HOUR, SECONDS_PER_MINUTE, parse_duration_text
from .models import Times
from .text import clean_optional, element_text, image_url_from_tag, meta_content
from .types import Page, RecipeDraft

logger = logging.getLogger(__name__)

LEADING_INT_PATTERN = re.compile(r"\d+")


@dataclass(frozen=True)
class PluginAdapter:
    name: str
    label: str
    detect: Callable[[BeautifulSoup], bool]
    extract: Callable[[Page], RecipeDraft]


@dataclass(frozen=True)
class AdapterRegistry:
    adapters: tuple[PluginAdapter, ...] = ()

    def __iter__(self) -> Iterator[PluginAdapter]:
        return iter(self.adapters)

    def __len__(self) -> int:
        return len(self.adapters)

    def names(self) -> list[str]:
        return [adapter.name for adapter in self.adapters]

    def match(self, soup: BeautifulSoup) -> Optional[PluginAdapter]:
        for adapter in self.adapters:
            if adapter.detect(soup):
                return adapter
        return None

    def without(self, name: str) -> "AdapterRegistry":
        return replace(self, adapters=tuple(a for a in self.adapters if a.name != name))

    def with_adapter(self, adapter: PluginAdapter, first: bool = False) -> "AdapterRegistry":
        others = tuple(a for a in self.adapters if a.name != adapter.name)
        ordered = (adapter, *others) if first else (*others, adapter)
        return replace(self, adapters=ordered)


@dataclass(frozen=True)
class CardLayout:
    """CSS selectors describing one plugin's recipe card."""
    container: str
    title: str
    ingredient_item: str
    instructions_root: str
    instruction_item: str
    instruction_header: Optional[str] = None
    instruction_text: Optional[str] = None
    ingredient_parts: Optional[tuple[str, str, str]] = None
    image: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None


def _text_at(container: Tag, selector: Optional[str]) -> Optional[str]:
    if not selector:
        return None
    return clean_optional(element_text(container.select_one(selector)))


def _add_ingredients(draft: RecipeDraft, container: Tag, layout: CardLayout) -> None:
    for item in container.select(layout.ingredient_item):
        raw = element_text(item)
        if not raw:
            continue
        if layout.ingredient_parts:
            amount, unit, name = (_text_at(item, selector) for selector in layout.ingredient_parts)
            draft.add_ingredient(raw, quantity=amount, unit=unit, name=name)
        else:
            draft.add_ingredient(raw)


def _innermost(tags: list[Tag]) -> list[Tag]:
    """Drop matches that contain another match (outer wrappers carry card chrome)."""
    return [
        tag
        for tag in tags
        if not any(other is not tag and any(parent is tag for parent in other.parents) for other in tags)
    ]


def _is_header_label(element: Tag) -> bool:
    # A bold run only counts as a header when it is the whole paragraph.
    if element.name in ("strong", "b") and element.parent is not None:
        return element_text(element.parent) == element_text(element)
    return True


def _add_instructions(draft: RecipeDraft, container: Tag, layout: CardLayout) -> None:
    roots = _innermost(container.select(layout.instructions_root)) or [container]
    selector = layout.instruction_item
    if layout.instruction_header:
        selector = f"{layout.instruction_header}, {selector}"

    for root in roots:
        headers = set()
        if layout.instruction_header:
            headers = {id(tag) for tag in root.select(layout.instruction_header)}
        for element in root.select(selector):
            if id(element) in headers:
                if _is_header_label(element):
                    draft.add_header(element_text(element))
                continue
            target = element.select_one(layout.instruction_text) if layout.instruction_text else None
            text = element_text(target or element)
            if text:
                draft.add_step(text)


def _layout_times(container: Tag, layout: CardLayout) -> Optional[Times]:
    times = Times(
        prep_seconds=parse_duration_text(_text_at(container, layout.prep_time)),
        cook_seconds=parse_duration_text(_text_at(container, layout.cook_time)),
        total_seconds=parse_duration_text(_text_at(container, layout.total_time)),
    )
    return None if times.is_empty else times


def extract_card(page: Page, layout: CardLayout, name: str) -> RecipeDraft:
    container = page.soup.select_one(layout.container)
    if container is None:
        raise ValueError(f"Recipe card {layout.container!r} not found")

    draft = RecipeDraft(source_url=page.url, extracted_by=f"plugin:{name}")
    draft.title = _text_at(container, layout.title) or meta_content(page.soup, "og:title")
    _add_ingredients(draft, container, layout)
    _add_instructions(draft, container, layout)
    if layout.image:
        draft.image_url = image_url_from_tag(container.select_one(layout.image), page.url)
    draft.author = _text_at(container, layout.author)
    draft.category = _text_at(container, layout.category)
    draft.times = _layout_times(container, layout)

    logger.debug(
        "Plugin %s found %d ingredients, %d steps",
        name,
        len(draft.ingredients),
        len(draft.steps),
    )
    return draft


def _selector_detector(selector: str) -> Callable[[BeautifulSoup], bool]:
    def detect(soup: BeautifulSoup) -> bool:
        return soup.select_one(selector) is not None

    return detect


def _leading_int(element: Optional[Tag]) -> int:
    if element is None:
        return 0
    match = LEADING_INT_PATTERN.search(element.get_text(" "))
    return int(match.group()) if match else 0


WPRM_LAYOUT = CardLayout(
    container=".wprm-recipe-container, div.wprm-recipe",
    title=".wprm-recipe-name",
    ingredient_item="li.wprm-recipe-ingredient",
    ingredient_parts=(
        ".wprm-recipe-ingredient-amount",
        ".wprm-recipe-ingredient-unit",
        ".wprm-recipe-ingredient-name",
    ),
    instructions_root=".wprm-recipe-instructions-container",
    instruction_header=".wprm-recipe-instruction-group .wprm-recipe-group-name",
    instruction_item="li.wprm-recipe-instruction",
    instruction_text=".wprm-recipe-instruction-text",
    image=".wprm-recipe-image",
    author=".wprm-recipe-author",
    category=".wprm-recipe-course",
    prep_time=".wprm-recipe-prep_time-container",
    cook_time=".wprm-recipe-cook_time-container",
    total_time=".wprm-recipe-total_time-container",
)


def _wprm_seconds(container: Tag, kind: str) -> Optional[int]:
    hours = _leading_int(container.select_one(f".wprm-recipe-{kind}_time-hours"))
    minutes = _leading_int(container.select_one(f".wprm-recipe-{kind}_time-minutes"))
    return hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE or None


def extract_wprm(page: Page) -> RecipeDraft:
    draft = extract_card(page, WPRM_LAYOUT, "wprm")
    container = page.soup.select_one(WPRM_LAYOUT.container)
    detailed = Times(
        prep_seconds=_wprm_seconds(container, "prep"),
        cook_seconds=_wprm_seconds(container, "cook"),
        total_seconds=_wprm_seconds(container, "total"),
    )
    if not detailed.is_empty:
        draft.times = detailed
    return draft


TASTY_LAYOUT = CardLayout(
    container="div.tasty-recipes, div[id^='tasty-recipes-']",
    title=".tasty-recipes-title",
    ingredient_item=".tasty-recipes-ingredients li",
    instructions_root=".tasty-recipes-instructions-body, .tasty-recipes-instructions",
    instruction_header="h3, h4, p > strong:only-child, p > b:only-child",
    instruction_item="li",
    image=".tasty-recipes-image",
    author=".tasty-recipes-author-name",
    category=".tasty-recipes-category",
    prep_time=".tasty-recipes-prep-time",
    cook_time=".tasty-recipes-cook-time",
    total_time=".tasty-recipes-total-time",
)

MV_CREATE_LAYOUT = CardLayout(
    container=".mv-create-card",
    title=".mv-create-title",
    ingredient_item=".mv-create-ingredients li",
    instructions_root=".mv-create-instructions",
    instruction_header="h3, h4",
    instruction_item="li",
    image=".mv-create-image",
    author=".mv-create-author",
    category=".mv-create-category",
    prep_time=".mv-create-time-prep",
    cook_time=".mv-create-time-active",
    total_time=".mv-create-time-total",
)

WPZOOM_LAYOUT = CardLayout(
    container=".wp-block-wpzoom-recipe-card-block-recipe-card, .wpzoom-recipe-card",
    title=".recipe-card-title",
    ingredient_item="li.ingredient-item:not(.ingredient-item-group-title)",
    instructions_root=".directions-list",
    instruction_header="li.directions-group-title",
    instruction_item="li.direction-step",
    image=".recipe-card-image",
    author=".recipe-card-author",
    category=".recipe-card-course",
)

WPZOOM_TIME_LABELS = (
    ("prep", "prep_seconds"),
    ("cook", "cook_seconds"),
    ("total", "total_seconds"),
)


def extract_wpzoom(page: Page) -> RecipeDraft:
    draft = extract_card(page, WPZOOM_LAYOUT, "wpzoom")
    container = page.soup.select_one(WPZOOM_LAYOUT.container)

    found: dict[str, int] = {}
    for item in container.select(".detail-item"):
        label = element_text(item.select_one(".detail-item-label")).lower()
        seconds = parse_duration_text(element_text(item))
        if not seconds:
            continue
        for keyword, field_name in WPZOOM_TIME_LABELS:
            if keyword in label:
                found.setdefault(field_name, seconds)
                break
    if found:
        draft.times = Times(**found)
    return draft


def _card_adapter(name: str, label: str, layout: CardLayout) -> PluginAdapter:
    return PluginAdapter(
        name=name,
        label=label,
        detect=_selector_detector(layout.container),
        extract=lambda page: extract_card(page, layout, name),
    )


def default_registry() -> AdapterRegistry:
    return AdapterRegistry(
        adapters=(
            PluginAdapter(
                name="wprm",
                label="WP Recipe Maker",
                detect=_selector_detector(WPRM_LAYOUT.container),
                extract=extract_wprm,
            ),
            _card_adapter("tasty", "Tasty Recipes", TASTY_LAYOUT),
            _card_adapter("mv-create", "Mediavine Create", MV_CREATE_LAYOUT),
            PluginAdapter(
                name="wpzoom",
                label="WPZOOM Recipe Card",
                detect=_selector_detector(WPZOOM_LAYOUT.container),
                extract=extract_wpzoom,
            ),
        )
    )
