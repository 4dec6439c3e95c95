# crumb/services/structured.py
"""
Schema.org recipe markup: JSON-LD blocks first, microdata second.

Blocks that do not parse or do not describe a usable recipe are skipped so
the orchestrator can fall through to the next strategy.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Optional

from bs4 import BeautifulSoup, Tag

from .durations import parse_duration_text, parse_iso8601_duration
from .models import Times
from .normalizer import normalize_draft
from .text import absolute_url, clean_optional, clean_text, element_text, fragment_to_text, image_url_from_tag
from .types import Page, RecipeDraft
from .validator import check_quality

logger = logging.getLogger(__name__)

STRATEGY_LABEL = "structured-data"
RECIPE_TYPE = "recipe"
SECTION_TYPES = {"howtosection", "itemlist"}


def _type_names(node: dict) -> set[str]:
    raw = node.get("@type")
    values = raw if isinstance(raw, list) else [raw]
    names = set()
    for value in values:
        if isinstance(value, str):
            names.add(value.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1].lower())
    return names


def _walk_recipe_nodes(value: Any) -> Iterator[dict]:
    if isinstance(value, dict):
        if RECIPE_TYPE in _type_names(value):
            yield value
            return
        for nested in value.values():
            yield from _walk_recipe_nodes(nested)
    elif isinstance(value, list):
        for item in value:
            yield from _walk_recipe_nodes(item)


def _load_json_block(raw: str) -> Any:
    text = raw.strip()
    if text.startswith("<!--"):
        text = text[4:]
    if text.endswith("-->"):
        text = text[:-3]
    return json.loads(text, strict=False)


def _iter_json_ld(soup: BeautifulSoup) -> Iterator[Any]:
    for script in soup.find_all("script"):
        script_type = (script.get("type") or "").split(";")[0].strip().lower()
        if script_type != "application/ld+json":
            continue
        payload = script.string or script.get_text()
        if not payload or not payload.strip():
            continue
        try:
            yield _load_json_block(payload)
        except (json.JSONDecodeError, ValueError, RecursionError) as error:
            logger.debug("Skipping malformed JSON-LD block: %s", error)


def _as_list(value: Any) -> list:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _first_text(value: Any, *keys: str) -> Optional[str]:
    for item in _as_list(value):
        if isinstance(item, str):
            text = fragment_to_text(item)
        elif isinstance(item, dict):
            text = next((fragment_to_text(item[k]) for k in keys if isinstance(item.get(k), str)), "")
        else:
            text = ""
        if text:
            return text
    return None


def _image_from_value(value: Any, base_url: str) -> Optional[str]:
    for item in _as_list(value):
        if isinstance(item, str) and item.strip():
            return absolute_url(item, base_url)
        if isinstance(item, dict):
            url = item.get("url") or item.get("contentUrl") or item.get("@id")
            if isinstance(url, str) and url.strip():
                return absolute_url(url, base_url)
    return None


def _time_seconds(value: Any) -> Optional[int]:
    if isinstance(value, list):
        value = value[0] if value else None
    if not isinstance(value, str):
        return None
    return parse_iso8601_duration(value) or parse_duration_text(value)


def _build_times(prep: Any, cook: Any, total: Any) -> Optional[Times]:
    times = Times(
        prep_seconds=_time_seconds(prep),
        cook_seconds=_time_seconds(cook),
        total_seconds=_time_seconds(total),
    )
    return None if times.is_empty else times


def _add_instructions(draft: RecipeDraft, value: Any) -> None:
    """Flatten recipeInstructions, turning named sections into header steps."""
    if isinstance(value, str):
        for line in value.replace("\r", "\n").split("\n"):
            text = fragment_to_text(line)
            if text:
                draft.add_step(text)
        return

    if isinstance(value, list):
        for item in value:
            _add_instructions(draft, item)
        return

    if not isinstance(value, dict):
        return

    types = _type_names(value)
    elements = value.get("itemListElement")
    if types & SECTION_TYPES or (elements is not None and "howtostep" not in types):
        name = fragment_to_text(value.get("name") or "")
        if name:
            draft.add_header(name)
        _add_instructions(draft, elements)
        return

    text = fragment_to_text(value.get("text") or value.get("name") or value.get("description") or "")
    if text:
        draft.add_step(text)


def _draft_from_json_ld(node: dict, page: Page) -> RecipeDraft:
    draft = RecipeDraft(source_url=page.url, extracted_by=STRATEGY_LABEL)
    draft.title = _first_text(node.get("name") or node.get("headline"))

    ingredients = node.get("recipeIngredient")
    if ingredients is None:
        ingredients = node.get("ingredients")
    for item in _as_list(ingredients):
        if isinstance(item, str):
            text = fragment_to_text(item)
            if text:
                draft.add_ingredient(text)

    _add_instructions(draft, node.get("recipeInstructions"))

    draft.image_url = _image_from_value(node.get("image") or node.get("thumbnailUrl"), page.url)
    draft.author = _first_text(node.get("author"), "name")
    draft.source_name = _first_text(node.get("publisher"), "name")
    draft.category = _first_text(node.get("recipeCategory"))
    draft.times = _build_times(node.get("prepTime"), node.get("cookTime"), node.get("totalTime"))
    return draft


def _is_usable(draft: RecipeDraft) -> bool:
    return bool(draft.title or draft.ingredients or draft.steps)


def _owning_scope(tag: Tag) -> Optional[Tag]:
    for parent in tag.parents:
        if parent.has_attr("itemscope"):
            return parent
    return None


def _itemprop(scope: Tag, name: str) -> list[Tag]:
    # Properties of nested items (author Person, nutrition...) belong to their own scope.
    return [
        tag
        for tag in scope.find_all(attrs={"itemprop": True})
        if name in str(tag["itemprop"]).split() and _owning_scope(tag) is scope
    ]


def _itemprop_value(tag: Tag) -> str:
    for attr in ("content", "datetime"):
        value = tag.get(attr)
        if isinstance(value, str) and value.strip():
            return clean_text(value)
    return element_text(tag)


def _draft_from_microdata(scope: Tag, page: Page) -> RecipeDraft:
    draft = RecipeDraft(source_url=page.url, extracted_by=STRATEGY_LABEL)

    names = _itemprop(scope, "name")
    draft.title = clean_optional(_itemprop_value(names[0])) if names else None

    for tag in _itemprop(scope, "recipeIngredient") or _itemprop(scope, "ingredients"):
        text = _itemprop_value(tag)
        if text:
            draft.add_ingredient(text)

    for tag in _itemprop(scope, "recipeInstructions"):
        items = tag.find_all("li")
        if items:
            for item in items:
                text = element_text(item)
                if text:
                    draft.add_step(text)
        else:
            text = _itemprop_value(tag)
            if text:
                draft.add_step(text)

    images = _itemprop(scope, "image")
    if images:
        image = images[0]
        draft.image_url = absolute_url(image.get("content") or image.get("href"), page.url) or image_url_from_tag(image, page.url)

    authors = _itemprop(scope, "author")
    draft.author = clean_optional(_itemprop_value(authors[0])) if authors else None
    categories = _itemprop(scope, "recipeCategory")
    draft.category = clean_optional(_itemprop_value(categories[0])) if categories else None

    def time_of(prop: str) -> Optional[str]:
        tags = _itemprop(scope, prop)
        return _itemprop_value(tags[0]) if tags else None

    draft.times = _build_times(time_of("prepTime"), time_of("cookTime"), time_of("totalTime"))
    return draft


def _iter_microdata_scopes(soup: BeautifulSoup) -> Iterator[Tag]:
    for scope in soup.find_all(attrs={"itemtype": True}):
        itemtype = str(scope.get("itemtype") or "").lower()
        if any(t.rstrip("/").endswith("schema.org/recipe") for t in itemtype.split()):
            yield scope


def _iter_drafts(page: Page) -> Iterator[RecipeDraft]:
    for block in _iter_json_ld(page.soup):
        for node in _walk_recipe_nodes(block):
            try:
                draft = _draft_from_json_ld(node, page)
            except (TypeError, ValueError, AttributeError) as error:
                logger.debug("Skipping malformed recipe node: %s", error)
                continue
            if _is_usable(draft):
                yield draft

    for scope in _iter_microdata_scopes(page.soup):
        draft = _draft_from_microdata(scope, page)
        if _is_usable(draft):
            yield draft


def extract_structured_data(page: Page) -> Optional[RecipeDraft]:
    """
    Build a draft from the schema.org recipes on the page.

    The first candidate that passes the quality gate wins; when none does,
    the first usable one is returned so the orchestrator can report why.
    """
    first: Optional[RecipeDraft] = None
    for draft in _iter_drafts(page):
        if check_quality(normalize_draft(draft)).passed:
            return draft
        if first is None:
            first = draft
    return first
