"""Last-resort extraction from page layout when no known markup is present."""
from __future__ import annotations

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, Comment, Tag

from .text import absolute_url, clean_optional, element_text, meta_content
from .types import Page, RecipeDraft

logger = logging.getLogger(__name__)

STRATEGY_LABEL = "heuristic"

_INGREDIENT_RE = re.compile(r"\bingredients?\b\s*:?", re.IGNORECASE)
_INSTRUCTION_RE = re.compile(
    r"\b(?:instructions|directions|method|preparation|steps)\b\s*:?", re.IGNORECASE
)
_TITLE_SUFFIX_RE = re.compile(r"\s+[|\-–—:]\s+[^|\-–—:]+$")
_HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
_LABEL_TAGS = [*_HEADING_TAGS, "strong", "b"]
_NOISE_TAGS = ["script", "style", "noscript", "template", "nav", "footer", "aside", "form"]
_NOISE_HINT_RE = re.compile(
    r"^(?:comments?|respond|related(?:[-_]posts?)?|sidebar|share|sharing|social-share|newsletter|breadcrumbs?)$",
    re.IGNORECASE,
)
# Labels longer than this are prose that merely mentions the word.
_MAX_LABEL_CHARS = 40


def _without_noise(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()
    # Site banners go; an article <header> holding the <h1> title stays.
    for tag in soup.find_all("header"):
        if not tag.decomposed and tag.find("h1") is None:
            tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    for tag in soup.find_all(True):
        if tag.decomposed or tag.name in ("html", "body"):
            continue
        tokens = [tag.get("id") or "", *(tag.get("class") or [])]
        if any(_NOISE_HINT_RE.match(token) for token in tokens if token):
            tag.decompose()
    return soup


def _list_items(list_tag: Tag) -> list[str]:
    items = []
    for li in list_tag.find_all("li"):
        text = element_text(li)
        if text:
            items.append(text)
    return items


def _is_label(tag: Tag, pattern: re.Pattern) -> bool:
    text = element_text(tag)
    return bool(text) and len(text) <= _MAX_LABEL_CHARS and bool(pattern.search(text))


def _list_after_label(soup: BeautifulSoup, pattern: re.Pattern, exclude: Optional[Tag] = None) -> tuple[Optional[Tag], list[str]]:
    for tag in soup.find_all(_LABEL_TAGS):
        if not _is_label(tag, pattern):
            continue
        search_from = tag.parent if tag.parent is not None and tag.parent.name == "p" else tag
        found = search_from.find_next(["ul", "ol"])
        if isinstance(found, Tag) and found is not exclude:
            items = _list_items(found)
            if items:
                return found, items
    return None, []


def _list_in_tagged_block(soup: BeautifulSoup, hint: str, exclude: Optional[Tag] = None) -> tuple[Optional[Tag], list[str]]:
    hint_re = re.compile(hint, re.IGNORECASE)
    for block in soup.find_all(True):
        hints = " ".join([block.get("id") or "", *(block.get("class") or [])])
        if not hints.strip() or not hint_re.search(hints):
            continue
        found = block if block.name in ("ul", "ol") else block.find(["ul", "ol"])
        if isinstance(found, Tag) and found is not exclude:
            items = _list_items(found)
            if items:
                return found, items
    return None, []


def _paragraphs_after_label(soup: BeautifulSoup, pattern: re.Pattern) -> list[str]:
    for tag in soup.find_all(_HEADING_TAGS):
        if not _is_label(tag, pattern):
            continue
        paragraphs = []
        for sibling in tag.find_next_siblings():
            if sibling.name in _HEADING_TAGS:
                break
            if sibling.name == "p":
                text = element_text(sibling)
                if text:
                    paragraphs.append(text)
        if paragraphs:
            return paragraphs
    return []


def _extract_title(soup: BeautifulSoup, original: BeautifulSoup) -> Optional[str]:
    h1 = soup.find("h1")
    if isinstance(h1, Tag):
        text = clean_optional(element_text(h1))
        if text:
            return text

    og_title = meta_content(original, "og:title")
    if og_title:
        return og_title

    title_tag = original.find("title")
    if isinstance(title_tag, Tag):
        text = _TITLE_SUFFIX_RE.sub("", element_text(title_tag)).strip()
        if text:
            return text
    return None


def _extract_image(soup: BeautifulSoup, base_url: str) -> Optional[str]:
    image = meta_content(soup, "og:image", "og:image:url", "twitter:image")
    if image:
        return absolute_url(image, base_url)
    link = soup.find("link", rel="image_src")
    if isinstance(link, Tag):
        return absolute_url(link.get("href"), base_url)
    return None


def extract_heuristic(page: Page) -> RecipeDraft:
    """Guess a recipe from labels and lists; missing pieces stay empty."""
    soup = _without_noise(page.html)
    draft = RecipeDraft(source_url=page.url, extracted_by=STRATEGY_LABEL)

    ingredient_list, ingredients = _list_after_label(soup, _INGREDIENT_RE)
    if not ingredients:
        ingredient_list, ingredients = _list_in_tagged_block(soup, "ingredient")

    _, steps = _list_after_label(soup, _INSTRUCTION_RE, exclude=ingredient_list)
    if not steps:
        _, steps = _list_in_tagged_block(soup, "instruction|direction|method", exclude=ingredient_list)
    if not steps:
        steps = _paragraphs_after_label(soup, _INSTRUCTION_RE)

    for text in ingredients:
        draft.add_ingredient(text)
    for text in steps:
        draft.add_step(text)

    draft.title = _extract_title(soup, page.soup)
    draft.image_url = _extract_image(page.soup, page.url)
    draft.author = meta_content(page.soup, "author", "article:author")

    logger.debug(
        "Heuristic found %d ingredients, %d steps",
        len(draft.ingredients),
        len(draft.steps),
    )
    return draft
