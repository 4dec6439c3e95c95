from __future__ import annotations

import html
import re
import unicodedata
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

ZERO_WIDTH_PATTERN = re.compile("[\u200b\u200c\u200d\u2060\ufeff]")
WHITESPACE_PATTERN = re.compile(r"\s+")
TAG_HINT_PATTERN = re.compile(r"<[a-zA-Z/!]")

IMAGE_ATTRIBUTES = (
    "data-lazy-src",
    "data-src",
    "data-original",
    "data-pin-media",
    "src",
)
IMAGE_SRCSET_ATTRIBUTES = ("data-lazy-srcset", "data-srcset", "srcset")


def _is_control(char: str) -> bool:
    return unicodedata.category(char) == "Cc" and not char.isspace()


def clean_text(value: object) -> str:
    """Strip zero-width and control characters and collapse whitespace."""
    if value is None:
        return ""
    text = str(value).replace("\xa0", " ")
    text = ZERO_WIDTH_PATTERN.sub("", text)
    text = "".join(ch for ch in text if not _is_control(ch))
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def clean_optional(value: object) -> Optional[str]:
    return clean_text(value) or None


def fragment_to_text(value: object) -> str:
    """Plain text from a string that may carry HTML markup or entities."""
    if not isinstance(value, str):
        return clean_text(value)
    if TAG_HINT_PATTERN.search(value):
        value = BeautifulSoup(value, "html.parser").get_text(" ")
    return clean_text(html.unescape(value))


def element_text(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return clean_text(element.get_text(" "))


def absolute_url(candidate: Optional[str], base_url: str) -> Optional[str]:
    if not candidate:
        return None
    cleaned = candidate.strip()
    if not cleaned or cleaned.startswith("data:"):
        return None
    return urljoin(base_url, cleaned)


def image_url_from_tag(element: Optional[Tag], base_url: str) -> Optional[str]:
    """Resolve an ``<img>`` (or a wrapper around one) to a URL, lazy-load aware."""
    if element is None:
        return None
    if element.name != "img":
        found = element.find("img")
        if not isinstance(found, Tag):
            return None
        element = found

    for attr in IMAGE_ATTRIBUTES:
        value = element.get(attr)
        if isinstance(value, str) and value.strip() and not value.startswith("data:"):
            return absolute_url(value, base_url)

    for attr in IMAGE_SRCSET_ATTRIBUTES:
        value = element.get(attr)
        if isinstance(value, str) and value.strip():
            return absolute_url(value.split(",")[0].split()[0], base_url)
    return None


def meta_content(soup: BeautifulSoup, *keys: str) -> Optional[str]:
    """First non-empty ``<meta property|name=key content=...>`` value."""
    for key in keys:
        for attr in ("property", "name"):
            tag = soup.find("meta", attrs={attr: key})
            if isinstance(tag, Tag):
                content = clean_text(tag.get("content"))
                if content:
                    return content
    return None
