import re
from urllib.parse import urlparse

from .errors import InvalidURLError
from .text import ZERO_WIDTH_PATTERN, WHITESPACE_PATTERN

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_ALLOWED_SCHEMES = {"http", "https"}


def clean_url_input(value: str) -> str:
    """Trim pasted text, drop zero-width characters and collapse whitespace."""
    text = ZERO_WIDTH_PATTERN.sub("", value or "")
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def normalize_recipe_url(value: str) -> str:
    """Make a user-supplied URL absolute http(s) or raise InvalidURLError."""
    url = clean_url_input(value)
    if not url:
        raise InvalidURLError("Enter a recipe URL starting with http:// or https://")

    if url.startswith("//"):
        url = f"https:{url}"
    elif not _SCHEME_RE.match(url) or re.match(r"^[^/:]+:\d+(/|$)", url):
        url = f"https://{url}"

    parsed = urlparse(url)
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES:
        raise InvalidURLError(f"Only http:// or https:// URLs are supported, got {parsed.scheme}:")
    if not parsed.netloc:
        raise InvalidURLError(f"URL has no host; use http:// or https://: {url}")

    return url.replace(" ", "%20")
