from __future__ import annotations

import logging
from typing import Optional

import httpx

from .errors import FetchFailedError, HttpStatusError, InvalidURLError, NetworkTimeoutError
from .types import FetchedPage

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml", "text/plain")


def _build_headers(user_agent: str) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


def _is_html(content_type: str) -> bool:
    if not content_type:
        return True
    media_type = content_type.split(";")[0].strip().lower()
    return media_type in HTML_CONTENT_TYPES


class HttpPageFetcher:
    """
    Downloads a recipe page.

    Failures are reported once and never retried here: timeouts raise
    NetworkTimeoutError, non-2xx answers raise HttpStatusError and any other
    transport problem raises FetchFailedError.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self._transport = transport

    def __call__(self, url: str) -> FetchedPage:
        try:
            with httpx.Client(
                timeout=self.timeout_seconds,
                follow_redirects=True,
                headers=_build_headers(self.user_agent),
                transport=self._transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.InvalidURL as error:
            raise InvalidURLError(f"Invalid URL: {url}") from error
        except httpx.TimeoutException as error:
            logger.warning("fetch.timeout url=%s timeout=%ss", url, self.timeout_seconds)
            raise NetworkTimeoutError(url, self.timeout_seconds) from error
        except httpx.HTTPStatusError as error:
            status_code = error.response.status_code
            logger.warning("fetch.http_error url=%s status=%d", url, status_code)
            raise HttpStatusError(url, status_code) from error
        except httpx.HTTPError as error:
            logger.warning("fetch.failed url=%s error=%s", url, error)
            raise FetchFailedError(f"Network error fetching {url}: {error}") from error

        content_type = response.headers.get("content-type", "")
        if not _is_html(content_type):
            raise FetchFailedError(f"Unsupported content type {content_type!r} at {url}")

        return FetchedPage(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            html=response.text,
        )
