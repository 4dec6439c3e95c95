from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .types import StrategyResult


class ServiceError(Exception):
    kind = "service"


class InvalidURLError(ServiceError):
    kind = "invalid_url"


class FetchFailedError(ServiceError):
    kind = "transport"


class NetworkTimeoutError(FetchFailedError):
    kind = "timeout"

    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(f"Network timeout after {timeout_seconds}s: {url}")
        self.url = url
        self.timeout_seconds = timeout_seconds


class HttpStatusError(FetchFailedError):
    kind = "http_status"

    def __init__(self, url: str, status_code: int):
        super().__init__(f"HTTP {status_code} while fetching {url}")
        self.url = url
        self.status_code = status_code


class ExtractionFailedError(ServiceError):
    kind = "extraction"

    def __init__(self, url: str, attempts: Sequence["StrategyResult"] = ()):
        summary = ", ".join(f"{a.strategy}={a.outcome.value}" for a in attempts)
        message = f"No recipe could be extracted from {url}"
        if summary:
            message = f"{message} ({summary})"
        super().__init__(message)
        self.url = url
        self.attempts = list(attempts)


class ConfigurationError(ServiceError):
    kind = "configuration"

    def __init__(self, errors: list[str]):
        super().__init__(f"Extraction configuration errors: {', '.join(errors)}")
        self.errors = errors
