# crumb/services/extractor.py
"""
Extraction orchestrator.

Strategies run one after another, most reliable first: schema.org data,
then a recognised recipe-card plugin, then layout heuristics. Each draft is
normalized and passed through the quality gate; the first accepted draft is
the result. Later strategies never run once one is accepted.
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence
from urllib.parse import urlparse

from .config import ExtractionConfig
from .errors import ConfigurationError, ExtractionFailedError
from .fetcher import HttpPageFetcher
from .heuristic import extract_heuristic
from .models import Recipe
from .normalizer import normalize_draft
from .plugins import AdapterRegistry
from .structured import extract_structured_data
from .text import meta_content
from .types import FetchedPage, Page, RecipeDraft, StrategyOutcome, StrategyResult
from .validator import check_quality, finalize, select_candidate

logger = logging.getLogger(__name__)

PageFetcher = Callable[[str], FetchedPage]

# Parsing errors a strategy may hit on odd markup; they mark that strategy FAILED.
STRATEGY_ERRORS = (ValueError, TypeError, AttributeError, KeyError, IndexError, RecursionError)


class ExtractionStrategy(ABC):
    name: str = "unknown"

    @abstractmethod
    def extract(self, page: Page) -> Optional[RecipeDraft]:
        """Build a draft from the page, or None when this strategy does not apply."""


class StructuredDataStrategy(ExtractionStrategy):
    name = "structured-data"

    def extract(self, page: Page) -> Optional[RecipeDraft]:
        return extract_structured_data(page)


class PluginAdapterStrategy(ExtractionStrategy):
    name = "plugin"

    def __init__(self, registry: AdapterRegistry):
        self.registry = registry

    def extract(self, page: Page) -> Optional[RecipeDraft]:
        adapter = self.registry.match(page.soup)
        if adapter is None:
            return None
        logger.info("Detected recipe plugin %s (%s)", adapter.name, adapter.label)
        return adapter.extract(page)


class GenericHeuristicStrategy(ExtractionStrategy):
    name = "heuristic"

    def extract(self, page: Page) -> Optional[RecipeDraft]:
        return extract_heuristic(page)


def default_strategies(config: ExtractionConfig) -> list[ExtractionStrategy]:
    return [
        StructuredDataStrategy(),
        PluginAdapterStrategy(config.adapters),
        GenericHeuristicStrategy(),
    ]


def _site_name(page: Page) -> Optional[str]:
    site_name = meta_content(page.soup, "og:site_name", "application-name")
    if site_name:
        return site_name
    host = urlparse(page.url).hostname or ""
    return host.removeprefix("www.") or None


class RecipeExtractor:
    """Turns a recipe page into a canonical Recipe or raises."""

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        fetcher: Optional[PageFetcher] = None,
        strategies: Optional[Sequence[ExtractionStrategy]] = None,
    ):
        self.config = config or ExtractionConfig()
        errors = self.config.validate()
        if errors:
            raise ConfigurationError(errors)

        self._fetch = fetcher or HttpPageFetcher(
            timeout_seconds=self.config.fetch_timeout_seconds,
            user_agent=self.config.user_agent,
        )
        self.strategies = list(strategies) if strategies is not None else default_strategies(self.config)

    def extract(self, url: str) -> Recipe:
        """
        Fetch ``url`` and extract its recipe.

        Raises:
            FetchFailedError: the page could not be fetched (timeout, HTTP status, network).
            ExtractionFailedError: no strategy produced a recipe passing the quality gate.
        """
        t0 = time.time()
        fetched = self._fetch(url)
        logger.info(
            "Fetched %s (status=%d, %d chars) in %.2fs",
            url,
            fetched.status_code,
            len(fetched.html),
            time.time() - t0,
        )
        return self.extract_from_html(fetched.html, url)

    def extract_from_html(self, html: str, url: str) -> Recipe:
        page = Page.from_html(html, url)
        results: list[StrategyResult] = []

        for strategy in self.strategies:
            result = self.attempt(strategy, page)
            results.append(result)
            if result.accepted:
                break

        winner = select_candidate(results)
        if winner is None:
            logger.info("No recipe accepted for %s", url)
            raise ExtractionFailedError(url, results)

        draft = winner.draft
        if not draft.source_name:
            draft.source_name = _site_name(page)
        return finalize(draft)

    def attempt(self, strategy: ExtractionStrategy, page: Page) -> StrategyResult:
        try:
            raw = strategy.extract(page)
        except STRATEGY_ERRORS as error:
            logger.warning("Strategy %s failed on %s", strategy.name, page.url, exc_info=True)
            return StrategyResult(strategy=strategy.name, outcome=StrategyOutcome.FAILED, error=str(error))

        if raw is None:
            logger.info("Strategy %s not applicable to %s", strategy.name, page.url)
            return StrategyResult(
                strategy=strategy.name,
                outcome=StrategyOutcome.INSUFFICIENT,
                problems=["no candidate"],
            )

        draft = normalize_draft(raw)
        report = check_quality(draft, self.config.min_ingredients, self.config.min_steps)
        outcome = StrategyOutcome.ACCEPTED if report.passed else StrategyOutcome.INSUFFICIENT
        logger.info(
            "Strategy %s %s: %d ingredients, %d steps%s",
            strategy.name,
            outcome.value,
            report.ingredient_count,
            report.instruction_count,
            f" ({'; '.join(report.problems)})" if report.problems else "",
        )
        return StrategyResult(
            strategy=strategy.name,
            outcome=outcome,
            draft=draft,
            problems=report.problems,
        )


def extract_recipe(url: str, config: Optional[ExtractionConfig] = None) -> Recipe:
    return RecipeExtractor(config=config).extract(url)
