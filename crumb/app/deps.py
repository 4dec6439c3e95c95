# crumb/app/deps.py (one extractor per process, exposed as a dependency)

from __future__ import annotations

from crumb.app.config import settings
from crumb.services.extractor import RecipeExtractor

_extractor: RecipeExtractor | None = None


def get_extractor() -> RecipeExtractor:
    global _extractor
    if _extractor is None:
        _extractor = RecipeExtractor(config=settings.extraction_config())
    return _extractor
