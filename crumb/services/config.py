# crumb/services/config.py
"""
Configuration for the extraction engine.
Built once and handed to the extractor; nothing here is process-wide state.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

from .fetcher import DEFAULT_USER_AGENT
from .plugins import AdapterRegistry, default_registry

# CRUMB_* defaults are read when this module is imported
_env_path = find_dotenv(usecwd=True)
if _env_path:
    load_dotenv(dotenv_path=_env_path)


@dataclass
class ExtractionConfig:
    """Configuration for one RecipeExtractor."""

    # Plugin adapters, in priority order
    adapters: AdapterRegistry = field(default_factory=default_registry)

    # Minimum-quality gate
    min_ingredients: int = int(os.getenv("CRUMB_MIN_INGREDIENTS", "3"))
    min_steps: int = int(os.getenv("CRUMB_MIN_STEPS", "3"))

    # Page fetch
    fetch_timeout_seconds: float = float(os.getenv("CRUMB_FETCH_TIMEOUT", "15"))
    user_agent: str = os.getenv("CRUMB_USER_AGENT", DEFAULT_USER_AGENT)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.min_ingredients < 1:
            errors.append("min_ingredients must be at least 1")
        if self.min_steps < 1:
            errors.append("min_steps must be at least 1")
        if self.fetch_timeout_seconds <= 0:
            errors.append("fetch_timeout_seconds must be positive")
        if not self.user_agent.strip():
            errors.append("user_agent is required")

        return errors


def get_config() -> ExtractionConfig:
    """Get extraction configuration from environment."""
    return ExtractionConfig()
