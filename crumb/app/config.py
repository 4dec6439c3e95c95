from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from crumb.services.config import ExtractionConfig
from crumb.services.fetcher import DEFAULT_USER_AGENT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    FETCH_TIMEOUT_SECONDS: float = 15.0
    FETCH_USER_AGENT: str = DEFAULT_USER_AGENT
    MIN_INGREDIENTS: int = 3
    MIN_STEPS: int = 3
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "capacitor://localhost"],
    )

    def extraction_config(self) -> ExtractionConfig:
        return ExtractionConfig(
            min_ingredients=self.MIN_INGREDIENTS,
            min_steps=self.MIN_STEPS,
            fetch_timeout_seconds=self.FETCH_TIMEOUT_SECONDS,
            user_agent=self.FETCH_USER_AGENT,
        )


settings = Settings()
