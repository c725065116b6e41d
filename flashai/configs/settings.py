"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field, field_validator

from flashai.configs.ai import SynthesisSettings, VisionSettings
from flashai.configs.base import BaseSettings
from flashai.configs.database import DatabaseSettings
from flashai.configs.ingestion import IngestionSettings

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    vision: VisionSettings = Field(default_factory=VisionSettings)
    synthesis: SynthesisSettings = Field(default_factory=SynthesisSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)

    debug: bool = Field(default=False, description="Force DEBUG logging and enable uvicorn reload")
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug mode is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.log_level

    @property
    def ai_configured(self) -> bool:
        """Both remote models have credentials."""
        return self.vision.is_configured and self.synthesis.is_configured


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from flashai.configs import get_settings
        settings = get_settings()
    """
    return Settings()
