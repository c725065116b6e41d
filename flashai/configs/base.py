"""
Shared settings source configuration.

Every config module reads the process environment first, then an optional
.env file in the working directory. Unknown variables are ignored so the
same .env can hold keys for the vision, synthesis and storage modules.

Dependencies: pydantic_settings
System role: Common env/.env loading for all configuration classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Env and .env loading shared by every FlashAI config module."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
