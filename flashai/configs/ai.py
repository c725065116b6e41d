"""
AI service configuration settings.

Vision (page analysis) and synthesis (topic/flashcard generation) endpoints,
credentials, timeouts and retry policy.

Dependencies: pydantic, pydantic_settings
System role: Remote model configuration
"""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import SettingsConfigDict

from flashai.configs.base import BaseSettings


class VisionSettings(BaseSettings):
    """Z.AI vision API configuration (OpenAI-compatible chat completions)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="Z_AI_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    api_key: str = Field(default="", description="Bearer token for the vision API")
    base_url: str = Field(
        default="https://open.bigmodel.cn/api/paas/v4/",
        description="Base URL; chat/completions is appended",
    )
    model: str = Field(
        default="glm-4.5v",
        validation_alias=AliasChoices("Z_AI_VISION_MODEL", "Z_AI_MODEL"),
        description="Multimodal model ID",
    )
    title: str = Field(default="Flash-AI Vision", description="X-Title header value")
    accept_language: str = Field(default="en-US,en")
    timeout_seconds: float = Field(default=300.0, description="Per-call deadline")
    max_retries: int = Field(default=2, ge=0, description="Retries after the first attempt")
    retry_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Linear backoff unit; attempt N waits N * delay",
    )

    @field_validator("base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if value and not value.endswith("/"):
            value += "/"
        return value

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key.strip())


class SynthesisSettings(BaseSettings):
    """Text-generation model configuration for topic and flashcard synthesis."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SYNTHESIS_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("SYNTHESIS_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
    )
    model: str = Field(default="gemini-2.5-flash", description="Gemini model ID")
    max_output_tokens: int = Field(default=4096)
    exam_temperature: float = Field(default=0.2)
    flashcard_temperature: float = Field(default=0.4)
    exam_timeout_seconds: float = Field(default=120.0)
    flashcard_timeout_seconds: float = Field(default=180.0)

    @property
    def is_configured(self) -> bool:
        return bool(self.google_api_key.strip())
