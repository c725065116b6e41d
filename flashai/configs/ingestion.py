"""
Configuration settings for the ingestion pipeline.

Batch sizes, concurrency cap, upload storage, rendering and job retention.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from flashai.configs.base import BaseSettings


class IngestionSettings(BaseSettings):
    """Settings for document ingestion."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    upload_dir: str = Field(
        default="./static/uploads",
        validation_alias=AliasChoices("INGESTION_UPLOAD_DIR", "UPLOAD_DIR"),
        description="Directory where uploaded PDFs are stored",
    )
    exam_batch_size: int = Field(default=8, ge=1, description="Pages per vision call for exams")
    information_batch_size: int = Field(
        default=2,
        ge=1,
        description="Pages per vision call for information documents",
    )
    max_concurrent_calls: int = Field(
        default=10,
        ge=1,
        description="Process-wide cap on in-flight vision calls",
    )
    max_file_size_mb: int = Field(default=25, ge=1)
    allowed_extensions: list[str] = Field(default_factory=lambda: [".pdf"])

    # Rendering
    ghostscript_binary: str = Field(default="gs")
    render_dpi: int = Field(default=150, ge=36)

    # Prompt context
    focus_concept_limit: int = Field(default=12)
    context_concept_limit: int = Field(default=100)
    context_card_limit: int = Field(default=120)

    # Job retention; 0 keeps jobs for the life of the process
    job_ttl_seconds: int = Field(default=0, ge=0)
    reaper_interval_seconds: int = Field(default=60, ge=1)

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024
