"""
Database configuration settings.

Manages the SQLite connection used for documents, concepts and flashcards.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from flashai.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """SQLite database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DATABASE_",
        case_sensitive=False,
        extra="ignore",
    )

    path: str = Field(
        default="./data/flashcards.db",
        description="Filesystem path of the SQLite database",
    )
    url: str = Field(
        default="",
        description="Full SQLAlchemy async URL; overrides path when set",
    )
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    @property
    def async_database_url(self) -> str:
        """
        Construct async SQLite connection URL.

        Returns:
            str: SQLAlchemy async-compatible database URL (aiosqlite driver)
        """
        if self.url:
            return self.url
        return f"sqlite+aiosqlite:///{self.path}"

    def ensure_parent_dir(self) -> None:
        """Create the directory holding the database file if it is missing."""
        if self.url:
            return
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
