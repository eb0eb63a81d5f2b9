"""
Configuration management using pydantic-settings.

Loads configuration from CACHECORE_* environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Optional:
        CACHECORE_DEFAULT_TTL_SECONDS: TTL the pool applies to new records
            whose expiration was never set on the item
        CACHECORE_LOG_LEVEL: Console logging level
        CACHECORE_LOG_FILE: Path of a JSON-lines log file
    """

    model_config = SettingsConfigDict(
        env_prefix="CACHECORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DEFAULT_TTL_SECONDS: int | None = Field(
        default=None,
        ge=0,
        description="Default TTL in seconds for records saved without an explicit expiration",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON log file")

    def redacted_display(self) -> dict[str, str | int | None]:
        """Return settings as a flat dict for display."""
        return {
            "DEFAULT_TTL_SECONDS": self.DEFAULT_TTL_SECONDS,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
