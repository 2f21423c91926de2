"""
notelens Configuration

Settings are loaded from:
1. Environment variables (prefixed with NOTELENS_)
2. ~/.notelens/.env file

Key settings:
- NOTELENS_DEBOUNCE_MS: Quiet period before a typed query is searched (default: 100)
- NOTELENS_HIGHLIGHT_CACHE_SIZE / NOTELENS_HIGHLIGHT_TTL_SECONDS: Highlight cache bounds
- NOTELENS_VAULT_URL: Note store server URL (default: http://localhost:8000)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """notelens configuration settings."""

    app_name: str = "notelens"

    # Search pipeline
    debounce_ms: int = 100
    search_limit: int = 50

    # Highlight cache
    highlight_cache_size: int = 100
    highlight_ttl_seconds: float = 300.0
    highlight_key_prefix: int = 100
    highlight_class: Optional[str] = None

    # Note store
    vault_url: str = "http://localhost:8000"
    request_timeout: float = 10.0

    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="NOTELENS_",
        env_file=Path.home() / ".notelens" / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("debounce_ms")
    @classmethod
    def _non_negative_debounce(cls, value: int) -> int:
        if value < 0:
            raise ValueError("NOTELENS_DEBOUNCE_MS must not be negative")
        return value

    @field_validator(
        "highlight_cache_size",
        "highlight_ttl_seconds",
        "highlight_key_prefix",
        "search_limit",
        "request_timeout",
    )
    @classmethod
    def _positive(cls, value):
        if value <= 0:
            raise ValueError("value must be greater than zero")
        return value

    @field_validator("vault_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        cleaned = value.strip().rstrip("/")
        if not cleaned:
            raise ValueError("NOTELENS_VAULT_URL cannot be empty")
        return cleaned

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings."""
    return Settings()


def reload_settings() -> Settings:
    """Clear cached settings (useful for tests) and reload."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
