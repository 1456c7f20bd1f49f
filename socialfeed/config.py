"""
Runtime configuration helpers for the FastAPI application.

Loads DATABASE_URL, session cookie flags and CORS origins from the
environment, falling back to the .env file in the project root.
"""

from __future__ import annotations

import os
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Final, Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)

DEFAULT_CORS_ORIGINS: Final[tuple[str, ...]] = (
    "https://advvoc.onrender.com",
    "https://advvoc-frontend.onrender.com",
    "http://localhost:5500",
)


class MissingSecretError(RuntimeError):
    """Raised when a required secret environment variable is not set."""


_PLACEHOLDER_VALUES: Final[set[str]] = {
    "changeme",
    "change-me",
    "placeholder",
    "example",
    "your-key-here",
    "dev_secret",
}


class Settings(BaseSettings):
    # Required field — must come from the environment or .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="Social Feed Backend", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: str | None = Field(default=None, alias="CORS_ORIGINS")

    session_cookie_name: str = Field(default="sid", alias="SESSION_COOKIE_NAME")
    session_ttl_days: int = Field(default=14, ge=1, alias="SESSION_TTL_DAYS")
    session_rolling: bool = Field(default=False, alias="SESSION_ROLLING")
    session_cookie_secure: bool = Field(default=True, alias="SESSION_COOKIE_SECURE")
    session_cookie_samesite: Literal["lax", "strict", "none"] = Field(default="none", alias="SESSION_COOKIE_SAMESITE")

    disable_cleanup: bool = Field(default=False, alias="DISABLE_CLEANUP")
    cleanup_interval_minutes: int = Field(default=60, ge=1, alias="CLEANUP_INTERVAL_MINUTES")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(days=self.session_ttl_days)

    @property
    def allowed_origins(self) -> list[str]:
        if not self.cors_origins:
            return list(DEFAULT_CORS_ORIGINS)
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def is_placeholder(value: str | None) -> bool:
    if not value:
        return True
    normalized = value.strip().lower()
    return not normalized or normalized in _PLACEHOLDER_VALUES


def require_secret(name: str) -> str:
    """Return a trimmed secret value or raise :class:`MissingSecretError`."""

    value = os.getenv(name)
    if is_placeholder(value):
        raise MissingSecretError(f"Environment variable {name} is required and must not use placeholder defaults")
    return value.strip()


__all__ = [
    "DEFAULT_CORS_ORIGINS",
    "MissingSecretError",
    "Settings",
    "get_settings",
    "is_placeholder",
    "require_secret",
]
