"""Configuration settings for pomocal with caching utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Any

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=[".env.test", ".env"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google OAuth / Calendar
    google_client_id: SecretStr | None = None
    google_client_secret: SecretStr | None = None
    google_redirect_uri: str | None = None
    google_calendar_id: str = "primary"
    google_token_path: Path = Path("tokens.json")
    calendar_time_zone: str = "UTC"

    # Calendar sync
    calendar_refresh_seconds: float = Field(default=60.0, gt=0)
    calendar_window_minutes: int = Field(default=180, gt=0)
    calendar_max_results: int = Field(default=10, gt=0)
    calendar_poll_seconds: float = Field(default=60.0, gt=0)

    # Timer defaults (minutes)
    timer_focus_minutes: int = Field(default=25, ge=1, le=60)
    timer_short_break_minutes: int = Field(default=5, ge=1, le=60)
    timer_long_break_minutes: int = Field(default=15, ge=1, le=60)

    # HTTP
    api_host: str = "0.0.0.0"  # nosec: B104
    api_port: int = 8000
    api_debug: bool = False
    session_secret: SecretStr = SecretStr("alegra-time-secret-key")
    session_max_age_seconds: int = 24 * 60 * 60
    demo_username: str = "demo"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"
    log_dir: Path = Path("logs")

    # Environment
    environment: str = "development"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment.lower() in ["development", "dev"]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ["production", "prod"]

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode"""
        return self.environment.lower() in ["testing", "test"]

    @property
    def has_google_credentials(self) -> bool:
        """True when every value needed to talk to Google OAuth is present."""
        return bool(
            self.google_client_id
            and self.google_client_secret
            and self.google_redirect_uri
        )


_SETTINGS_LOCK = RLock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, refresh: bool = False) -> Settings:
    """Return a cached ``Settings`` instance.

    Parameters
    ----------
    refresh:
        When ``True`` the cached instance is discarded and a new one is created.
    """

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        if refresh or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear the cached settings instance."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


get_settings.cache_clear = clear_settings_cache  # type: ignore[attr-defined]


@contextmanager
def override_settings(**overrides: Any) -> Iterator[Settings]:
    """Temporarily override the cached settings within a context."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        previous_settings = _SETTINGS_CACHE

    base_settings = previous_settings or Settings()
    patched_settings = base_settings.model_copy(update=overrides)

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = patched_settings

    try:
        yield patched_settings
    finally:
        with _SETTINGS_LOCK:
            _SETTINGS_CACHE = previous_settings
