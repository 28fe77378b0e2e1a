"""Application configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOGGER = logging.getLogger(__name__)

_LEGACY_ZONE_NAMES = {"Europe/Kyiv": "Europe/Kiev"}


class Settings(BaseSettings):
    """Environment-driven settings validated at startup."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    telegram_bot_token: str = Field(..., alias="TELEGRAM_BOT_TOKEN")
    telegram_api_base_url: str = Field(default="https://api.telegram.org", alias="TELEGRAM_API_BASE_URL")
    telegram_poll_timeout_seconds: int = Field(default=30, alias="TELEGRAM_POLL_TIMEOUT_SECONDS")
    bot_username: str = Field(default="KPI_reschedule_bot", alias="BOT_USERNAME")
    schedule_api_base_url: str = Field(default="https://schedule.kpi.ua/api/", alias="SCHEDULE_API_BASE_URL")
    database_path: Path = Field(default=Path("reschedule.db"), alias="DATABASE_PATH")
    timezone: str = Field(default="Europe/Kyiv", alias="TIMEZONE")
    groups_cache_ttl_hours: float = Field(default=12, alias="GROUPS_CACHE_TTL_HOURS")
    schedule_cache_ttl_hours: float = Field(default=6, alias="SCHEDULE_CACHE_TTL_HOURS")
    cache_max_entries: int = Field(default=256, alias="CACHE_MAX_ENTRIES")
    request_timeout_seconds: float = Field(default=30.0, alias="REQUEST_TIMEOUT_SECONDS")


def load_settings() -> Settings:
    """Load and validate settings."""

    return Settings()


def resolve_timezone(name: str) -> ZoneInfo:
    """Return the configured civil timezone.

    Older tz databases only know Kyiv under its legacy spelling.
    """
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        legacy = _LEGACY_ZONE_NAMES.get(name)
        if legacy is None:
            raise
        LOGGER.warning("Timezone %r not found, trying %r", name, legacy)
        return ZoneInfo(legacy)
