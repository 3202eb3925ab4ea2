"""Settings loaded from environment variables."""

import os
from dataclasses import dataclass
from datetime import time
from functools import lru_cache
from zoneinfo import ZoneInfo

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_clock(raw: str) -> time:
    """Parse an ``HH:MM`` wall-clock string."""
    hours, _, minutes = raw.strip().partition(":")
    return time(hour=int(hours), minute=int(minutes or 0))


@dataclass(frozen=True)
class Settings:
    cors_origins: list[str]
    google_access_token: str
    google_calendar_id: str
    google_api_timeout: float
    snapshot_timezone: str
    snapshot_time: time
    scheduler_enabled: bool
    log_level: str

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.snapshot_timezone)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            cors_origins=os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(","),
            google_access_token=os.getenv("GOOGLE_ACCESS_TOKEN", ""),
            google_calendar_id=os.getenv("GOOGLE_CALENDAR_ID", "primary"),
            google_api_timeout=_env_float("GOOGLE_API_TIMEOUT", 10.0),
            snapshot_timezone=os.getenv("SNAPSHOT_TIMEZONE", "UTC"),
            snapshot_time=_parse_clock(os.getenv("SNAPSHOT_TIME", "23:59")),
            scheduler_enabled=_env_bool("SNAPSHOT_SCHEDULER_ENABLED", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read once."""
    return Settings.from_env()
