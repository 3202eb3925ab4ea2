from datetime import time

from daily_todo.config import Settings


def test_defaults(monkeypatch):
    for name in ("CORS_ORIGINS", "SNAPSHOT_TIMEZONE", "SNAPSHOT_TIME", "SNAPSHOT_SCHEDULER_ENABLED"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()
    assert settings.snapshot_timezone == "UTC"
    assert settings.snapshot_time == time(23, 59)
    assert settings.scheduler_enabled is True
    assert "http://localhost:5173" in settings.cors_origins


def test_overrides(monkeypatch):
    monkeypatch.setenv("SNAPSHOT_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("SNAPSHOT_TIME", "21:30")
    monkeypatch.setenv("SNAPSHOT_SCHEDULER_ENABLED", "false")
    monkeypatch.setenv("GOOGLE_API_TIMEOUT", "not-a-number")

    settings = Settings.from_env()
    assert settings.tzinfo.key == "Europe/Berlin"
    assert settings.snapshot_time == time(21, 30)
    assert settings.scheduler_enabled is False
    assert settings.google_api_timeout == 10.0
