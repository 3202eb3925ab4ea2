"""Calendar sync adapters.

The task store mirrors new tasks into an external calendar through a
``CalendarSyncAdapter``. Sync is advisory: adapters never raise, they return
a ``SyncResult`` and the store logs failures and carries on.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from daily_todo.config import Settings
from daily_todo.models import Task

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"
DEFAULT_EVENT_DURATION = timedelta(hours=1)


@dataclass(frozen=True)
class SyncResult:
    ok: bool
    remote_event_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "SyncResult":
        return cls(ok=False, error=error)


class CalendarSyncAdapter:
    """Interface for mirroring tasks as calendar events."""

    enabled = True

    def create_event(self, task: Task) -> SyncResult:
        raise NotImplementedError

    def delete_event(self, remote_event_id: str) -> SyncResult:
        raise NotImplementedError

    def close(self) -> None:
        """Release any connections held by the adapter."""


class NullCalendarAdapter(CalendarSyncAdapter):
    """Adapter used when no calendar credential is configured."""

    enabled = False

    def create_event(self, task: Task) -> SyncResult:
        return SyncResult.failed("calendar sync not configured")

    def delete_event(self, remote_event_id: str) -> SyncResult:
        return SyncResult.failed("calendar sync not configured")


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes from the UI are treated as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def build_event(task: Task, now: Optional[datetime] = None) -> dict:
    """Build a Google Calendar event body for *task*.

    A task with a due date becomes a zero-length event at that instant;
    without one the event starts now and lasts an hour.
    """
    now = now or datetime.now(timezone.utc)
    if task.due_date is not None:
        start = end = _as_utc(task.due_date)
    else:
        start = _as_utc(now)
        end = start + DEFAULT_EVENT_DURATION

    return {
        "summary": f"📝 {task.title}",
        "description": task.description or "Todo task",
        "start": {"dateTime": start.isoformat(), "timeZone": "UTC"},
        "end": {"dateTime": end.isoformat(), "timeZone": "UTC"},
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "email", "minutes": 24 * 60},
                {"method": "popup", "minutes": 30},
            ],
        },
    }


class GoogleCalendarAdapter(CalendarSyncAdapter):
    """Google Calendar v3 REST adapter authenticated with a bearer token."""

    def __init__(
        self,
        access_token: str,
        calendar_id: str = "primary",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._calendar_id = calendar_id
        self._client = httpx.Client(
            base_url=GOOGLE_CALENDAR_API,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
            transport=transport,
        )

    def _events_path(self) -> str:
        return f"/calendars/{self._calendar_id}/events"

    def create_event(self, task: Task) -> SyncResult:
        try:
            response = self._client.post(self._events_path(), json=build_event(task))
            response.raise_for_status()
            event_id = response.json()["id"]
        except httpx.TimeoutException:
            return SyncResult.failed("calendar request timed out")
        except httpx.HTTPStatusError as e:
            return SyncResult.failed(f"calendar returned {e.response.status_code}")
        except (httpx.HTTPError, ValueError, KeyError) as e:
            return SyncResult.failed(f"calendar request failed: {e}")
        return SyncResult(ok=True, remote_event_id=event_id)

    def delete_event(self, remote_event_id: str) -> SyncResult:
        try:
            response = self._client.delete(f"{self._events_path()}/{remote_event_id}")
            response.raise_for_status()
        except httpx.TimeoutException:
            return SyncResult.failed("calendar request timed out")
        except httpx.HTTPStatusError as e:
            return SyncResult.failed(f"calendar returned {e.response.status_code}")
        except httpx.HTTPError as e:
            return SyncResult.failed(f"calendar request failed: {e}")
        return SyncResult(ok=True, remote_event_id=remote_event_id)

    def close(self) -> None:
        self._client.close()


def build_calendar_adapter(settings: Settings) -> CalendarSyncAdapter:
    """Pick the Google adapter when an access token is configured."""
    if not settings.google_access_token:
        logger.info("GOOGLE_ACCESS_TOKEN not set, calendar sync disabled")
        return NullCalendarAdapter()
    return GoogleCalendarAdapter(
        settings.google_access_token,
        calendar_id=settings.google_calendar_id,
        timeout=settings.google_api_timeout,
    )
