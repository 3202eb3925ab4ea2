"""Shared fixtures: fresh in-memory stores and a controllable clock."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from daily_todo.calendar_sync import CalendarSyncAdapter, SyncResult
from daily_todo.main import app
from daily_todo.scheduler import SnapshotScheduler
from daily_todo.snapshots import SnapshotStore
from daily_todo.storage import get_scheduler, get_snapshot_store, get_task_store
from daily_todo.tasks import TaskStore


class FakeClock:
    """Callable returning a settable 'now'."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeTimer:
    """Stands in for threading.Timer; tests fire it by hand."""

    def __init__(self, interval, function) -> None:
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True


@pytest.fixture(name="clock")
def clock_fixture():
    return FakeClock(datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc))


@pytest.fixture(name="calendar")
def calendar_fixture():
    """A calendar adapter mock whose calls succeed by default."""
    calendar = MagicMock(spec=CalendarSyncAdapter)
    calendar.enabled = True
    calendar.create_event.return_value = SyncResult(ok=True, remote_event_id="evt-1")
    calendar.delete_event.return_value = SyncResult(ok=True, remote_event_id="evt-1")
    return calendar


@pytest.fixture(name="task_store")
def task_store_fixture():
    return TaskStore()


@pytest.fixture(name="snapshot_store")
def snapshot_store_fixture(clock: FakeClock):
    return SnapshotStore(tz=timezone.utc, clock=clock)


@pytest.fixture(name="timers")
def timers_fixture():
    return []


@pytest.fixture(name="scheduler")
def scheduler_fixture(task_store, snapshot_store, clock, timers):
    def timer_factory(interval, function):
        timer = FakeTimer(interval, function)
        timers.append(timer)
        return timer

    return SnapshotScheduler(
        task_store,
        snapshot_store,
        tz=timezone.utc,
        clock=clock,
        timer_factory=timer_factory,
    )


@pytest.fixture(name="client")
def client_fixture(task_store, snapshot_store, scheduler):
    """Create a test client wired to this test's fresh stores."""
    app.dependency_overrides[get_task_store] = lambda: task_store
    app.dependency_overrides[get_snapshot_store] = lambda: snapshot_store
    app.dependency_overrides[get_scheduler] = lambda: scheduler
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
