"""Process-wide in-memory stores and their FastAPI dependency providers.

State lives only as long as the process; a restart starts empty.
"""

from daily_todo.calendar_sync import build_calendar_adapter
from daily_todo.config import get_settings
from daily_todo.scheduler import SnapshotScheduler
from daily_todo.snapshots import SnapshotStore
from daily_todo.tasks import TaskStore

settings = get_settings()

calendar = build_calendar_adapter(settings)
task_store = TaskStore(calendar=calendar)
snapshot_store = SnapshotStore(tz=settings.tzinfo)
scheduler = SnapshotScheduler(
    task_store,
    snapshot_store,
    tz=settings.tzinfo,
    at=settings.snapshot_time,
)


def get_task_store() -> TaskStore:
    """Return the live task store for FastAPI dependency injection."""
    return task_store


def get_snapshot_store() -> SnapshotStore:
    return snapshot_store


def get_scheduler() -> SnapshotScheduler:
    return scheduler
