"""Restore the live task list from a daily snapshot."""

import logging
import uuid

from daily_todo.models import DEFAULT_SECTION, Task, utcnow
from daily_todo.snapshots import SnapshotStore
from daily_todo.tasks import TaskStore

logger = logging.getLogger(__name__)


def restore_snapshot(day: str, snapshot_store: SnapshotStore, task_store: TaskStore) -> list[Task]:
    """Replace every live task with fresh copies of the tasks saved on *day*.

    Restored tasks get new ids and timestamps and are never considered
    synced to the calendar. The previous live set is discarded.

    Raises
    ------
    NotFoundError
        If there is no snapshot for *day*; the live tasks are left untouched.
    """
    snapshot = snapshot_store.find_by_date(day)
    now = utcnow()
    fresh = [
        Task(
            id=str(uuid.uuid4()),
            title=saved.title,
            description=saved.description,
            due_date=saved.due_date,
            priority=saved.priority,
            section=saved.section or DEFAULT_SECTION,
            completed=saved.completed,
            created_at=now,
            updated_at=now,
            synced_to_gcal=False,
            gcal_event_id=None,
        )
        for saved in snapshot.tasks
    ]
    restored = task_store.replace_all(fresh)
    logger.info("Restored %d tasks from daily save %s", len(restored), snapshot.date)
    return restored
