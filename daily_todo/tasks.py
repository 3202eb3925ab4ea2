"""In-memory task store.

Owns the live task list. Every read hands out copies and every mutation
happens inside one critical section, so route handlers (run on FastAPI's
thread pool) and the snapshot timer never observe a half-applied change.
Calendar sync runs outside the lock and can only ever add sync fields.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Iterable, Optional

from daily_todo.calendar_sync import CalendarSyncAdapter, NullCalendarAdapter
from daily_todo.errors import NotFoundError, TaskValidationError
from daily_todo.models import Task, TaskCreate, TaskPriority, TaskUpdate, utcnow

logger = logging.getLogger(__name__)

# Fields a client may not clear with an explicit null.
NON_NULLABLE_FIELDS = frozenset({"title", "description", "priority", "section", "completed"})


def _check_title(title: str) -> None:
    if not title or not title.strip():
        raise TaskValidationError("Title must not be empty")


class TaskStore:
    """Authoritative collection of live tasks, in insertion order."""

    def __init__(self, calendar: Optional[CalendarSyncAdapter] = None) -> None:
        self._tasks: list[Task] = []
        self._lock = threading.Lock()
        self._calendar = calendar or NullCalendarAdapter()

    # -- reads ---------------------------------------------------------------

    def list(
        self,
        priority: Optional[TaskPriority] = None,
        completed: Optional[bool] = None,
        section: Optional[str] = None,
    ) -> list[Task]:
        """Return copies of the live tasks, optionally filtered."""
        with self._lock:
            tasks = [task.copy_task() for task in self._tasks]
        if priority is not None:
            tasks = [t for t in tasks if t.priority == priority]
        if completed is not None:
            tasks = [t for t in tasks if t.completed == completed]
        if section is not None:
            tasks = [t for t in tasks if t.section == section]
        return tasks

    def get(self, task_id: str) -> Task:
        with self._lock:
            return self._tasks[self._index(task_id)].copy_task()

    # -- mutations -----------------------------------------------------------

    def create(self, fields: TaskCreate) -> Task:
        """Add a new task, then try to mirror it to the calendar."""
        _check_title(fields.title)
        now = utcnow()
        task = Task(
            id=str(uuid.uuid4()),
            title=fields.title,
            description=fields.description,
            due_date=fields.due_date,
            priority=fields.priority,
            section=fields.section,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._tasks.append(task)
            created = task.copy_task()
        logger.info("Created task %s", created.id)

        if not self._calendar.enabled:
            return created

        result = self._calendar.create_event(created)
        if not result.ok:
            logger.warning("Failed to sync task %s to calendar: %s", created.id, result.error)
            return created

        logger.info("Task %s synced to calendar as %s", created.id, result.remote_event_id)
        with self._lock:
            try:
                index = self._index(created.id)
            except NotFoundError:
                # Deleted or replaced while the calendar call was in flight.
                logger.warning(
                    "Task %s vanished before its calendar event %s was recorded",
                    created.id, result.remote_event_id,
                )
                return created.model_copy(
                    update={"synced_to_gcal": True, "gcal_event_id": result.remote_event_id}
                )
            stored = self._tasks[index]
            stored.synced_to_gcal = True
            stored.gcal_event_id = result.remote_event_id
            return stored.copy_task()

    def update(self, task_id: str, changes: TaskUpdate) -> Task:
        """Apply only the fields that were explicitly set on *changes*."""
        data = changes.model_dump(exclude_unset=True)
        for key, value in data.items():
            if value is None and key in NON_NULLABLE_FIELDS:
                raise TaskValidationError(f"{key} cannot be null")
        if "title" in data:
            _check_title(data["title"])

        with self._lock:
            return self._apply_locked(self._index(task_id), data)

    def toggle_complete(self, task_id: str) -> Task:
        with self._lock:
            index = self._index(task_id)
            return self._apply_locked(index, {"completed": not self._tasks[index].completed})

    def delete(self, task_id: str) -> Task:
        """Remove a task, cleaning up its calendar event when it has one."""
        with self._lock:
            task = self._tasks.pop(self._index(task_id))
        logger.info("Deleted task %s", task_id)

        if task.synced_to_gcal and task.gcal_event_id:
            result = self._calendar.delete_event(task.gcal_event_id)
            if result.ok:
                logger.info("Removed calendar event %s", task.gcal_event_id)
            else:
                logger.warning(
                    "Failed to remove calendar event %s for task %s: %s",
                    task.gcal_event_id, task_id, result.error,
                )
        return task

    def replace_all(self, tasks: Iterable[Task]) -> list[Task]:
        """Discard every live task and install *tasks* in their place."""
        fresh = [task.copy_task() for task in tasks]
        with self._lock:
            self._tasks = fresh
            return [task.copy_task() for task in self._tasks]

    # -- private helpers -----------------------------------------------------

    def _apply_locked(self, index: int, data: dict) -> Task:
        """Merge *data* into the task at *index*; caller must hold the lock."""
        current = self._tasks[index]
        updated = Task.model_validate({**current.model_dump(), **data, "updated_at": utcnow()})
        self._tasks[index] = updated
        return updated.copy_task()

    def _index(self, task_id: str) -> int:
        """Position of *task_id*; caller must hold the lock."""
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        raise NotFoundError("Todo", task_id)
