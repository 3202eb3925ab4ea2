"""Task and daily snapshot models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel

DEFAULT_SECTION = "Today"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class TaskBase(SQLModel):
    """Fields a user supplies when creating a task."""
    title: str
    description: str = Field(default="")
    due_date: Optional[datetime] = Field(default=None)
    priority: TaskPriority = Field(default=TaskPriority.medium)
    section: str = Field(default=DEFAULT_SECTION)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title must not be empty")
        return v


class Task(TaskBase):
    """A live task as held by the task store."""
    id: str
    completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    synced_to_gcal: bool = Field(default=False)
    gcal_event_id: Optional[str] = Field(default=None)

    def copy_task(self) -> "Task":
        """Return an independent copy of this task."""
        return Task.model_validate(self.model_dump())


class TaskCreate(TaskBase):
    """Schema for creating a task. Title is required, rest have defaults."""
    pass


class TaskUpdate(SQLModel):
    """Schema for updating a task. All fields optional.

    Only keys present in the request are applied, so ``"completed": false``
    marks a task incomplete while a missing key leaves it alone.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None
    section: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Title must not be empty")
        return v


class DailySnapshot(SQLModel):
    """Frozen copy of the whole task list, keyed by calendar date."""
    id: str
    date: str
    tasks: list[Task] = Field(default_factory=list)
    saved_at: datetime = Field(default_factory=utcnow)

    def copy_snapshot(self) -> "DailySnapshot":
        return DailySnapshot(
            id=self.id,
            date=self.date,
            tasks=[task.copy_task() for task in self.tasks],
            saved_at=self.saved_at,
        )
