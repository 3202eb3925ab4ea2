"""Daily snapshot store.

Keeps at most one snapshot per calendar date. Capturing again on a date that
already has a snapshot overwrites it in place, so the scheduled 23:59 capture
and a manual "save now" on the same day converge on a single record.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import date, datetime, tzinfo
from typing import Callable, Iterable, Optional

from daily_todo.errors import NotFoundError
from daily_todo.models import DailySnapshot, Task, utcnow

logger = logging.getLogger(__name__)


def snapshot_date(now: datetime, tz: tzinfo) -> str:
    """Return the ISO calendar date of *now* as seen in *tz*."""
    return now.astimezone(tz).date().isoformat()


class SnapshotStore:
    """Ordered collection of daily snapshots keyed by ISO date.

    Parameters
    ----------
    tz : tzinfo
        Zone whose calendar decides which date a capture belongs to.
    clock : callable, optional
        Returns the current aware datetime; defaults to UTC now.
    """

    def __init__(self, tz: tzinfo, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._snapshots: list[DailySnapshot] = []
        self._lock = threading.Lock()
        self._tz = tz
        self._clock = clock or utcnow

    def today(self) -> str:
        return snapshot_date(self._clock(), self._tz)

    def capture_from(self, tasks: Iterable[Task]) -> DailySnapshot:
        """Store a frozen copy of *tasks* as today's snapshot."""
        saved_at = self._clock()
        snapshot = DailySnapshot(
            id=str(uuid.uuid4()),
            date=snapshot_date(saved_at, self._tz),
            tasks=[task.copy_task() for task in tasks],
            saved_at=saved_at,
        )
        with self._lock:
            for index, existing in enumerate(self._snapshots):
                if existing.date == snapshot.date:
                    self._snapshots[index] = snapshot
                    logger.info(
                        "Overwrote snapshot for %s (%d tasks)", snapshot.date, len(snapshot.tasks)
                    )
                    break
            else:
                self._snapshots.append(snapshot)
                logger.info("Saved snapshot for %s (%d tasks)", snapshot.date, len(snapshot.tasks))
            return snapshot.copy_snapshot()

    def list(self) -> list[DailySnapshot]:
        with self._lock:
            return [snapshot.copy_snapshot() for snapshot in self._snapshots]

    def find_by_date(self, day: str | date) -> DailySnapshot:
        """Return the snapshot whose date equals *day* exactly.

        Raises
        ------
        NotFoundError
            If no snapshot exists for *day*.
        """
        key = day.isoformat() if isinstance(day, date) else day
        with self._lock:
            for snapshot in self._snapshots:
                if snapshot.date == key:
                    return snapshot.copy_snapshot()
        raise NotFoundError("Daily save", key)
