"""Daily snapshot scheduler.

Arms a one-shot timer for the next occurrence of a fixed wall-clock time
(23:59 by default) and re-arms itself after every firing, so one capture
happens per day no matter when the process started.
"""

import functools
import logging
import threading
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Optional

from daily_todo.models import DailySnapshot, utcnow
from daily_todo.snapshots import SnapshotStore
from daily_todo.tasks import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_TIME = time(hour=23, minute=59)


def next_fire_time(now: datetime, at: time, tz: tzinfo) -> datetime:
    """Next occurrence of wall-clock *at* in *tz* strictly after *now*."""
    local_now = now.astimezone(tz)
    candidate = datetime.combine(local_now.date(), at, tzinfo=tz)
    if candidate <= local_now:
        candidate = datetime.combine(local_now.date() + timedelta(days=1), at, tzinfo=tz)
    return candidate


def seconds_until(target: datetime, now: datetime) -> float:
    # Compare in UTC so a DST change between now and target is accounted for.
    delta = target.astimezone(timezone.utc) - now.astimezone(timezone.utc)
    return max(delta.total_seconds(), 0.0)


class SnapshotScheduler:
    """Captures a daily snapshot of the task store on a self-rearming timer.

    ``trigger_now`` is the single capture routine shared by the timer and the
    manual save endpoint.
    """

    def __init__(
        self,
        task_store: TaskStore,
        snapshot_store: SnapshotStore,
        tz: tzinfo,
        at: time = DEFAULT_SNAPSHOT_TIME,
        clock: Optional[Callable[[], datetime]] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        self._task_store = task_store
        self._snapshot_store = snapshot_store
        self._tz = tz
        self._at = at
        self._clock = clock or utcnow
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._running = False
        # Bumped on every start and stop; a firing from an older run never re-arms.
        self._generation = 0
        self.next_fire_at: Optional[datetime] = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Arm the timer. Calling start on a running scheduler is a no-op."""
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            self._arm(self._clock())

    def stop(self) -> None:
        with self._lock:
            self._running = False
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self.next_fire_at = None

    def trigger_now(self) -> DailySnapshot:
        """Capture today's snapshot from the current live tasks."""
        return self._snapshot_store.capture_from(self._task_store.list())

    def _arm(self, after: datetime) -> None:
        """Schedule the next firing; caller must hold the lock."""
        now = self._clock()
        fire_at = next_fire_time(max(now, after), self._at, self._tz)
        delay = seconds_until(fire_at, now)
        timer = self._timer_factory(delay, functools.partial(self._fire, self._generation))
        timer.daemon = True
        timer.start()
        self._timer = timer
        self.next_fire_at = fire_at
        logger.info("Next daily save at %s (in %.0fs)", fire_at.isoformat(), delay)

    def _fire(self, generation: int) -> None:
        try:
            snapshot = self.trigger_now()
            logger.info("Scheduled daily save captured %d tasks", len(snapshot.tasks))
        except Exception:
            logger.exception("Scheduled daily save failed")

        with self._lock:
            if not self._running or generation != self._generation:
                return
            # A timer that fires a little early must not re-arm for the same minute.
            self._arm(self.next_fire_at or self._clock())
