"""Daily save (snapshot) endpoints: save now, browse, and restore."""

from fastapi import APIRouter, Depends, HTTPException

from daily_todo.errors import NotFoundError
from daily_todo.models import DailySnapshot
from daily_todo.restore import restore_snapshot
from daily_todo.scheduler import SnapshotScheduler
from daily_todo.snapshots import SnapshotStore
from daily_todo.storage import get_scheduler, get_snapshot_store, get_task_store
from daily_todo.tasks import TaskStore

router = APIRouter(prefix="/api", tags=["daily-saves"])


@router.post("/daily-save")
def save_now(scheduler: SnapshotScheduler = Depends(get_scheduler)) -> DailySnapshot:
    """Capture today's snapshot now, overwriting any earlier one from today."""
    return scheduler.trigger_now()


@router.get("/daily-saves")
def list_daily_saves(
    snapshots: SnapshotStore = Depends(get_snapshot_store),
) -> list[DailySnapshot]:
    return snapshots.list()


@router.get("/daily-saves/{date}")
def get_daily_save(
    date: str, snapshots: SnapshotStore = Depends(get_snapshot_store)
) -> DailySnapshot:
    """Get the snapshot saved on an exact ISO date (YYYY-MM-DD)."""
    try:
        return snapshots.find_by_date(date)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Daily save not found")


@router.post("/daily-saves/{date}/restore")
def restore_daily_save(
    date: str,
    snapshots: SnapshotStore = Depends(get_snapshot_store),
    tasks: TaskStore = Depends(get_task_store),
) -> dict:
    """Replace every live todo with the ones saved on *date*. Irreversible."""
    try:
        restored = restore_snapshot(date, snapshots, tasks)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Daily save not found")
    return {
        "message": f"Restored {len(restored)} todos from {date}",
        "date": date,
        "todos": [task.model_dump(mode="json") for task in restored],
    }
