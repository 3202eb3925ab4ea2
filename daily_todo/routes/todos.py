"""CRUD endpoints for todos."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from daily_todo.errors import NotFoundError, TaskValidationError
from daily_todo.models import Task, TaskCreate, TaskPriority, TaskUpdate
from daily_todo.storage import get_task_store
from daily_todo.tasks import TaskStore

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.get("")
def list_todos(
    priority: Optional[TaskPriority] = None,
    completed: Optional[bool] = None,
    section: Optional[str] = None,
    store: TaskStore = Depends(get_task_store),
) -> list[Task]:
    """List all todos in insertion order, optionally filtered."""
    return store.list(priority=priority, completed=completed, section=section)


@router.get("/{todo_id}")
def get_todo(todo_id: str, store: TaskStore = Depends(get_task_store)) -> Task:
    """Get a single todo by ID."""
    try:
        return store.get(todo_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Todo not found")


@router.post("", status_code=201)
def create_todo(body: TaskCreate, store: TaskStore = Depends(get_task_store)) -> Task:
    """Create a new todo and mirror it to the calendar when configured."""
    try:
        return store.create(body)
    except TaskValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.put("/{todo_id}")
def update_todo(
    todo_id: str, body: TaskUpdate, store: TaskStore = Depends(get_task_store)
) -> Task:
    """Update an existing todo. Only provided fields are changed."""
    try:
        return store.update(todo_id, body)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Todo not found")
    except TaskValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/{todo_id}/toggle")
def toggle_todo(todo_id: str, store: TaskStore = Depends(get_task_store)) -> Task:
    """Flip the completed flag of a todo."""
    try:
        return store.toggle_complete(todo_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Todo not found")


@router.delete("/{todo_id}")
def delete_todo(todo_id: str, store: TaskStore = Depends(get_task_store)) -> dict:
    """Delete a todo by ID."""
    try:
        store.delete(todo_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Todo not found")
    return {"message": "Todo deleted successfully"}
