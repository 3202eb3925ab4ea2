"""Tests for the todo CRUD endpoints."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from daily_todo.calendar_sync import SyncResult
from daily_todo.main import app
from daily_todo.storage import get_task_store
from daily_todo.tasks import TaskStore


def test_create_todo_applies_defaults(client: TestClient):
    """A todo created with only a title gets the documented defaults."""
    response = client.post("/api/todos", json={"title": "Buy milk"})
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Buy milk"
    assert data["description"] == ""
    assert data["due_date"] is None
    assert data["priority"] == "medium"
    assert data["section"] == "Today"
    assert data["completed"] is False
    assert data["synced_to_gcal"] is False
    assert data["gcal_event_id"] is None
    assert data["id"]


def test_create_todo_rejects_blank_title(client: TestClient):
    response = client.post("/api/todos", json={"title": "   "})
    assert response.status_code == 422
    assert client.get("/api/todos").json() == []


def test_create_todo_requires_title(client: TestClient):
    response = client.post("/api/todos", json={"description": "no title"})
    assert response.status_code == 422


def test_list_todos_keeps_insertion_order(client: TestClient):
    for title in ("first", "second", "third"):
        client.post("/api/todos", json={"title": title})

    response = client.get("/api/todos")
    assert response.status_code == 200
    assert [t["title"] for t in response.json()] == ["first", "second", "third"]


def test_list_todos_filters(client: TestClient):
    client.post("/api/todos", json={"title": "Low", "priority": "low"})
    client.post("/api/todos", json={"title": "High", "priority": "high", "section": "Work"})

    high = client.get("/api/todos", params={"priority": "high"}).json()
    assert [t["title"] for t in high] == ["High"]

    work = client.get("/api/todos", params={"section": "Work"}).json()
    assert [t["title"] for t in work] == ["High"]

    done = client.get("/api/todos", params={"completed": "true"}).json()
    assert done == []


def test_get_todo(client: TestClient):
    todo_id = client.post("/api/todos", json={"title": "Read"}).json()["id"]

    response = client.get(f"/api/todos/{todo_id}")
    assert response.status_code == 200
    assert response.json()["title"] == "Read"


def test_get_missing_todo_returns_404(client: TestClient):
    response = client.get("/api/todos/does-not-exist")
    assert response.status_code == 404
    assert response.json()["detail"] == "Todo not found"


def test_update_todo_explicit_false_marks_incomplete(client: TestClient):
    """``completed: false`` is a change, not an absent field."""
    todo_id = client.post("/api/todos", json={"title": "Pay rent"}).json()["id"]
    client.put(f"/api/todos/{todo_id}", json={"completed": True})

    response = client.put(f"/api/todos/{todo_id}", json={"completed": False})
    assert response.status_code == 200
    data = response.json()
    assert data["completed"] is False
    assert data["title"] == "Pay rent"


def test_update_todo_with_empty_body_changes_nothing(client: TestClient):
    created = client.post(
        "/api/todos",
        json={
            "title": "Write report",
            "description": "Q3 numbers",
            "due_date": "2026-10-20T09:00:00Z",
            "priority": "high",
            "section": "Work",
        },
    ).json()

    response = client.put(f"/api/todos/{created['id']}", json={})
    assert response.status_code == 200
    data = response.json()
    for field in ("title", "description", "due_date", "priority", "section", "completed"):
        assert data[field] == created[field]


def test_update_todo_rejects_blank_title(client: TestClient):
    todo_id = client.post("/api/todos", json={"title": "Keep me"}).json()["id"]

    response = client.put(f"/api/todos/{todo_id}", json={"title": ""})
    assert response.status_code == 422
    assert client.get(f"/api/todos/{todo_id}").json()["title"] == "Keep me"


def test_update_todo_rejects_null_title(client: TestClient):
    todo_id = client.post("/api/todos", json={"title": "Keep me"}).json()["id"]

    response = client.put(f"/api/todos/{todo_id}", json={"title": None})
    assert response.status_code == 422


def test_update_missing_todo_returns_404(client: TestClient):
    response = client.put("/api/todos/missing", json={"title": "x"})
    assert response.status_code == 404


def test_toggle_todo(client: TestClient):
    todo_id = client.post("/api/todos", json={"title": "Stretch"}).json()["id"]

    assert client.post(f"/api/todos/{todo_id}/toggle").json()["completed"] is True
    assert client.post(f"/api/todos/{todo_id}/toggle").json()["completed"] is False
    assert client.post("/api/todos/missing/toggle").status_code == 404


def test_delete_todo(client: TestClient):
    todo_id = client.post("/api/todos", json={"title": "Temporary"}).json()["id"]

    response = client.delete(f"/api/todos/{todo_id}")
    assert response.status_code == 200
    assert response.json() == {"message": "Todo deleted successfully"}
    assert all(t["id"] != todo_id for t in client.get("/api/todos").json())

    again = client.delete(f"/api/todos/{todo_id}")
    assert again.status_code == 404


def test_create_todo_reports_calendar_sync(client: TestClient, calendar):
    """With a working calendar the created todo carries the remote event id."""
    synced_store = TaskStore(calendar=calendar)
    app.dependency_overrides[get_task_store] = lambda: synced_store

    response = client.post("/api/todos", json={"title": "Dentist"})
    assert response.status_code == 201
    data = response.json()
    assert data["synced_to_gcal"] is True
    assert data["gcal_event_id"] == "evt-1"


def test_create_todo_survives_calendar_failure(client: TestClient, calendar):
    calendar.create_event.return_value = SyncResult.failed("calendar returned 401")
    synced_store = TaskStore(calendar=calendar)
    app.dependency_overrides[get_task_store] = lambda: synced_store

    response = client.post("/api/todos", json={"title": "Dentist"})
    assert response.status_code == 201
    assert response.json()["synced_to_gcal"] is False


def test_health_check(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_long_titles_are_accepted(client: TestClient):
    """Titles have no length cap on create or edit."""
    long_title = "x" * 500
    response = client.post("/api/todos", json={"title": long_title})
    assert response.status_code == 201
    assert response.json()["title"] == long_title

    todo_id = response.json()["id"]
    response = client.put(f"/api/todos/{todo_id}", json={"title": "y" * 201})
    assert response.status_code == 200
    assert response.json()["title"] == "y" * 201


def test_lifespan_stops_scheduler_and_closes_calendar():
    """Shutting the app down cancels the timer and closes the calendar client."""
    with patch("daily_todo.main.scheduler") as scheduler, patch(
        "daily_todo.main.calendar"
    ) as calendar:
        with TestClient(app):
            pass

    scheduler.stop.assert_called_once()
    calendar.close.assert_called_once()
