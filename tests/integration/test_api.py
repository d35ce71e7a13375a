"""Integration tests for the HTTP API against a real SQLite database."""

from functools import partial

import pytest
from fastapi.testclient import TestClient

from src.services import home_service


def _create_home(client: TestClient, *, user_id: str = "1", name: str = "Flat") -> dict:
    """Create a home on the app's event loop so it shares the app's connection."""
    return client.portal.call(partial(home_service.create_home, user_id=user_id, name=name))


@pytest.mark.integration
def test_create_and_list_tasks(client: TestClient) -> None:
    """Created tasks are listed for their home."""
    home = _create_home(client)

    response = client.post(
        f"/homes/{home['id']}/tasks",
        json={
            "title": "Water the plants",
            "created_by": "1",
            "due_date": "2024-01-01T00:00:00+00:00",
            "recurrence_days": 3,
        },
    )
    assert response.status_code == 201
    task = response.json()
    assert task["status"] == "pending"

    listed = client.get(f"/homes/{home['id']}/tasks").json()
    assert [t["id"] for t in listed] == [task["id"]]

    filtered = client.get(f"/homes/{home['id']}/tasks", params={"status": "completed"}).json()
    assert filtered == []


@pytest.mark.integration
def test_invalid_recurrence_is_bad_request(client: TestClient) -> None:
    """A recurring task without a due date is rejected with a structured error."""
    home = _create_home(client)

    response = client.post(
        f"/homes/{home['id']}/tasks",
        json={"title": "Dust", "created_by": "1", "recurrence_days": 7},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "ERR_INVALID_RECURRENCE"


@pytest.mark.integration
def test_create_task_in_unknown_home(client: TestClient) -> None:
    """Unknown homes are reported as not found."""
    response = client.post("/homes/999/tasks", json={"title": "Dust", "created_by": "1"})

    assert response.status_code == 404
    assert response.json()["detail"]["category"] == "record_not_found"


@pytest.mark.integration
def test_complete_and_sweep(client: TestClient) -> None:
    """Completion advances the due date and the schedule check reactivates on the due day."""
    home = _create_home(client)
    task = client.post(
        f"/homes/{home['id']}/tasks",
        json={
            "title": "Mop floors",
            "created_by": "1",
            "due_date": "2024-01-01T00:00:00+00:00",
            "recurrence_days": 7,
        },
    ).json()

    completed = client.patch(f"/tasks/{task['id']}/status", json={"status": "completed"})
    assert completed.status_code == 200
    assert completed.json()["due_date"] == "2024-01-08T00:00:00+00:00"

    early = client.post("/schedule-check", json={"home_ids": [home["id"]], "today": "2024-01-07"})
    assert early.status_code == 200
    assert early.json()["reactivated"] == []

    on_time = client.post("/schedule-check", json={"home_ids": [home["id"]], "today": "2024-01-08"})
    assert on_time.status_code == 200
    body = on_time.json()
    assert body["reactivated"] == [task["id"]]
    assert body["failed"] == {}

    listed = client.get(f"/homes/{home['id']}/tasks").json()
    assert listed[0]["status"] == "pending"
    assert listed[0]["due_date"] == "2024-01-08T00:00:00+00:00"


@pytest.mark.integration
def test_schedule_check_with_no_homes(client: TestClient) -> None:
    """An empty home set is a no-op, not an error."""
    response = client.post("/schedule-check", json={"home_ids": []})

    assert response.status_code == 200
    assert response.json()["scanned"] == 0


@pytest.mark.integration
def test_status_change_for_missing_task(client: TestClient) -> None:
    """Unknown tasks are reported as not found."""
    response = client.patch("/tasks/999/status", json={"status": "completed"})

    assert response.status_code == 404


@pytest.mark.integration
def test_invalid_status_rejected(client: TestClient) -> None:
    """Statuses outside the lifecycle are rejected by request validation."""
    response = client.patch("/tasks/1/status", json={"status": "archived"})

    assert response.status_code == 422


@pytest.mark.integration
def test_delete_task(client: TestClient) -> None:
    """Deleted tasks disappear and a second delete is not found."""
    home = _create_home(client)
    task = client.post(f"/homes/{home['id']}/tasks", json={"title": "Dust", "created_by": "1"}).json()

    assert client.delete(f"/tasks/{task['id']}").status_code == 204
    assert client.delete(f"/tasks/{task['id']}").status_code == 404
    assert client.get(f"/homes/{home['id']}/tasks").json() == []
