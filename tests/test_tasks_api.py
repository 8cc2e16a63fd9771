import uuid

from fastapi.testclient import TestClient

from quickadd.main import app


def new_project(client: TestClient) -> int:
    r = client.post("/projects", json={"name": f"Proj{uuid.uuid4().hex[:8]}"})
    assert r.status_code == 200, r.text
    return r.json()["id"]


def test_can_create_and_list_tasks():
    with TestClient(app) as client:
        # create
        payload = {"content": "Write CI and tests", "labels": ["dev"]}
        r = client.post("/tasks", json=payload)
        assert r.status_code == 200
        created = r.json()
        assert created["id"] >= 1
        assert created["content"] == payload["content"]
        assert created["priority"] == 4
        assert created["is_completed"] is False

        # list
        r = client.get("/tasks", params={"project_id": created["project_id"], "limit": 1000})
        assert r.status_code == 200
        items = r.json()
        assert isinstance(items, list)
        assert any(t["content"] == payload["content"] for t in items)


def test_order_increments_per_project(client):
    pid = new_project(client)
    orders = [client.post("/tasks", json={"content": f"t{i}", "project_id": pid}).json()["order"] for i in range(3)]
    assert orders == [0, 1, 2]


def test_create_in_missing_project_is_404(client):
    r = client.post("/tasks", json={"content": "orphan", "project_id": 999_999})
    assert r.status_code == 404


def test_get_update_delete(client):
    task = client.post("/tasks", json={"content": "Draft memo"}).json()

    r = client.patch(
        f"/tasks/{task['id']}",
        json={"content": "Draft memo v2", "priority": 1, "due_date": "2026-11-01", "due_time": "08:00"},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["content"] == "Draft memo v2"
    assert body["priority"] == 1
    assert body["due_date"] == "2026-11-01"
    assert body["due_time"] == "08:00"

    r = client.patch(f"/tasks/{task['id']}", json={"due_time": "25:00"})
    assert r.status_code == 422

    assert client.delete(f"/tasks/{task['id']}").json() == {"deleted": True}
    assert client.get(f"/tasks/{task['id']}").status_code == 404
    assert client.delete(f"/tasks/{task['id']}").status_code == 404


def test_filter_by_label(client):
    pid = new_project(client)
    client.post("/tasks", json={"content": "a", "project_id": pid, "labels": ["red"]})
    client.post("/tasks", json={"content": "b", "project_id": pid, "labels": ["blue"]})
    r = client.get("/tasks", params={"project_id": pid, "label": "red"})
    assert [t["content"] for t in r.json()] == ["a"]


def test_complete_and_uncomplete(client):
    task = client.post("/tasks", json={"content": "One-off"}).json()

    done = client.post(f"/tasks/{task['id']}/complete").json()
    assert done["is_completed"] is True
    assert done["completed_at"] is not None
    assert done["history"][-1]["event"] == "completed"

    reopened = client.post(f"/tasks/{task['id']}/uncomplete").json()
    assert reopened["is_completed"] is False
    assert reopened["completed_at"] is None

    assert client.post("/tasks/999999/complete").status_code == 404


def test_complete_recurring_task_moves_due_date(client):
    task = client.post(
        "/tasks",
        json={
            "content": "Water plants",
            "due_date": "2026-10-10",
            "recurrence": {"frequency": "daily", "interval": 3},
        },
    ).json()

    r = client.post(f"/tasks/{task['id']}/complete")
    assert r.status_code == 200
    body = r.json()
    # overdue since Oct 10; first occurrence after the frozen Monday Oct 19
    assert body["due_date"] == "2026-10-22"
    assert body["is_completed"] is False
    assert body["history"][-1]["event"] == "recurrence_advance"
    assert body["history"][-1]["from"] == "2026-10-10"


def test_reorder(client):
    pid = new_project(client)
    ids = [client.post("/tasks", json={"content": c, "project_id": pid}).json()["id"] for c in "abc"]

    r = client.post("/tasks/reorder", json={"project_id": pid, "task_ids": list(reversed(ids))})
    assert r.status_code == 200, r.text
    assert [t["content"] for t in r.json()] == ["c", "b", "a"]

    other = client.post("/tasks", json={"content": "elsewhere"}).json()["id"]
    r = client.post("/tasks/reorder", json={"project_id": pid, "task_ids": [other]})
    assert r.status_code == 400
