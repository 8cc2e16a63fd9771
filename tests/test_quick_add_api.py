import uuid


def inbox_id(client) -> int:
    return next(p["id"] for p in client.get("/projects").json() if p["name"] == "Inbox")


def test_quick_add_resolves_project_case_insensitively(client):
    name = f"Work{uuid.uuid4().hex[:6]}"
    project = client.post("/projects", json={"name": name}).json()

    r = client.post(
        "/quick-add", json={"text": f"Meeting with John tomorrow at 2pm #{name.lower()} @important p2"}
    )
    assert r.status_code == 200, r.text
    task = r.json()
    assert task["content"] == "Meeting with John"
    assert task["project_id"] == project["id"]
    assert task["due_date"] == "2026-10-20"
    assert task["due_time"] == "14:00"
    assert task["labels"] == ["important"]
    assert task["priority"] == 2


def test_unknown_project_falls_back(client):
    r = client.post("/quick-add", json={"text": "Buy milk #nosuchproject"})
    assert r.json()["project_id"] == inbox_id(client)

    other = client.post("/projects", json={"name": f"Errands{uuid.uuid4().hex[:6]}"}).json()
    r = client.post("/quick-add", json={"text": "Buy eggs #nosuchproject", "project_id": other["id"]})
    assert r.json()["project_id"] == other["id"]


def test_request_defaults_apply_only_when_not_parsed(client):
    r = client.post("/quick-add", json={"text": "Plain task", "priority": 2, "due_date": "2026-12-01"})
    body = r.json()
    assert body["priority"] == 2
    assert body["due_date"] == "2026-12-01"

    r = client.post("/quick-add", json={"text": "Urgent task p1 tomorrow", "priority": 2, "due_date": "2026-12-01"})
    body = r.json()
    assert body["priority"] == 1
    assert body["due_date"] == "2026-10-20"


def test_markers_only_is_rejected(client):
    r = client.post("/quick-add", json={"text": "p1 @a #b"})
    assert r.status_code == 422


def test_missing_fallback_project(client):
    r = client.post("/quick-add", json={"text": "Something", "project_id": 999_999})
    assert r.status_code == 404


def test_recurring_quick_add_then_complete(client):
    task = client.post("/quick-add", json={"text": "Water plants every 3 days"}).json()
    assert task["content"] == "Water plants"
    assert task["recurrence"] == {"frequency": "daily", "interval": 3, "days_of_week": None}
    assert task["due_date"] == "2026-10-22"

    done = client.post(f"/tasks/{task['id']}/complete").json()
    assert done["is_completed"] is False
    assert done["due_date"] == "2026-10-25"


def test_weekly_rule_keeps_days(client):
    task = client.post("/quick-add", json={"text": "Gym every friday"}).json()
    assert task["recurrence"]["days_of_week"] == [5]
    assert task["due_date"] == "2026-10-23"


def test_preview_does_not_persist(client):
    before = len(client.get("/tasks", params={"limit": 100_000}).json())
    r = client.post("/quick-add/preview", json={"text": "Buy milk tomorrow p1 @shop"})
    assert r.status_code == 200
    assert r.json() == {
        "content": "Buy milk",
        "due_date": "2026-10-20",
        "due_time": None,
        "priority": 1,
        "project_hint": None,
        "labels": ["shop"],
        "recurrence": None,
    }
    assert len(client.get("/tasks", params={"limit": 100_000}).json()) == before
