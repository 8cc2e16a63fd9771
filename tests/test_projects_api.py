import uuid


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_default_project_exists(client):
    names = [p["name"] for p in client.get("/projects").json()]
    assert "Inbox" in names


def test_create_get_delete_project(client):
    name = f"Garden{uuid.uuid4().hex[:6]}"
    project = client.post("/projects", json={"name": name, "color": "#16a34a"}).json()
    assert project["name"] == name
    assert project["is_archived"] is False

    assert client.get(f"/projects/{project['id']}").json()["color"] == "#16a34a"

    task = client.post("/tasks", json={"content": "Mow", "project_id": project["id"]}).json()
    assert client.delete(f"/projects/{project['id']}").json() == {"deleted": True}
    assert client.get(f"/projects/{project['id']}").status_code == 404
    # tasks go with their project
    assert client.get(f"/tasks/{task['id']}").status_code == 404


def test_inbox_cannot_be_deleted(client):
    inbox = next(p for p in client.get("/projects").json() if p["name"] == "Inbox")
    assert client.delete(f"/projects/{inbox['id']}").status_code == 400


def test_missing_project(client):
    assert client.get("/projects/999999").status_code == 404
    assert client.delete("/projects/999999").status_code == 404
