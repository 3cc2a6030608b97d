"""
TASKFLOW API - Task Endpoint Tests

CI-safe tests for the task REST endpoints, against the local store and
against a fake Google Tasks backend.
"""

import asyncio

from app.tasks.repository import INBOX_LIST_ID


class TestLocalTasks:
    """Task endpoints while Google is not connected."""

    def test_seeded_inbox(self, client, auth_headers):
        """Every user starts with a single Inbox list."""
        response = client.get("/tasklists", headers=auth_headers)
        assert response.status_code == 200
        lists = response.json()
        assert [(tl["id"], tl["title"]) for tl in lists] == [(INBOX_LIST_ID, "Inbox")]

    def test_create_task(self, client, auth_headers):
        """Create task with camelCase fields."""
        response = client.post(
            "/tasks",
            json={"title": "Buy milk", "listId": INBOX_LIST_ID, "notes": "2 liters"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Buy milk"
        assert data["listId"] == INBOX_LIST_ID
        assert data["notes"] == "2 liters"
        assert data["completed"] is False
        assert "id" in data

    def test_create_task_empty_title(self, client, auth_headers):
        """Empty title is rejected with a 400 error body."""
        response = client.post("/tasks", json={"title": "", "listId": INBOX_LIST_ID}, headers=auth_headers)
        assert response.status_code == 400
        assert "title" in response.json()["error"]

    def test_list_tasks_of_list(self, client, auth_headers):
        client.post("/tasks", json={"title": "A", "listId": INBOX_LIST_ID}, headers=auth_headers)
        client.post("/tasks", json={"title": "B", "listId": INBOX_LIST_ID}, headers=auth_headers)

        response = client.get(f"/tasklists/{INBOX_LIST_ID}/tasks", headers=auth_headers)

        assert [t["title"] for t in response.json()] == ["A", "B"]

    def test_update_task(self, client, auth_headers):
        """Only provided fields change."""
        created = client.post(
            "/tasks", json={"title": "Draft", "listId": INBOX_LIST_ID, "notes": "keep"}, headers=auth_headers
        ).json()

        response = client.patch(f"/tasks/{created['id']}", json={"completed": True}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["completed"] is True
        assert data["title"] == "Draft"
        assert data["notes"] == "keep"

    def test_update_unknown_task(self, client, auth_headers):
        response = client.patch("/tasks/missing", json={"title": "x"}, headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}

    def test_delete_task(self, client, auth_headers):
        created = client.post("/tasks", json={"title": "Old", "listId": INBOX_LIST_ID}, headers=auth_headers).json()

        response = client.delete(f"/tasks/{created['id']}", headers=auth_headers)

        assert response.json() == {"ok": True}
        assert client.get(f"/tasklists/{INBOX_LIST_ID}/tasks", headers=auth_headers).json() == []

    def test_delete_unknown_task(self, client, auth_headers):
        response = client.delete("/tasks/missing", headers=auth_headers)
        assert response.status_code == 404

    def test_requires_auth(self, client):
        """Task endpoints without a token should fail."""
        assert client.get("/tasklists").status_code == 401
        assert client.post("/tasks", json={"title": "x", "listId": "inbox"}).status_code == 401


class TestGoogleTasks:
    """Task endpoints once a Google access token is stored."""

    def test_lists_come_from_google(self, client, auth_headers, google, connect_google):
        response = client.get("/tasklists", headers=auth_headers)

        assert [tl["title"] for tl in response.json()] == ["Inbox", "Work"]
        assert google.tokens == ["google-access-token"]

    def test_create_goes_to_google(self, client, auth_headers, google, connect_google):
        response = client.post("/tasks", json={"title": "Ship it", "listId": "work-list"}, headers=auth_headers)

        assert response.status_code == 201
        assert [t.title for t in google.created] == ["Ship it"]

    def test_delete_resolves_list(self, client, auth_headers, google, connect_google):
        """Deleting without listId looks the task up across lists."""
        task = google.add("work-list", "Cleanup")

        response = client.delete(f"/tasks/{task.id}", headers=auth_headers)

        assert response.status_code == 200
        assert google.deleted == [task.id]

    def test_local_tasks_hidden_once_connected(self, client, auth_headers, google, credentials, user_id):
        """Google replaces the local store as soon as a token exists."""
        client.post("/tasks", json={"title": "Local only", "listId": INBOX_LIST_ID}, headers=auth_headers)
        asyncio.run(credentials.save_google_tokens(user_id, access_token="late-token"))

        response = client.get(f"/tasklists/{INBOX_LIST_ID}/tasks", headers=auth_headers)

        assert response.json() == []
        assert google.tokens == ["late-token"]


class TestAvailability:

    def test_default_minutes(self, client, auth_headers):
        response = client.get("/availability/now", headers=auth_headers)
        assert response.json() == {
            "minutes": 45,
            "available": True,
            "message": "Calendar not connected. Assuming available.",
        }

    def test_custom_minutes(self, client, auth_headers):
        response = client.get("/availability/now", params={"minutes": 90}, headers=auth_headers)
        assert response.json()["minutes"] == 90

    def test_minutes_must_be_positive(self, client, auth_headers):
        response = client.get("/availability/now", params={"minutes": 0}, headers=auth_headers)
        assert response.status_code == 400
