"""
API tests for the REST surface.

Run the full request cycle through TestClient against a SQLite database
seeded with one organization (admin + member) and a second, empty one.
"""

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError


class TestAuthentication:
    """Bearer token checks shared by every protected route."""

    def test_missing_token_is_401(self, client):
        response = client.get("/api/tasks")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "UNAUTHORIZED"
        assert "timestamp" in body

    def test_invalid_token_is_403(self, client):
        response = client.get("/api/tasks", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_expired_token_is_403(self, client, seeded, token_for):
        token = token_for(seeded.member_id, seeded.org_id, expires_delta=timedelta(seconds=-5))

        response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Token has expired."

    def test_request_id_echoed(self, client, member_headers):
        response = client.get(
            "/api/tasks",
            headers={**member_headers, "X-Request-ID": "req-123"},
        )

        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == "req-123"


class TestTaskRoutes:

    def _create(self, client, headers, **overrides):
        payload = {"title": "Prepare quarterly report", "priority": "high"}
        payload.update(overrides)
        return client.post("/api/tasks", json=payload, headers=headers)

    def test_create_task(self, client, seeded, member_headers):
        response = self._create(
            client, member_headers,
            assigned_to=seeded.member_id,
            required_skills=["SQL"],
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        task = body["data"]
        assert task["status"] == "assigned"
        assert task["priority"] == "high"
        assert task["org_id"] == seeded.org_id
        assert task["created_by"] == seeded.member_id
        assert task["completed_at"] is None

    def test_short_title_is_validation_error(self, client, member_headers):
        response = self._create(client, member_headers, title="ab")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "title"

    def test_unknown_priority_is_validation_error(self, client, member_headers):
        response = self._create(client, member_headers, priority="urgent")
        assert response.status_code == 400

    def test_foreign_assignee_rejected(self, client, member_headers):
        response = self._create(client, member_headers, assigned_to="not-an-employee")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"

    def test_list_and_filter(self, client, seeded, member_headers):
        self._create(client, member_headers, assigned_to=seeded.member_id)
        self._create(client, member_headers, priority="low")

        all_tasks = client.get("/api/tasks", headers=member_headers).json()
        low = client.get("/api/tasks?priority=low", headers=member_headers).json()
        mine = client.get(
            f"/api/tasks?assigned_to={seeded.member_id}", headers=member_headers
        ).json()

        assert all_tasks["total"] == 2
        assert low["total"] == 1
        assert mine["data"][0]["assigned_to"] == seeded.member_id

    def test_tasks_are_org_scoped(self, client, seeded, member_headers, token_for):
        task_id = self._create(client, member_headers).json()["data"]["id"]
        outsider = {"Authorization": f"Bearer {token_for('x', seeded.other_org_id)}"}

        assert client.get("/api/tasks", headers=outsider).json()["total"] == 0

        response = client.patch(
            f"/api/tasks/{task_id}/status",
            json={"status": "completed"},
            headers=outsider,
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_complete_task_updates_score(self, client, seeded, member_headers):
        task_id = self._create(
            client, member_headers, assigned_to=seeded.member_id
        ).json()["data"]["id"]

        response = client.patch(
            f"/api/tasks/{task_id}/status",
            json={"status": "completed"},
            headers=member_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "completed"
        assert response.json()["data"]["completed_at"] is not None

        scores = client.get("/api/ai/scores", headers=member_headers).json()["data"]
        assert len(scores) == 1
        assert scores[0]["employee_id"] == seeded.member_id
        assert scores[0]["productivity_score"] == 100
        assert scores[0]["trend"] == "up"

    def test_complete_task_logs_on_chain(self, app, seeded, member_headers, mock_chain_logger):
        from fastapi.testclient import TestClient

        with TestClient(app) as client:
            task_id = self._create(
                client, member_headers, assigned_to=seeded.member_id
            ).json()["data"]["id"]
            client.patch(
                f"/api/tasks/{task_id}/status",
                json={"status": "completed"},
                headers=member_headers,
            )

        # Shutdown drains background chain logs
        mock_chain_logger.log_task_completion.assert_awaited_once_with(
            task_id, seeded.member_id, seeded.org_id
        )
        mock_chain_logger.aclose.assert_awaited_once()

    def test_invalid_status_value(self, client, member_headers):
        task_id = self._create(client, member_headers).json()["data"]["id"]

        response = client.patch(
            f"/api/tasks/{task_id}/status",
            json={"status": "archived"},
            headers=member_headers,
        )

        assert response.status_code == 400

    def test_edit_task(self, client, member_headers):
        task_id = self._create(client, member_headers).json()["data"]["id"]

        response = client.patch(
            f"/api/tasks/{task_id}",
            json={"title": "Prepare annual report"},
            headers=member_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Prepare annual report"
        assert data["priority"] == "high"

    @pytest.mark.parametrize("field", ["title", "description", "priority", "required_skills"])
    def test_null_edit_rejected(self, client, member_headers, field):
        task = self._create(client, member_headers, required_skills=["SQL"]).json()["data"]

        response = client.patch(
            f"/api/tasks/{task['id']}",
            json={field: None},
            headers=member_headers,
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == field

        listed = client.get("/api/tasks", headers=member_headers).json()["data"]
        [stored] = [t for t in listed if t["id"] == task["id"]]
        assert stored[field] == task[field]

    def test_null_assignee_unassigns(self, client, seeded, member_headers):
        task_id = self._create(
            client, member_headers, assigned_to=seeded.member_id,
        ).json()["data"]["id"]

        response = client.patch(
            f"/api/tasks/{task_id}",
            json={"assigned_to": None},
            headers=member_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["assigned_to"] is None

    def test_empty_edit_rejected(self, client, member_headers):
        task_id = self._create(client, member_headers).json()["data"]["id"]

        response = client.patch(f"/api/tasks/{task_id}", json={}, headers=member_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"

    def test_delete_task(self, client, member_headers):
        task_id = self._create(client, member_headers).json()["data"]["id"]

        response = client.delete(f"/api/tasks/{task_id}", headers=member_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Task deleted"}

        again = client.delete(f"/api/tasks/{task_id}", headers=member_headers)
        assert again.status_code == 404


class TestEmployeeRoutes:

    NEW_EMPLOYEE = {
        "name": "Barbara Liskov",
        "email": "barbara@example.com",
        "role": "Engineer",
        "skills": ["Python", "SQL"],
    }

    def test_member_can_list(self, client, member_headers):
        response = client.get("/api/employees", headers=member_headers)

        assert response.status_code == 200
        names = {e["name"] for e in response.json()["data"]}
        assert names == {"Grace", "Linus"}

    def test_member_cannot_add(self, client, member_headers):
        response = client.post("/api/employees", json=self.NEW_EMPLOYEE, headers=member_headers)

        assert response.status_code == 403
        error = response.json()["error"]
        assert error["code"] == "FORBIDDEN"
        assert error["message"] == "Access denied. Admin privileges required."
        assert error["details"] == {"required_role": "ADMIN"}

    def test_admin_adds_employee(self, client, seeded, admin_headers):
        response = client.post("/api/employees", json=self.NEW_EMPLOYEE, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["org_id"] == seeded.org_id
        assert data["department"] == "Management"
        assert data["status"] == "active"

    def test_duplicate_email_conflicts(self, client, admin_headers):
        client.post("/api/employees", json=self.NEW_EMPLOYEE, headers=admin_headers)
        response = client.post("/api/employees", json=self.NEW_EMPLOYEE, headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_invalid_email(self, client, admin_headers):
        payload = {**self.NEW_EMPLOYEE, "email": "not-an-email"}

        response = client.post("/api/employees", json=payload, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["details"][0]["field"] == "email"


class TestAIRoutes:

    def test_smart_assign(self, client, seeded, member_headers):
        response = client.post(
            "/api/ai/smart-assign",
            json={"required_skills": ["React", "SQL"]},
            headers=member_headers,
        )

        assert response.status_code == 200
        candidates = response.json()["data"]
        assert [c["employee_id"] for c in candidates] == [seeded.member_id]
        # Unscored: 0.7 * 1.0 + 0.3 * 0.5
        assert candidates[0]["match_score"] == 85
        assert candidates[0]["matched_skills"] == ["React", "SQL"]
        assert candidates[0]["explanation"] == "100% skill match."

    def test_smart_assign_requires_skills(self, client, member_headers):
        response = client.post(
            "/api/ai/smart-assign",
            json={"required_skills": []},
            headers=member_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_scores_empty_before_any_completion(self, client, member_headers):
        response = client.get("/api/ai/scores", headers=member_headers)
        assert response.json() == {"success": True, "data": []}


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"] == "ok"
        assert body["checks"]["websocket"]["total_connections"] == 0

    def test_liveness(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_unhealthy_database_is_503(self, client, monkeypatch):
        async def broken(engine):
            return False

        monkeypatch.setattr("web.routers.health.check_database_connection", broken)

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["checks"]["database"] == "unavailable"


class TestUnexpectedErrors:

    def test_unhandled_exception_is_500_envelope(self, app, member_headers, monkeypatch):
        from fastapi.testclient import TestClient

        async def explode(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

        monkeypatch.setattr(app.state.task_service, "list_tasks", explode)

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/tasks", headers=member_headers)

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "INTERNAL_ERROR"
