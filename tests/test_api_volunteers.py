"""Tests for /api/volunteers and /api/admin routes."""

from app.models.project import ProjectCreate, create_project
from app.models.volunteer import get_volunteer
from app.rules.workflow import apply_to_project, approve_application
from app.store import VOLUNTEERS


class TestOwnProfile:
    def test_get_me(self, client, login_as):
        _, headers = login_as("v1", name="Ana")
        resp = client.get("/api/volunteers/me", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["name"] == "Ana"

    def test_rename(self, client, login_as, store):
        _, headers = login_as("v1", name="Ana")

        resp = client.patch("/api/volunteers/me", json={"name": "Ana Cruz"}, headers=headers)

        assert resp.status_code == 200
        assert get_volunteer(store, "v1").name == "Ana Cruz"

    def test_rename_requires_name(self, client, login_as):
        _, headers = login_as("v1")
        assert client.patch("/api/volunteers/me", json={"name": "  "}, headers=headers).status_code == 422

    def test_bad_token(self, client):
        resp = client.get("/api/volunteers/me", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401

    def test_my_projects(self, client, login_as, store):
        _, headers = login_as("v1")
        a = create_project(store, ProjectCreate(name="A", description="d", chapter="Cebu"))
        b = create_project(store, ProjectCreate(name="B", description="d", chapter="Cebu"))
        apply_to_project(store, "v1", a.id)
        apply_to_project(store, "v1", b.id)
        approve_application(store, b.id, "v1")

        resp = client.get("/api/volunteers/me/projects", headers=headers)

        assert resp.status_code == 200
        assert [p["name"] for p in resp.json()["pending"]] == ["A"]
        assert [p["name"] for p in resp.json()["assigned"]] == ["B"]


class TestAdminVolunteers:
    def test_list_pending(self, client, login_as):
        _, headers = login_as("admin", role="Admin")
        login_as("p1", status="pending")
        login_as("p2", status="pending")

        resp = client.get("/api/volunteers?status=pending", headers=headers)

        assert resp.status_code == 200
        assert {v["id"] for v in resp.json()} == {"p1", "p2"}

    def test_volunteer_cannot_list(self, client, login_as):
        _, headers = login_as("v1")
        assert client.get("/api/volunteers", headers=headers).status_code == 403

    def test_approve_and_reject(self, client, login_as, store):
        _, headers = login_as("head", role="Chapter Head")
        login_as("p1", status="pending")
        login_as("p2", status="pending")

        assert client.post("/api/volunteers/p1/approve", headers=headers).status_code == 200
        assert client.post("/api/volunteers/p2/reject", headers=headers).status_code == 200

        assert get_volunteer(store, "p1").status == "approved"
        assert get_volunteer(store, "p2").status == "rejected"

    def test_approve_unknown_volunteer(self, client, login_as):
        _, headers = login_as("admin", role="Admin")
        assert client.post("/api/volunteers/ghost/approve", headers=headers).status_code == 404


class TestAdminDashboard:
    def test_stats(self, client, login_as, store):
        _, headers = login_as("admin", role="Admin")
        login_as("p1", status="pending")
        project = create_project(store, ProjectCreate(name="A", description="d", chapter="Cebu"))
        login_as("v1")
        apply_to_project(store, "v1", project.id)

        resp = client.get("/api/admin/stats", headers=headers)

        assert resp.json() == {
            "pending_volunteers": 1,
            "approved_volunteers": 2,
            "open_projects": 1,
            "total_applications": 1,
        }

    def test_reconcile_admin_only(self, client, login_as, store):
        _, head_headers = login_as("head", role="Chapter Head")
        _, admin_headers = login_as("admin", role="Admin")
        login_as("v1")
        project = create_project(store, ProjectCreate(name="A", description="d", chapter="Cebu"))
        store.update(VOLUNTEERS, "v1", {"appliedProjects": [project.id]})

        assert client.post("/api/admin/reconcile", headers=head_headers).status_code == 403

        resp = client.post("/api/admin/reconcile", headers=admin_headers)
        assert resp.json() == {"repaired": 1}
