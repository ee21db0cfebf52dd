# =============================================================================
# tests/test_api.py - HTTP API Tests
# =============================================================================
# Exercises the routers through FastAPI's TestClient. The backend client,
# upload registry and current user are replaced via dependency_overrides.
# =============================================================================

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.auth import AuthUser, get_current_user
from app.dependencies import get_supabase_client, get_upload_service
from app.main import app
from core.services import UploadService
from lib.supabase_client import SupabaseClientError


@pytest.fixture
def uploads():
    return UploadService()


@pytest.fixture
def client(backend, uploads, sample_project):
    backend.seed("projects", sample_project)
    app.dependency_overrides[get_supabase_client] = lambda: backend
    app.dependency_overrides[get_upload_service] = lambda: uploads
    app.dependency_overrides[get_current_user] = lambda: AuthUser(id=uuid4(), email="a@example.com")
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def stage(client, upload_id, *names):
    files = [("files", (name, name.encode(), "application/octet-stream")) for name in names]
    response = client.post(f"/api/v1/uploads/{upload_id}/files", files=files)
    assert response.status_code == 200
    return response.json()


def open_session(client, project_id="proj-1"):
    response = client.post(f"/api/v1/projects/{project_id}/uploads")
    assert response.status_code == 201
    return response.json()["upload_id"]


# =============================================================================
# Projects
# =============================================================================

class TestProjectEndpoints:
    """Tests for /api/v1/projects."""

    def test_list(self, client):
        response = client.get("/api/v1/projects")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["projects"][0]["title"] == "Harbour Pavilion"

    def test_create(self, client, backend):
        response = client.post("/api/v1/projects", json={"title": "  Library  ", "location": " "})

        assert response.status_code == 201
        assert response.json()["title"] == "Library"
        assert backend.calls_of("insert")[0][2] == {"title": "Library", "description": None}

    def test_create_with_status(self, client, backend):
        response = client.post("/api/v1/projects", json={"title": "Depot", "status": "Development"})

        assert response.status_code == 201
        assert response.json()["status"] == "Development"
        assert backend.calls_of("insert")[0][2]["status"] == "Development"

    def test_create_blank_title(self, client, backend):
        response = client.post("/api/v1/projects", json={"title": "   "})

        assert response.status_code == 422
        assert backend.calls == []

    def test_detail_not_found(self, client):
        response = client.get("/api/v1/projects/missing")

        assert response.status_code == 404
        assert response.json()["code"] == "PROJECT_NOT_FOUND"

    def test_cover_upload(self, client, backend):
        response = client.post(
            "/api/v1/projects/proj-1/cover",
            files={"file": ("My Cover.png", b"png", "image/png")},
        )

        assert response.status_code == 200
        assert response.json()["cover_image_url"].endswith("projects/proj-1/cover/My-Cover.png")

    def test_backend_error_is_502(self, client, backend):
        def broken(*args, **kwargs):
            raise SupabaseClientError("relation \"projects\" does not exist", code="SELECT_FAILED")

        backend.select_rows = broken
        response = client.get("/api/v1/projects")

        assert response.status_code == 502
        assert response.json()["detail"] == 'relation "projects" does not exist'


# =============================================================================
# Upload sessions
# =============================================================================

class TestUploadEndpoints:
    """Full upload flow over HTTP."""

    def test_open_for_missing_project(self, client):
        response = client.post("/api/v1/projects/missing/uploads")
        assert response.status_code == 404

    def test_full_flow(self, client, backend, uploads):
        upload_id = open_session(client)

        data = stage(client, upload_id, "plan.png", "brief.pdf", "extra.pdf")
        assert data["state"] == "staged"
        extra_id = data["pending"][2]["id"]

        data = client.post(f"/api/v1/uploads/{upload_id}/files/{extra_id}/toggle").json()
        assert data["pending"][2]["selected"] is True

        data = client.post(f"/api/v1/uploads/{upload_id}/remove-selected").json()
        assert [p["file_name"] for p in data["pending"]] == ["plan.png", "brief.pdf"]

        response = client.post(f"/api/v1/uploads/{upload_id}/submit", json={"notes": "Site visit"})

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "done"
        assert data["is_open"] is False
        assert data["last_result"]["outcome"] == "completed"
        assert [a["notes"] for a in data["last_result"]["assets"]] == ["Site visit", "Site visit"]
        assert len(backend.tables["assets"]) == 2
        assert len(uploads) == 0

        # the session is gone once completed
        assert client.get(f"/api/v1/uploads/{upload_id}").status_code == 404

    def test_empty_submit(self, client, backend):
        upload_id = open_session(client)

        response = client.post(f"/api/v1/uploads/{upload_id}/submit")

        assert response.status_code == 200
        data = response.json()
        assert data["error"] == "No files to upload."
        assert data["last_result"]["outcome"] == "rejected"
        assert data["state"] == "empty"
        assert backend.calls == []

    def test_failed_submit_keeps_files(self, client, backend):
        backend.fail_upload_at = {2: "Bucket not found"}
        upload_id = open_session(client)
        stage(client, upload_id, "a.pdf", "b.pdf", "c.pdf")

        data = client.post(f"/api/v1/uploads/{upload_id}/submit").json()

        assert data["state"] == "staged"
        assert data["error"] == "Bucket not found"
        assert len(data["pending"]) == 3
        assert len(data["last_result"]["recorded_file_ids"]) == 1
        assert len(backend.tables["assets"]) == 1

    def test_close_session(self, client, uploads):
        upload_id = open_session(client)
        stage(client, upload_id, "a.pdf")

        response = client.delete(f"/api/v1/uploads/{upload_id}")

        assert response.status_code == 200
        assert response.json()["state"] == "closed"
        assert response.json()["pending"] == []
        assert len(uploads) == 0

    def test_cancel_when_idle(self, client):
        upload_id = open_session(client)

        response = client.post(f"/api/v1/uploads/{upload_id}/cancel")

        assert response.status_code == 200
        assert response.json()["state"] == "empty"

    def test_unknown_session(self, client):
        response = client.post("/api/v1/uploads/nope/remove-selected")

        assert response.status_code == 404
        assert response.json()["code"] == "UPLOAD_SESSION_NOT_FOUND"


# =============================================================================
# Assets, auth, health
# =============================================================================

class TestOtherEndpoints:
    """Asset detail, auth guard and health checks."""

    def test_asset_detail(self, client, backend):
        backend.seed("assets", {
            "id": "asset-1", "project_id": "proj-1", "file_name": "plan.png",
            "storage_path": "proj-1/2024-01-15_t_plan.png",
        })

        data = client.get("/api/v1/assets/asset-1").json()

        assert data["asset"]["file_name"] == "plan.png"
        assert data["project"]["id"] == "proj-1"
        assert data["is_image"] is True

    def test_auth_required(self, client):
        app.dependency_overrides.pop(get_current_user)

        response = client.get("/api/v1/projects")

        assert response.status_code in (401, 403)

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness(self, client):
        data = client.get("/api/v1/health/ready").json()

        assert data["status"] == "ready"
        assert data["checks"] == {"database": "healthy", "storage": "healthy"}
