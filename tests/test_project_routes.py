"""
tests/test_project_routes.py -- Integration tests for /api/projects.

Coverage:
  - Create without an image -> image_url null
  - Create with an image -> stored file served back under /uploads
  - Update without an image keeps the stored image_url
  - Rejected uploads (.exe, oversize, mismatched media type) write nothing
  - Listing order, partial update, delete, 404s, and the auth gate
  - An empty form value clears an optional field on update
  - A failed database write removes the image it was about to reference

Fixtures used (from conftest.py):
  - api_client: (client, token, uid)
  - auth_headers: {"Authorization": "Bearer <token>"}
"""

from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from asgi import app
from core.config import get_settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _project_count(client) -> int:
    return len(client.get("/api/projects").json())


class TestCreateProject:
    def test_create_without_image(self, api_client, auth_headers):
        client, _, _ = api_client
        resp = client.post(
            "/api/projects",
            data={"title": "Site", "tech_stack": "FastAPI, SQLite, ", "featured": "true"},
            headers=auth_headers,
        )
        assert resp.status_code == 201, resp.text
        project = resp.json()
        assert isinstance(project["id"], int)
        assert project["image_url"] is None
        assert project["tech_stack"] == ["FastAPI", "SQLite"]
        assert project["featured"] is True
        assert project["display_order"] == 0

    def test_create_with_image_is_served(self, api_client, auth_headers):
        client, _, _ = api_client
        resp = client.post(
            "/api/projects",
            data={"title": "With image"},
            files={"image": ("shot.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 201, resp.text
        image_url = resp.json()["image_url"]
        assert image_url.startswith("/uploads/")
        assert image_url.endswith(".png")

        served = client.get(image_url)
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_title_required(self, api_client, auth_headers):
        client, _, _ = api_client
        resp = client.post("/api/projects", data={"description": "no title"}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "validation_error"

    def test_requires_auth(self, api_client):
        client, _, _ = api_client
        before = _project_count(client)
        resp = client.post("/api/projects", data={"title": "Anon"})
        assert resp.status_code == 401
        assert _project_count(client) == before


class TestRejectedUploads:
    def test_executable_rejected(self, api_client, auth_headers):
        client, _, _ = api_client
        before = _project_count(client)
        resp = client.post(
            "/api/projects",
            data={"title": "Bad"},
            files={"image": ("tool.exe", b"MZ\x90\x00", "application/octet-stream")},
            headers=auth_headers,
        )
        assert resp.status_code == 415
        assert resp.json()["error"]["code"] == "unsupported_media_type"
        assert _project_count(client) == before

    def test_mismatched_media_type_rejected(self, api_client, auth_headers):
        client, _, _ = api_client
        before = _project_count(client)
        resp = client.post(
            "/api/projects",
            data={"title": "Sneaky"},
            files={"image": ("photo.png", b"<html></html>", "text/html")},
            headers=auth_headers,
        )
        assert resp.status_code == 415
        assert _project_count(client) == before

    def test_oversize_rejected(self, api_client, auth_headers):
        client, _, _ = api_client
        before = _project_count(client)
        resp = client.post(
            "/api/projects",
            data={"title": "Huge"},
            files={"image": ("big.jpg", b"\xff" * (11 * 1024 * 1024), "image/jpeg")},
            headers=auth_headers,
        )
        assert resp.status_code == 413
        assert resp.json()["error"]["code"] == "payload_too_large"
        assert _project_count(client) == before


class TestUpdateProject:
    def test_update_without_image_keeps_it(self, api_client, auth_headers):
        client, _, _ = api_client
        created = client.post(
            "/api/projects",
            data={"title": "Keep"},
            files={"image": ("keep.webp", b"RIFF0000WEBP", "image/webp")},
            headers=auth_headers,
        ).json()

        resp = client.put(f"/api/projects/{created['id']}", data={"title": "Kept"}, headers=auth_headers)
        assert resp.status_code == 200, resp.text
        updated = resp.json()
        assert updated["title"] == "Kept"
        assert updated["image_url"] == created["image_url"]

    def test_update_with_image_replaces_it(self, api_client, auth_headers):
        client, _, _ = api_client
        created = client.post(
            "/api/projects",
            data={"title": "Swap"},
            files={"image": ("a.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        ).json()

        resp = client.put(
            f"/api/projects/{created['id']}",
            files={"image": ("b.gif", b"GIF89a", "image/gif")},
            headers=auth_headers,
        )
        assert resp.status_code == 200, resp.text
        updated = resp.json()
        assert updated["image_url"].endswith(".gif")
        assert updated["image_url"] != created["image_url"]
        assert updated["title"] == "Swap"

    def test_rejected_image_leaves_project_unchanged(self, api_client, auth_headers):
        client, _, _ = api_client
        created = client.post("/api/projects", data={"title": "Stable"}, headers=auth_headers).json()
        resp = client.put(
            f"/api/projects/{created['id']}",
            data={"title": "Changed"},
            files={"image": ("x.exe", b"MZ", "application/x-msdownload")},
            headers=auth_headers,
        )
        assert resp.status_code == 415
        assert client.get(f"/api/projects/{created['id']}").json()["title"] == "Stable"

    def test_update_missing(self, api_client, auth_headers):
        client, _, _ = api_client
        resp = client.put("/api/projects/99999", data={"title": "Nope"}, headers=auth_headers)
        assert resp.status_code == 404


class TestListAndDelete:
    def test_ordering(self, api_client, auth_headers):
        client, _, _ = api_client
        for title, order in (("Order-A", -3), ("Order-B", -4), ("Order-C", -4)):
            client.post("/api/projects", data={"title": title, "display_order": str(order)}, headers=auth_headers)
        titles = [p["title"] for p in client.get("/api/projects").json()]
        assert titles[:3] == ["Order-C", "Order-B", "Order-A"]

    def test_get_one_and_missing(self, api_client, auth_headers):
        client, _, _ = api_client
        created = client.post("/api/projects", data={"title": "One"}, headers=auth_headers).json()
        assert client.get(f"/api/projects/{created['id']}").json()["title"] == "One"
        assert client.get("/api/projects/99999").status_code == 404

    def test_delete(self, api_client, auth_headers):
        client, _, _ = api_client
        created = client.post("/api/projects", data={"title": "Doomed"}, headers=auth_headers).json()
        resp = client.delete(f"/api/projects/{created['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Project deleted successfully"}
        assert client.get(f"/api/projects/{created['id']}").status_code == 404
        assert client.delete(f"/api/projects/{created['id']}", headers=auth_headers).status_code == 404

    def test_delete_requires_auth(self, api_client, auth_headers):
        client, _, _ = api_client
        created = client.post("/api/projects", data={"title": "Guarded"}, headers=auth_headers).json()
        assert client.delete(f"/api/projects/{created['id']}").status_code == 401
        assert client.get(f"/api/projects/{created['id']}").status_code == 200


class TestClearingFields:
    def test_empty_value_clears_optional_fields(self, api_client, auth_headers):
        client, _, _ = api_client
        created = client.post(
            "/api/projects",
            data={"title": "Clearable", "github_url": "https://g", "tech_stack": "A, B", "live_url": "https://l"},
            headers=auth_headers,
        ).json()

        resp = client.put(
            f"/api/projects/{created['id']}",
            data={"github_url": "", "tech_stack": ""},
            headers=auth_headers,
        )
        assert resp.status_code == 200, resp.text
        updated = resp.json()
        assert updated["github_url"] is None
        assert updated["tech_stack"] == []
        assert updated["live_url"] == "https://l"
        assert updated["title"] == "Clearable"

    def test_empty_value_clears_alongside_image_upload(self, api_client, auth_headers):
        client, _, _ = api_client
        created = client.post(
            "/api/projects", data={"title": "Mixed", "description": "old"}, headers=auth_headers
        ).json()
        resp = client.put(
            f"/api/projects/{created['id']}",
            data={"description": ""},
            files={"image": ("m.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["description"] is None
        assert resp.json()["image_url"].endswith(".png")


class TestUploadCleanup:
    """A stored image must not outlive a failed database write."""

    @staticmethod
    def _upload_names():
        return {p.name for p in Path(get_settings().upload_dir).iterdir()}

    def test_failed_create_discards_image(self, api_client, auth_headers, monkeypatch):
        client, _, _ = api_client

        def _broken(project):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(client.app.state.projects, "create_project", _broken)
        before = self._upload_names()
        quiet_client = TestClient(app, raise_server_exceptions=False)
        resp = quiet_client.post(
            "/api/projects",
            data={"title": "Lost"},
            files={"image": ("lost.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 500
        assert self._upload_names() == before

    def test_failed_update_discards_image(self, api_client, auth_headers, monkeypatch):
        client, _, _ = api_client
        created = client.post("/api/projects", data={"title": "Unlucky"}, headers=auth_headers).json()

        def _broken(project_id, **fields):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(client.app.state.projects, "update_project", _broken)
        before = self._upload_names()
        quiet_client = TestClient(app, raise_server_exceptions=False)
        resp = quiet_client.put(
            f"/api/projects/{created['id']}",
            files={"image": ("u.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 500
        assert self._upload_names() == before
