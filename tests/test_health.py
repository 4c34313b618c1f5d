"""
tests/test_health.py -- Integration tests for GET /api/v1/health.

Covers:
  - 200 response with status and version
  - No authentication required
  - Error envelope for unknown routes and unexpected failures
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from api.main import __version__, create_app


def test_health_returns_ok(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": __version__}


def test_health_no_auth_required(client):
    """Health endpoint is accessible without any authentication headers."""
    resp = client.get("/api/v1/health", headers={})
    assert resp.status_code == 200


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.json()["success"] is False
    assert resp.json()["message"]


def test_unexpected_failure_is_generic_500(settings, monkeypatch):
    """Internal errors are logged, never leaked into the response body."""
    app = create_app(settings)
    with TestClient(app, raise_server_exceptions=False) as c:
        signup = c.post(
            "/api/v1/auth/signup",
            json={"name": "Ada", "email": "ada@example.com", "password": "analytical"},
        )
        token = signup.json()["token"]

        def boom(owner_id):
            raise RuntimeError("disk I/O error at /var/lib/stockroom.db")

        monkeypatch.setattr(c.app.state.product_store, "list_for_owner", boom)
        resp = c.get("/api/v1/products", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Server error"}
    assert "disk" not in resp.text
