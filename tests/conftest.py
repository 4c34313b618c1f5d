"""
tests/conftest.py -- Shared test fixtures for Stockroom tests.

This module provides:
  - make_settings(): Settings pointing at an isolated in-memory database
  - settings / client: a fresh app + TestClient per test
  - register: fixture returning a signup helper -> (token, user_json)
  - auth_headers: fixture returning a token -> Authorization header helper

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.
Each test gets a uuid-suffixed name so no state leaks between tests.

bcrypt_rounds=4 keeps password hashing fast; production uses 12.
"""

from __future__ import annotations

import uuid
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from core.config import Settings

TEST_SECRET = "test-secret-key-0123456789abcdef-0123456789"


def make_settings(**overrides) -> Settings:
    """Build Settings for an isolated in-memory database."""
    db_name = f"stockroom_test_{uuid.uuid4().hex}"
    values = {
        "secret_key": TEST_SECRET,
        "database_url": f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true",
        "bcrypt_rounds": 4,
        "token_expire_seconds": 3600,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """TestClient over the real app; the lifespan builds stores from settings."""
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client: TestClient):
    """Return a helper that signs up through POST /api/v1/auth/signup.

    The helper returns (token, user_json) and asserts the 201.
    """

    def _register(
        name: str = "Ada Lovelace",
        email: str = "ada@example.com",
        password: str = "analytical",
    ) -> tuple[str, dict]:
        resp = client.post("/api/v1/auth/signup", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, f"Signup failed: {resp.status_code} {resp.text}"
        data = resp.json()
        return data["token"], data["user"]

    return _register


def bearer(token: str) -> dict[str, str]:
    """Authorization header for a token."""
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer
