"""
tests/test_product_routes.py -- Integration tests for the product routes.

Coverage:
  - Auth failures: 401 on every product route without / with a bad token
  - CRUD happy path: create 201, list, get, partial update, delete
  - Ownership isolation: user B cannot see, read, update or delete user A's
    product, and gets the same 404 as for a product that never existed
  - Validation: missing fields, negative, boolean, oversized or non-numeric
    price -> 400
  - Path ids outside the stored integer range -> 404
  - Owner/id fields in request bodies are ignored
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

WIDGET = {"name": "Widget", "description": "A widget", "category": "Tools", "price": 19.99}


@pytest.fixture
def alice(register, auth_headers) -> dict[str, str]:
    token, _user = register(name="Alice", email="alice@example.com")
    return auth_headers(token)


@pytest.fixture
def bob(register, auth_headers) -> dict[str, str]:
    token, _user = register(name="Bob", email="bob@example.com")
    return auth_headers(token)


def _create(client: TestClient, headers: dict, **overrides) -> dict:
    resp = client.post("/api/v1/products", json={**WIDGET, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestProductAuthFailure:
    """Protected routes must return 401 without a usable token."""

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/api/v1/products"),
            ("POST", "/api/v1/products"),
            ("GET", "/api/v1/products/1"),
            ("PUT", "/api/v1/products/1"),
            ("DELETE", "/api/v1/products/1"),
        ],
    )
    def test_no_token(self, client: TestClient, method: str, path: str) -> None:
        resp = client.request(method, path, json=WIDGET)
        assert resp.status_code == 401
        assert resp.json()["success"] is False

    def test_expired_token_rejected_everywhere(self, client: TestClient, register, auth_headers) -> None:
        token, user = register()
        product = _create(client, auth_headers(token))
        expired = client.app.state.tokens.issue(user["_id"], issued_at=datetime.now(timezone.utc) - timedelta(days=30))
        headers = auth_headers(expired)
        assert client.get("/api/v1/products", headers=headers).status_code == 401
        assert client.post("/api/v1/products", json=WIDGET, headers=headers).status_code == 401
        assert client.put(f"/api/v1/products/{product['_id']}", json={"price": 1}, headers=headers).status_code == 401
        assert client.delete(f"/api/v1/products/{product['_id']}", headers=headers).status_code == 401


class TestProductCrud:
    def test_create_then_list_round_trip(self, client: TestClient, alice) -> None:
        resp = client.post("/api/v1/products", json=WIDGET, headers=alice)
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Product created successfully"
        created = body["data"]
        for key, value in WIDGET.items():
            assert created[key] == value
        assert isinstance(created["_id"], int)
        assert created["createdAt"]

        listed = client.get("/api/v1/products", headers=alice)
        assert listed.status_code == 200
        assert listed.json() == {"success": True, "data": [created]}

    def test_price_is_a_json_number(self, client: TestClient, alice) -> None:
        created = _create(client, alice, price=5)
        assert created["price"] == 5
        assert isinstance(created["price"], float)

    def test_list_newest_first(self, client: TestClient, alice) -> None:
        first = _create(client, alice, name="first")
        second = _create(client, alice, name="second")
        data = client.get("/api/v1/products", headers=alice).json()["data"]
        assert [p["_id"] for p in data] == [second["_id"], first["_id"]]

    def test_get_single(self, client: TestClient, alice) -> None:
        created = _create(client, alice)
        resp = client.get(f"/api/v1/products/{created['_id']}", headers=alice)
        assert resp.status_code == 200
        assert resp.json()["data"] == created

    def test_partial_update_price_only(self, client: TestClient, alice) -> None:
        created = _create(client, alice)
        resp = client.put(f"/api/v1/products/{created['_id']}", json={"price": 25.00}, headers=alice)
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["message"] == "Product updated successfully"
        updated = body["data"]
        assert updated["price"] == 25.0
        assert updated["name"] == "Widget"
        assert updated["description"] == "A widget"
        assert updated["category"] == "Tools"
        assert updated["createdAt"] == created["createdAt"]

    def test_update_ignores_owner_and_id(self, client: TestClient, alice, bob) -> None:
        created = _create(client, alice)
        resp = client.put(
            f"/api/v1/products/{created['_id']}",
            json={"_id": 999, "user": 12345, "owner_id": 12345, "name": "Renamed"},
            headers=alice,
        )
        assert resp.status_code == 200
        updated = resp.json()["data"]
        assert updated["_id"] == created["_id"]
        assert updated["user"] == created["user"]
        assert updated["name"] == "Renamed"
        assert client.get("/api/v1/products", headers=bob).json()["data"] == []

    def test_create_ignores_owner_in_body(self, client: TestClient, alice, bob) -> None:
        created = _create(client, alice, user=424242)
        me = client.get("/api/v1/auth/me", headers=alice).json()["user"]
        assert created["user"] == me["_id"]

    def test_delete_then_delete_again(self, client: TestClient, alice) -> None:
        created = _create(client, alice)
        resp = client.delete(f"/api/v1/products/{created['_id']}", headers=alice)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Product deleted successfully"}

        remaining = client.get("/api/v1/products", headers=alice).json()["data"]
        assert created["_id"] not in [p["_id"] for p in remaining]

        again = client.delete(f"/api/v1/products/{created['_id']}", headers=alice)
        assert again.status_code == 404
        assert again.json() == {"success": False, "message": "Product not found"}


class TestOwnershipIsolation:
    def test_other_user_cannot_touch_product(self, client: TestClient, alice, bob) -> None:
        created = _create(client, alice)
        pid = created["_id"]

        assert client.get("/api/v1/products", headers=bob).json()["data"] == []
        assert client.get(f"/api/v1/products/{pid}", headers=bob).status_code == 404
        assert client.put(f"/api/v1/products/{pid}", json={"price": 0}, headers=bob).status_code == 404
        assert client.delete(f"/api/v1/products/{pid}", headers=bob).status_code == 404

        # Alice's record is untouched.
        mine = client.get(f"/api/v1/products/{pid}", headers=alice).json()["data"]
        assert mine == created

    def test_foreign_and_missing_ids_are_indistinguishable(self, client: TestClient, alice, bob) -> None:
        created = _create(client, alice)
        foreign = client.put(f"/api/v1/products/{created['_id']}", json={"price": 1}, headers=bob)
        missing = client.put("/api/v1/products/987654", json={"price": 1}, headers=bob)
        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()

    def test_non_numeric_id_is_not_found(self, client: TestClient, alice) -> None:
        resp = client.delete("/api/v1/products/not-an-id", headers=alice)
        assert resp.status_code == 404

    @pytest.mark.parametrize("pid", ["0", "-1", "9223372036854775808", "99999999999999999999999"])
    def test_out_of_range_id_is_not_found(self, client: TestClient, alice, pid: str) -> None:
        assert client.get(f"/api/v1/products/{pid}", headers=alice).status_code == 404
        assert client.put(f"/api/v1/products/{pid}", json={"price": 1}, headers=alice).status_code == 404
        resp = client.delete(f"/api/v1/products/{pid}", headers=alice)
        assert resp.status_code == 404
        assert resp.json()["success"] is False


class TestProductValidation:
    def test_missing_fields(self, client: TestClient, alice) -> None:
        resp = client.post("/api/v1/products", json={"name": "Widget"}, headers=alice)
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        for field in ("description", "category", "price"):
            assert field in body["message"]

    def test_blank_field(self, client: TestClient, alice) -> None:
        resp = client.post("/api/v1/products", json={**WIDGET, "category": "  "}, headers=alice)
        assert resp.status_code == 400

    @pytest.mark.parametrize("price", [-0.01, "cheap", None, True, False, 1e10])
    def test_bad_price(self, client: TestClient, alice, price) -> None:
        resp = client.post("/api/v1/products", json={**WIDGET, "price": price}, headers=alice)
        assert resp.status_code == 400
        assert "price" in resp.json()["message"]

    def test_update_rejects_negative_price(self, client: TestClient, alice) -> None:
        created = _create(client, alice)
        resp = client.put(f"/api/v1/products/{created['_id']}", json={"price": -5}, headers=alice)
        assert resp.status_code == 400

    @pytest.mark.parametrize("price", [True, 10_000_000_000])
    def test_update_rejects_bool_and_oversized_price(self, client: TestClient, alice, price) -> None:
        created = _create(client, alice)
        resp = client.put(f"/api/v1/products/{created['_id']}", json={"price": price}, headers=alice)
        assert resp.status_code == 400
        assert client.get(f"/api/v1/products/{created['_id']}", headers=alice).json()["data"]["price"] == WIDGET["price"]

    def test_largest_price_accepted(self, client: TestClient, alice) -> None:
        created = _create(client, alice, price=9_999_999_999.99)
        assert created["price"] == 9_999_999_999.99

    def test_malformed_json_without_token_is_a_400(self, client: TestClient) -> None:
        # Body parsing runs before the auth dependency.
        resp = client.post(
            "/api/v1/products", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_empty_update_is_a_no_op(self, client: TestClient, alice) -> None:
        created = _create(client, alice)
        resp = client.put(f"/api/v1/products/{created['_id']}", json={}, headers=alice)
        assert resp.status_code == 200
        assert resp.json()["data"] == created
