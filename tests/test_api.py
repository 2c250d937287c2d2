"""
Tests for the Flask API using the built-in test client.
"""

import pytest

from slooze.api.app import Services, create_app
from slooze.api.auth import REVOKED_TOKENS_KEY, cleanup_revoked_tokens
from slooze.auth import Authenticator
from slooze.catalog import CatalogStore
from slooze.orders import OrderBook


# ── Fixtures / helpers ───────────────────────────────────────────────

@pytest.fixture
def services():
    return Services(
        authenticator=Authenticator(delay=0),
        catalog=CatalogStore(),
        order_book=OrderBook(),
    )


@pytest.fixture
def client(services):
    app = create_app(services, secret_key="test-secret")
    app.config["TESTING"] = True
    return app.test_client()


def login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def auth_header(client, email="manager@slooze.com", password="manager123"):
    token = login(client, email, password).get_json()["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def manager(client):
    return auth_header(client)


@pytest.fixture
def keeper(client):
    return auth_header(client, "storekeeper@slooze.com", "store123")


SILVER = {"name": "Silver", "category": "Metals", "price": 24.10, "stock": 80,
          "description": "Silver bullion"}


# ── Tests: info / auth ───────────────────────────────────────────────

def test_index_and_health(client):
    assert client.get("/").get_json()["status"] == "running"
    assert client.get("/health").get_json()["products"] == 5


def test_login_ok(client):
    resp = login(client, "manager@slooze.com", "manager123")
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["user"] == {"id": "1", "email": "manager@slooze.com",
                            "name": "John Manager", "role": "manager"}
    assert data["token"]


def test_login_wrong_password(client):
    resp = login(client, "manager@slooze.com", "wrong")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Invalid email or password"


def test_login_requires_json_and_fields(client):
    assert client.post("/api/auth/login", data="x").status_code == 400
    assert login(client, "", "").status_code == 400


def test_missing_or_bad_token(client):
    assert client.get("/api/products").status_code == 401
    bad = {"Authorization": "Bearer nope"}
    assert client.get("/api/products", headers=bad).status_code == 401
    assert client.get("/api/products", headers={"Authorization": "nope"}).status_code == 401


def test_profile(client, keeper):
    data = client.get("/api/user/profile", headers=keeper).get_json()
    assert data["user"]["role"] == "storekeeper"


def test_logout_revokes_token(client, manager):
    assert client.post("/api/auth/logout", headers=manager).status_code == 200
    assert client.get("/api/user/profile", headers=manager).status_code == 401


# ── Tests: products ──────────────────────────────────────────────────

def test_list_products_for_any_role(client, keeper):
    data = client.get("/api/products?category=Energy&sort=price", headers=keeper).get_json()
    assert [p["name"] for p in data["products"]] == ["Natural Gas", "Crude Oil"]
    assert data["can_edit"] is False


def test_list_products_bad_sort(client, keeper):
    assert client.get("/api/products?sort=bogus", headers=keeper).status_code == 400


def test_get_product(client, keeper):
    assert client.get("/api/products/3", headers=keeper).get_json()["product"]["name"] == "Gold"
    assert client.get("/api/products/999", headers=keeper).status_code == 404


def test_manager_creates_product(client, manager, services):
    resp = client.post("/api/products", json=SILVER, headers=manager)
    product = resp.get_json()["product"]
    assert resp.status_code == 201
    assert product["id"]
    assert product["lastUpdated"].endswith("Z")
    assert services.catalog.get(product["id"]).name == "Silver"


def test_storekeeper_cannot_mutate(client, keeper):
    assert client.post("/api/products", json=SILVER, headers=keeper).status_code == 403
    assert client.put("/api/products/1", json=SILVER, headers=keeper).status_code == 403
    assert client.delete("/api/products/1", headers=keeper).status_code == 403


def test_create_invalid_product(client, manager):
    resp = client.post("/api/products", json=dict(SILVER, price=0, stock=-1), headers=manager)
    assert resp.status_code == 400
    assert set(resp.get_json()["fields"]) == {"price", "stock"}


def test_update_product(client, manager, services):
    resp = client.put("/api/products/3", json=dict(SILVER, name="Gold", stock=10), headers=manager)
    assert resp.status_code == 200
    assert services.catalog.get("3").stock == 10
    assert services.catalog.get("3").last_updated != "2025-04-11T09:45:00Z"


def test_update_unknown_product(client, manager):
    assert client.put("/api/products/999", json=SILVER, headers=manager).status_code == 404


def test_delete_product_twice(client, manager, services):
    assert client.delete("/api/products/2", headers=manager).status_code == 200
    assert client.delete("/api/products/2", headers=manager).status_code == 200
    assert services.catalog.get("2") is None


# ── Tests: manager views ─────────────────────────────────────────────

@pytest.mark.parametrize("path", ["/api/orders", "/api/users", "/api/dashboard"])
def test_manager_only_views(client, manager, keeper, path):
    assert client.get(path, headers=manager).status_code == 200
    assert client.get(path, headers=keeper).status_code == 403


def test_orders_filtering(client, manager):
    data = client.get("/api/orders?status=approved", headers=manager).get_json()
    assert [o["productName"] for o in data["orders"]] == ["Crude Oil"]
    assert client.get("/api/orders?status=lost", headers=manager).status_code == 400


def test_dashboard_payload(client, manager):
    data = client.get("/api/dashboard", headers=manager).get_json()
    assert data["stats"]["total_products"] == 5
    assert data["categories"][0]["category"] == "Metals"


def test_unknown_endpoint(client):
    assert client.get("/api/nothing").status_code == 404


# ── Tests: request boundaries ────────────────────────────────────────

@pytest.mark.parametrize("email", ["  manager@slooze.com  ", "manager@slooze.com ", " manager@slooze.com"])
def test_login_email_must_match_exactly(client, email):
    resp = login(client, email, "manager123")
    assert resp.status_code == 401


@pytest.mark.parametrize("body", ['["a"]', '"text"', "null", "42"])
def test_login_rejects_non_object_body(client, body):
    resp = client.post("/api/auth/login", data=body, content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Request body must be a JSON object"


@pytest.mark.parametrize("body", ['["a"]', '"text"', "null"])
def test_product_writes_reject_non_object_body(client, manager, body):
    created = client.post("/api/products", data=body, content_type="application/json", headers=manager)
    updated = client.put("/api/products/1", data=body, content_type="application/json", headers=manager)
    assert created.status_code == 400
    assert updated.status_code == 400
    assert updated.get_json()["error"] == "Request body must be a JSON object"


def test_orders_sorted_by_query_field(client, manager):
    data = client.get("/api/orders?sort=quantity&direction=asc", headers=manager).get_json()
    assert [o["quantity"] for o in data["orders"]] == [25, 50, 75, 100]
    assert client.get("/api/orders?sort=price", headers=manager).status_code == 400


# ── Tests: revocation bookkeeping ────────────────────────────────────

def test_logout_forgets_expired_revocations(client, manager):
    revoked = client.application.extensions[REVOKED_TOKENS_KEY]
    revoked["stale"] = 1  # expired long ago

    assert client.post("/api/auth/logout", headers=manager).status_code == 200

    assert "stale" not in revoked
    assert len(revoked) == 1
    assert client.get("/api/user/profile", headers=manager).status_code == 401


def test_cleanup_revoked_tokens_keeps_live_entries(capsys):
    revoked = {"old": 1, "live": 32503680000}
    cleanup_revoked_tokens(revoked)
    assert revoked == {"live": 32503680000}
    assert "Removed 1 expired revocations" in capsys.readouterr().out
