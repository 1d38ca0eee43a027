from __future__ import annotations

from collections.abc import Iterator

import pytest
from flask.testing import FlaskClient

from pos_backend.app import create_app
from pos_backend.infrastructure.db import ENGINE, Base, SessionLocal
from pos_backend.infrastructure.db.models import AuditLog, User


@pytest.fixture(autouse=True)
def reset_database() -> Iterator[None]:
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    SessionLocal.remove()
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def client() -> Iterator[FlaskClient]:
    app = create_app()
    with app.test_client() as client:
        yield client


def _login(client: FlaskClient, username: str, password: str) -> dict[str, str]:
    response = client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.get_json()
    return {"Authorization": f"Bearer {response.get_json()['data']['token']}"}


def test_default_users_are_seeded_once() -> None:
    create_app()
    create_app()

    session = SessionLocal()
    try:
        roles = sorted(role for (role,) in session.query(User.role).all())
    finally:
        session.close()
    assert roles == ["cashier", "owner"]


def test_health_is_public(client: FlaskClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "success"
    assert body["data"]["database"] == "ok"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Request-ID"]


def test_login_logout_flow(client: FlaskClient) -> None:
    headers = _login(client, "owner", "owner123")

    assert client.get("/users/cashier", headers=headers).status_code == 200

    logout = client.post("/auth/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.get_json()["message"] == "Logout successful"

    after = client.get("/users/cashier", headers=headers)
    assert after.status_code == 401
    assert after.get_json()["error"] == "unauthorized"
    assert client.post("/auth/logout", headers=headers).status_code == 401

    session = SessionLocal()
    try:
        actions = {action for (action,) in session.query(AuditLog.action).all()}
    finally:
        session.close()
    assert {"login_success", "logout"} <= actions


def test_login_failures_are_indistinguishable(client: FlaskClient) -> None:
    wrong_password = client.post("/auth/login", json={"username": "owner", "password": "x"})
    unknown_user = client.post("/auth/login", json={"username": "nobody", "password": "x"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.get_json() == unknown_user.get_json()


def test_cashier_cannot_manage_cashiers(client: FlaskClient) -> None:
    headers = _login(client, "cashier", "cashier123")

    response = client.get("/users/cashier", headers=headers)

    assert response.status_code == 403
    assert response.get_json()["error"] == "forbidden"


def test_owner_manages_cashiers(client: FlaskClient) -> None:
    owner = _login(client, "owner", "owner123")

    created = client.post(
        "/users/cashier",
        json={"username": "dana", "password": "dana-pass", "name": "Dana"},
        headers=owner,
    )
    assert created.status_code == 201
    cashier = created.get_json()["data"]
    assert cashier["role"] == "cashier"
    assert "password_hash" not in cashier

    duplicate = client.post(
        "/users/cashier",
        json={"username": "dana", "password": "dana-pass", "name": "Dana"},
        headers=owner,
    )
    assert duplicate.status_code == 409

    listing = client.get("/users/cashier?page=1&limit=1", headers=owner).get_json()["data"]
    assert listing["total_items"] == 2
    assert listing["total_pages"] == 2
    assert listing["limit"] == 1

    _login(client, "dana", "dana-pass")

    updated = client.patch(
        f"/users/cashier/{cashier['id']}", json={"is_active": False}, headers=owner
    )
    assert updated.status_code == 200
    assert updated.get_json()["data"]["is_active"] is False
    inactive_login = client.post("/auth/login", json={"username": "dana", "password": "dana-pass"})
    assert inactive_login.status_code == 401

    deleted = client.delete(f"/users/cashier/{cashier['id']}", headers=owner)
    assert deleted.status_code == 200
    assert client.get(f"/users/cashier/{cashier['id']}", headers=owner).status_code == 404


def test_cashier_payload_validation(client: FlaskClient) -> None:
    owner = _login(client, "owner", "owner123")

    response = client.post(
        "/users/cashier", json={"username": "ab", "password": "123", "name": ""}, headers=owner
    )

    assert response.status_code == 422
    assert set(response.get_json()["context"]["fields"]) == {"username", "password", "name"}


def test_sale_order_lifecycle(client: FlaskClient) -> None:
    cashier = _login(client, "cashier", "cashier123")
    owner = _login(client, "owner", "owner123")

    created = client.post(
        "/sale-orders",
        json={
            "customer_name": "Walk-in",
            "notes": "table 4",
            "items": [
                {"product_name": "Latte", "quantity": 2, "unit_price": 3.5},
                {"product_name": "Croissant", "quantity": 1, "unit_price": 2.25},
            ],
        },
        headers=cashier,
    )
    assert created.status_code == 201
    order = created.get_json()["data"]
    assert order["total_amount"] == 9.25
    assert order["order_number"].startswith("SO-")
    assert order["created_by"]["username"] == "cashier"
    assert [item["subtotal"] for item in order["items"]] == [7.0, 2.25]

    fetched = client.get(f"/sale-orders/{order['id']}", headers=owner)
    assert fetched.status_code == 200
    assert fetched.get_json()["data"]["order_number"] == order["order_number"]

    renamed = client.patch(
        f"/sale-orders/{order['id']}", json={"customer_name": "Alex"}, headers=owner
    ).get_json()["data"]
    assert renamed["customer_name"] == "Alex"
    assert renamed["total_amount"] == 9.25
    assert len(renamed["items"]) == 2

    replaced = client.patch(
        f"/sale-orders/{order['id']}",
        json={"items": [{"product_name": "Tea", "quantity": 3, "unit_price": 1.2}]},
        headers=cashier,
    ).get_json()["data"]
    assert replaced["total_amount"] == 3.6
    assert [item["product_name"] for item in replaced["items"]] == ["Tea"]

    listing = client.get("/sale-orders", headers=cashier).get_json()["data"]
    assert listing["total_items"] == 1
    assert listing["page"] == 1
    assert listing["limit"] == 10

    assert client.delete(f"/sale-orders/{order['id']}", headers=cashier).status_code == 200
    missing = client.get(f"/sale-orders/{order['id']}", headers=cashier)
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "sale_order_not_found"


def test_sale_order_validation(client: FlaskClient) -> None:
    cashier = _login(client, "cashier", "cashier123")

    no_items = client.post(
        "/sale-orders", json={"customer_name": "A", "items": []}, headers=cashier
    )
    bad_quantity = client.post(
        "/sale-orders",
        json={
            "customer_name": "A",
            "items": [{"product_name": "Tea", "quantity": 0, "unit_price": 1}],
        },
        headers=cashier,
    )

    assert no_items.status_code == 422
    assert bad_quantity.status_code == 422


def test_sale_orders_require_authentication(client: FlaskClient) -> None:
    response = client.get("/sale-orders")

    assert response.status_code == 401
    assert response.get_json() == {
        "code": 401,
        "status": "failed",
        "error": "unauthorized",
        "message": "Unauthorized",
    }


def test_unknown_route_uses_envelope(client: FlaskClient) -> None:
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.get_json()["status"] == "failed"
