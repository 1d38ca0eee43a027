from __future__ import annotations

from datetime import timedelta

import pytest
from flask import Flask, g, jsonify

from pos_backend.domain.users.entities import AuthenticatedIdentity, IdentityClaims, Role
from pos_backend.domain.users.exceptions import (
    ExpiredTokenError,
    InsufficientRoleError,
    InvalidSignatureError,
    MalformedAuthHeaderError,
    MissingAuthHeaderError,
    MissingIdentityError,
    RevokedTokenError,
)
from pos_backend.infrastructure.auth.middleware import AccessController, RequestGate, parse_bearer
from pos_backend.infrastructure.auth.revocation import InMemoryRevocationStore
from pos_backend.infrastructure.auth.token_codec import JwtTokenCodec
from pos_backend.shared.middleware.error_handler import configure_error_handling


@pytest.fixture()
def codec(clock) -> JwtTokenCodec:
    return JwtTokenCodec("gate-secret", clock=clock)


@pytest.fixture()
def store(clock) -> InMemoryRevocationStore:
    return InMemoryRevocationStore(clock=clock)


@pytest.fixture()
def gate(codec: JwtTokenCodec, store: InMemoryRevocationStore) -> RequestGate:
    return RequestGate(codec, store)


def _token(codec: JwtTokenCodec, role: Role, user_id: int = 7) -> str:
    claims = IdentityClaims(user_id=user_id, username=f"user{user_id}", role=role)
    return codec.issue(claims, timedelta(hours=1))


def _identity(role: Role) -> AuthenticatedIdentity:
    return AuthenticatedIdentity(user_id=1, username="someone", role=role, token="t")


@pytest.fixture()
def flask_app(gate: RequestGate) -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)

    @app.get("/me")
    @gate.login_required
    def me(identity: AuthenticatedIdentity):
        assert g.identity is identity
        return jsonify({"user_id": identity.user_id, "role": identity.role.value})

    @app.get("/owner-only")
    @gate.require_role(Role.OWNER)
    def owner_only(identity: AuthenticatedIdentity):
        return jsonify({"ok": True})

    @app.get("/staff")
    @gate.require_role(Role.CASHIER, Role.OWNER)
    def staff(identity: AuthenticatedIdentity):
        return jsonify({"ok": True})

    return app


@pytest.mark.parametrize(
    ("header", "error"),
    [
        (None, MissingAuthHeaderError),
        ("", MissingAuthHeaderError),
        ("Bearer", MalformedAuthHeaderError),
        ("Bearer ", MalformedAuthHeaderError),
        ("bearer abc", MalformedAuthHeaderError),
        ("Token abc", MalformedAuthHeaderError),
        ("Bearer abc def", MalformedAuthHeaderError),
        ("Bearer  abc", MalformedAuthHeaderError),
    ],
)
def test_parse_bearer_rejects_anything_but_exact_form(header, error) -> None:
    with pytest.raises(error):
        parse_bearer(header)


def test_parse_bearer_returns_token() -> None:
    assert parse_bearer("Bearer abc.def.ghi") == "abc.def.ghi"


def test_authenticate_builds_identity(gate: RequestGate, codec: JwtTokenCodec) -> None:
    token = _token(codec, Role.CASHIER)

    identity = gate.authenticate(f"Bearer {token}")

    assert identity.user_id == 7
    assert identity.role is Role.CASHIER
    assert identity.token == token
    assert token not in repr(identity)


def test_revocation_is_checked_before_verification(
    gate: RequestGate, store: InMemoryRevocationStore
) -> None:
    store.revoke("not-even-a-jwt")

    with pytest.raises(RevokedTokenError):
        gate.authenticate("Bearer not-even-a-jwt")


def test_access_controller_allows_listed_roles() -> None:
    owner = _identity(Role.OWNER)

    assert AccessController(Role.OWNER).check(owner) is owner
    assert AccessController(Role.CASHIER, Role.OWNER).check(_identity(Role.CASHIER))


def test_access_controller_forbids_other_roles() -> None:
    with pytest.raises(InsufficientRoleError) as exc_info:
        AccessController(Role.OWNER).check(_identity(Role.CASHIER))

    assert exc_info.value.to_dict()["code"] == 403


def test_access_controller_without_identity_is_unauthorized() -> None:
    with pytest.raises(MissingIdentityError):
        AccessController(Role.OWNER).check(None)


def test_access_controller_requires_at_least_one_role() -> None:
    with pytest.raises(ValueError):
        AccessController()


def test_login_required_passes_identity(flask_app: Flask, codec: JwtTokenCodec) -> None:
    token = _token(codec, Role.CASHIER, user_id=11)

    with flask_app.test_client() as client:
        response = client.get("/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.get_json() == {"user_id": 11, "role": "cashier"}


def test_every_auth_failure_renders_the_same_401(
    flask_app: Flask, codec: JwtTokenCodec, store: InMemoryRevocationStore, clock
) -> None:
    revoked = _token(codec, Role.OWNER)
    store.revoke(revoked, clock.now + timedelta(hours=1))
    forged = JwtTokenCodec("other-secret", clock=clock).issue(
        IdentityClaims(user_id=7, username="user7", role=Role.OWNER), timedelta(hours=1)
    )
    expired = codec.issue(
        IdentityClaims(user_id=7, username="user7", role=Role.OWNER), timedelta(0)
    )
    headers = [
        {},
        {"Authorization": "Basic abc"},
        {"Authorization": f"Bearer {revoked}"},
        {"Authorization": f"Bearer {forged}"},
        {"Authorization": f"Bearer {expired}"},
        {"Authorization": "Bearer garbage"},
    ]

    with flask_app.test_client() as client:
        bodies = []
        for header in headers:
            response = client.get("/me", headers=header)
            assert response.status_code == 401
            bodies.append(response.get_json())

    assert all(body == bodies[0] for body in bodies)
    assert bodies[0] == {
        "code": 401,
        "status": "failed",
        "error": "unauthorized",
        "message": "Unauthorized",
    }


def test_require_role_owner(flask_app: Flask, codec: JwtTokenCodec) -> None:
    cashier = _token(codec, Role.CASHIER, user_id=2)
    owner = _token(codec, Role.OWNER, user_id=1)

    with flask_app.test_client() as client:
        forbidden = client.get("/owner-only", headers={"Authorization": f"Bearer {cashier}"})
        allowed = client.get("/owner-only", headers={"Authorization": f"Bearer {owner}"})
        anonymous = client.get("/owner-only")

    assert forbidden.status_code == 403
    assert forbidden.get_json()["message"] == (
        "You don't have permission to access this resource"
    )
    assert allowed.status_code == 200
    assert anonymous.status_code == 401


def test_require_role_accepts_any_listed_role(flask_app: Flask, codec: JwtTokenCodec) -> None:
    with flask_app.test_client() as client:
        for role in (Role.CASHIER, Role.OWNER):
            token = _token(codec, role)
            response = client.get("/staff", headers={"Authorization": f"Bearer {token}"})
            assert response.status_code == 200


def test_access_denied_hook_is_called(codec: JwtTokenCodec, store: InMemoryRevocationStore) -> None:
    denied: list[tuple[int, tuple[Role, ...]]] = []
    gate = RequestGate(
        codec, store, on_denied=lambda identity, allowed: denied.append((identity.user_id, allowed))
    )
    app = Flask(__name__)
    configure_error_handling(app)

    @app.get("/owner-only")
    @gate.require_role(Role.OWNER)
    def owner_only(identity: AuthenticatedIdentity):
        return jsonify({"ok": True})

    token = _token(codec, Role.CASHIER, user_id=5)
    with app.test_client() as client:
        response = client.get("/owner-only", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403
    assert denied == [(5, (Role.OWNER,))]


def test_logout_scenario_over_time(
    flask_app: Flask, codec: JwtTokenCodec, store: InMemoryRevocationStore, clock
) -> None:
    token = codec.issue(
        IdentityClaims(user_id=7, username="user7", role=Role.OWNER), timedelta(hours=1)
    )
    issued_at = clock.now
    headers = {"Authorization": f"Bearer {token}"}

    with flask_app.test_client() as client:
        clock.advance(minutes=30)
        assert codec.verify(token).user_id == 7
        assert client.get("/owner-only", headers=headers).status_code == 200

        clock.advance(minutes=1)
        store.revoke(token, issued_at + timedelta(hours=1))

        clock.advance(minutes=1)
        assert codec.verify(token).user_id == 7
        response = client.get("/owner-only", headers=headers)
        assert response.status_code == 401
        assert response.get_json()["error"] == "unauthorized"


def test_expired_and_signature_errors_surface_from_authenticate(
    gate: RequestGate, codec: JwtTokenCodec, clock
) -> None:
    token = _token(codec, Role.OWNER)
    clock.advance(hours=2)

    with pytest.raises(ExpiredTokenError):
        gate.authenticate(f"Bearer {token}")

    forged = JwtTokenCodec("x-secret", clock=clock).issue(
        IdentityClaims(user_id=1, username="a", role=Role.OWNER), timedelta(hours=1)
    )
    with pytest.raises(InvalidSignatureError):
        gate.authenticate(f"Bearer {forged}")
