# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Request authentication and role checks for Flask views.

Views opt in with ``gate.login_required`` or ``gate.require_role(...)``. Both
decorators attach the verified identity to ``flask.g`` and hand it to the
view as the ``identity`` keyword argument.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from pos_backend.domain.users.entities import AuthenticatedIdentity, Role
from pos_backend.domain.users.exceptions import (
    AuthenticationError,
    InsufficientRoleError,
    MalformedAuthHeaderError,
    MissingAuthHeaderError,
    MissingIdentityError,
    RevokedTokenError,
)
from pos_backend.domain.users.repositories import RevocationStore, TokenCodec
from pos_backend.shared.logging import logger, set_actor

BEARER_SCHEME = "Bearer"

DeniedHook = Callable[[AuthenticatedIdentity, tuple[Role, ...]], None]


def parse_bearer(header: str | None) -> str:
    """Return the token from an exact ``Bearer <token>`` header value."""
    if not header:
        raise MissingAuthHeaderError()
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        raise MalformedAuthHeaderError()
    return parts[1]


class AccessController:
    def __init__(self, *allowed: Role) -> None:
        if not allowed:
            raise ValueError("at least one role must be allowed")
        self.allowed: tuple[Role, ...] = tuple(Role.parse(role) for role in allowed)

    def check(self, identity: AuthenticatedIdentity | None) -> AuthenticatedIdentity:
        if identity is None:
            raise MissingIdentityError()
        if identity.role not in self.allowed:
            raise InsufficientRoleError(
                identity.role.value, tuple(role.value for role in self.allowed)
            )
        return identity


class RequestGate:
    def __init__(
        self,
        codec: TokenCodec,
        revocations: RevocationStore,
        *,
        on_denied: DeniedHook | None = None,
    ) -> None:
        self._codec = codec
        self._revocations = revocations
        self._on_denied = on_denied

    def authenticate(self, header: str | None) -> AuthenticatedIdentity:
        token = parse_bearer(header)
        if self._revocations.is_revoked(token):
            raise RevokedTokenError()
        claims = self._codec.verify(token)
        return AuthenticatedIdentity.from_claims(claims, token)

    def login_required(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            identity = self._authenticate_request()
            kwargs["identity"] = identity
            return func(*args, **kwargs)

        return wrapper

    def require_role(self, *roles: Role) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        controller = AccessController(*roles)

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            @wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                identity = self._authenticate_request()
                try:
                    controller.check(identity)
                except InsufficientRoleError as exc:
                    logger.warning(
                        f"Access denied: user {identity.user_id} on "
                        f"{request.method} {request.path}: {exc.reason}"
                    )
                    if self._on_denied is not None:
                        self._on_denied(identity, controller.allowed)
                    raise
                kwargs["identity"] = identity
                return func(*args, **kwargs)

            return wrapper

        return decorator

    def _authenticate_request(self) -> AuthenticatedIdentity:
        try:
            identity = self.authenticate(request.headers.get("Authorization"))
        except AuthenticationError as exc:
            logger.warning(
                f"Auth failed on {request.method} {request.path}: {exc.reason}"
            )
            raise
        g.identity = identity
        g.user_id = identity.user_id
        set_actor(identity.user_id, identity.role.value)
        logger.debug(
            f"Auth OK: user={identity.user_id} role={identity.role.value} "
            f"{request.method} {request.path}"
        )
        return identity


__all__ = [
    "AccessController",
    "RequestGate",
    "parse_bearer",
]
