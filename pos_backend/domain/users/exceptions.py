# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Authentication, authorization and user management errors.

Every authentication-stage failure renders as the same 401 ``unauthorized``
payload. The concrete cause is kept in ``reason`` for logs only.
"""

from __future__ import annotations

from http import HTTPStatus

from pos_backend.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT
    message = "Username already exists"


class CashierNotFoundError(DomainError):
    code = "cashier_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "Cashier not found"

    def __init__(self, user_id: int) -> None:
        super().__init__(context={"user_id": user_id})


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid username or password"


class AuthenticationError(DomainError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
    message = "Unauthorized"
    reason = "authentication failed"


class MissingAuthHeaderError(AuthenticationError):
    reason = "authorization header missing"


class MalformedAuthHeaderError(AuthenticationError):
    reason = "authorization header malformed"


class RevokedTokenError(AuthenticationError):
    reason = "token invalidated"


class TokenError(AuthenticationError):
    reason = "invalid or expired token"


class InvalidSignatureError(TokenError):
    reason = "token signature mismatch"


class MalformedTokenError(TokenError):
    reason = "token malformed"


class ExpiredTokenError(TokenError):
    reason = "token expired"


class MissingIdentityError(AuthenticationError):
    reason = "no authenticated identity on request"


class InsufficientRoleError(DomainError):
    code = "forbidden"
    status = HTTPStatus.FORBIDDEN
    message = "You don't have permission to access this resource"

    def __init__(self, role: str, allowed: tuple[str, ...]) -> None:
        super().__init__()
        self.reason = f"role {role} not in {', '.join(allowed)}"


__all__ = [
    "AuthenticationError",
    "CashierNotFoundError",
    "ExpiredTokenError",
    "InsufficientRoleError",
    "InvalidCredentialsError",
    "InvalidSignatureError",
    "MalformedAuthHeaderError",
    "MalformedTokenError",
    "MissingAuthHeaderError",
    "MissingIdentityError",
    "RevokedTokenError",
    "TokenError",
    "UserAlreadyExistsError",
]
