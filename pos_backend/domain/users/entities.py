# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pos_backend.domain.exceptions import InvariantViolation


class Role(str, Enum):
    OWNER = "owner"
    CASHIER = "cashier"

    @classmethod
    def parse(cls, value: object) -> Role:
        """Strict conversion; anything but an exact known value is rejected."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise InvariantViolation(f"unknown role {value!r}", field="role")


@dataclass(slots=True, frozen=True)
class User:
    id: int
    username: str
    name: str
    password_hash: str
    role: Role
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class IdentityClaims:
    """Identity facts carried inside a session token.

    ``expires_at`` is only known once a token has been issued or verified and
    does not take part in equality.
    """

    user_id: int
    username: str
    role: Role
    expires_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.user_id, bool) or not isinstance(self.user_id, int):
            raise InvariantViolation("user id must be an integer", field="user_id")
        if self.user_id <= 0:
            raise InvariantViolation("user id must be positive", field="user_id")
        if not isinstance(self.username, str) or not self.username:
            raise InvariantViolation("username must be a non-empty string", field="username")
        object.__setattr__(self, "role", Role.parse(self.role))

    @classmethod
    def for_user(cls, user: User) -> IdentityClaims:
        return cls(user_id=user.id, username=user.username, role=user.role)


@dataclass(slots=True, frozen=True)
class AuthenticatedIdentity:
    """Identity attached to a request after the token passed every check."""

    user_id: int
    username: str
    role: Role
    token: str = field(repr=False)
    expires_at: datetime | None = None

    @classmethod
    def from_claims(cls, claims: IdentityClaims, token: str) -> AuthenticatedIdentity:
        return cls(
            user_id=claims.user_id,
            username=claims.username,
            role=claims.role,
            token=token,
            expires_at=claims.expires_at,
        )


@dataclass(slots=True, frozen=True)
class LoginResult:

    token: str
    user: User
