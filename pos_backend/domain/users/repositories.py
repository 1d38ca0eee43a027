# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .entities import IdentityClaims, Role, User


class UserRepository(Protocol):
    def find_active_by_username(self, username: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def username_taken(self, username: str, *, exclude_id: int | None = None) -> bool: ...
    def add(self, user: User) -> User: ...
    def update(self, user: User) -> User: ...
    def soft_delete(self, user_id: int) -> bool: ...
    def list_by_role(self, role: Role, *, offset: int, limit: int) -> tuple[list[User], int]: ...
    def count_by_role(self, role: Role) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenCodec(Protocol):
    def issue(self, claims: IdentityClaims, ttl: timedelta) -> str: ...
    def verify(self, token: str) -> IdentityClaims: ...


class RevocationStore(Protocol):
    def revoke(self, token: str, expires_at: datetime | None = None) -> None: ...
    def is_revoked(self, token: str) -> bool: ...
