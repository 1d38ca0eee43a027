# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime

from pos_backend.domain.users.entities import User
from pos_backend.domain.users.exceptions import UserAlreadyExistsError
from pos_backend.domain.users.repositories import PasswordHasher, UserRepository
from pos_backend.shared.logging import logger

from .get_cashier import load_cashier


@dataclass(slots=True, frozen=True)
class UpdateCashierInput:
    """Fields left as ``None`` keep their stored value."""

    username: str | None = None
    password: str | None = None
    name: str | None = None
    is_active: bool | None = None


class UpdateCashierUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, user_id: int, data: UpdateCashierInput) -> User:
        user = load_cashier(self._users, user_id)

        changes: dict[str, object] = {}
        if data.username is not None and data.username != user.username:
            if self._users.username_taken(data.username, exclude_id=user.id):
                raise UserAlreadyExistsError()
            changes["username"] = data.username
        if data.name is not None:
            changes["name"] = data.name
        if data.password:
            changes["password_hash"] = self._password_hasher.hash(data.password)
        if data.is_active is not None:
            changes["is_active"] = data.is_active

        if not changes:
            return user

        updated = self._users.update(replace(user, updated_at=datetime.now(UTC), **changes))
        logger.info(
            f"cashiers: updated user_id={user.id} fields={sorted(changes)}"
        )
        return updated


__all__ = ["UpdateCashierInput", "UpdateCashierUseCase"]
