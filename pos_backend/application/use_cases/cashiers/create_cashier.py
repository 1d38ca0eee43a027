# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from pos_backend.domain.users.entities import Role, User
from pos_backend.domain.users.exceptions import UserAlreadyExistsError
from pos_backend.domain.users.repositories import PasswordHasher, UserRepository
from pos_backend.shared.logging import logger


@dataclass(slots=True, frozen=True)
class CreateCashierInput:
    username: str
    password: str
    name: str


class CreateCashierUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, data: CreateCashierInput) -> User:
        if self._users.username_taken(data.username):
            raise UserAlreadyExistsError()
        now = datetime.now(UTC)
        user = User(
            id=0,
            username=data.username,
            name=data.name,
            password_hash=self._password_hasher.hash(data.password),
            role=Role.CASHIER,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        persisted = self._users.add(user)
        logger.info(f"cashiers: created user_id={persisted.id} username={persisted.username}")
        return persisted


__all__ = ["CreateCashierInput", "CreateCashierUseCase"]
