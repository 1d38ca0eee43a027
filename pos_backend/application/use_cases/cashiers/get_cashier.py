# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pos_backend.domain.users.entities import Role, User
from pos_backend.domain.users.exceptions import CashierNotFoundError
from pos_backend.domain.users.repositories import UserRepository


def load_cashier(users: UserRepository, user_id: int) -> User:
    """Only cashier rows are reachable; an owner id reads as not found."""
    user = users.find_by_id(user_id)
    if user is None or user.role is not Role.CASHIER:
        raise CashierNotFoundError(user_id)
    return user


class GetCashierUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int) -> User:
        return load_cashier(self._users, user_id)


__all__ = ["GetCashierUseCase", "load_cashier"]
