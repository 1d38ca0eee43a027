# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pos_backend.domain.users.exceptions import CashierNotFoundError
from pos_backend.domain.users.repositories import UserRepository
from pos_backend.shared.logging import logger

from .get_cashier import load_cashier


class DeleteCashierUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int) -> None:
        load_cashier(self._users, user_id)
        if not self._users.soft_delete(user_id):
            raise CashierNotFoundError(user_id)
        logger.info(f"cashiers: deleted user_id={user_id}")


__all__ = ["DeleteCashierUseCase"]
