# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pos_backend.application.pagination import Page, PageRequest
from pos_backend.domain.users.entities import Role, User
from pos_backend.domain.users.repositories import UserRepository


class ListCashiersUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self, page: PageRequest) -> Page[User]:
        items, total = self._users.list_by_role(
            Role.CASHIER, offset=page.offset, limit=page.limit
        )
        return Page(items=items, total_items=total, page=page.page, limit=page.limit)


__all__ = ["ListCashiersUseCase"]
