# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pos_backend.application.pagination import Page, PageRequest
from pos_backend.domain.sales.entities import SaleOrder
from pos_backend.domain.sales.repositories import SaleOrderRepository


class ListSaleOrdersUseCase:
    def __init__(self, orders: SaleOrderRepository) -> None:
        self._orders = orders

    def execute(self, page: PageRequest) -> Page[SaleOrder]:
        items, total = self._orders.list(offset=page.offset, limit=page.limit)
        return Page(items=items, total_items=total, page=page.page, limit=page.limit)


__all__ = ["ListSaleOrdersUseCase"]
