# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pos_backend.domain.sales.entities import SaleOrder
from pos_backend.domain.sales.exceptions import SaleOrderNotFoundError
from pos_backend.domain.sales.repositories import SaleOrderRepository


class GetSaleOrderUseCase:
    def __init__(self, orders: SaleOrderRepository) -> None:
        self._orders = orders

    def execute(self, order_id: int) -> SaleOrder:
        order = self._orders.find_by_id(order_id)
        if order is None:
            raise SaleOrderNotFoundError(order_id)
        return order


__all__ = ["GetSaleOrderUseCase"]
