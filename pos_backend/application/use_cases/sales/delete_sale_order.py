# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pos_backend.domain.sales.exceptions import SaleOrderNotFoundError
from pos_backend.domain.sales.repositories import SaleOrderRepository
from pos_backend.shared.logging import logger


class DeleteSaleOrderUseCase:
    def __init__(self, orders: SaleOrderRepository) -> None:
        self._orders = orders

    def execute(self, order_id: int) -> None:
        if not self._orders.soft_delete(order_id):
            raise SaleOrderNotFoundError(order_id)
        logger.info(f"sale_orders: deleted order_id={order_id}")


__all__ = ["DeleteSaleOrderUseCase"]
