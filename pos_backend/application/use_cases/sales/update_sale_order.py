# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pos_backend.domain.sales.entities import SaleOrder, SaleOrderChanges
from pos_backend.domain.sales.exceptions import SaleOrderNotFoundError
from pos_backend.domain.sales.repositories import SaleOrderRepository
from pos_backend.shared.logging import logger


class UpdateSaleOrderUseCase:
    def __init__(self, orders: SaleOrderRepository) -> None:
        self._orders = orders

    def execute(self, order_id: int, changes: SaleOrderChanges) -> SaleOrder:
        updated = self._orders.apply_changes(order_id, changes)
        if updated is None:
            raise SaleOrderNotFoundError(order_id)
        logger.info(
            f"sale_orders: updated order_id={order_id} "
            f"replaced_items={changes.lines is not None}"
        )
        return updated


__all__ = ["UpdateSaleOrderUseCase"]
