# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from pos_backend.domain.exceptions import InvariantViolation
from pos_backend.domain.sales.entities import SaleOrder, SaleOrderLine, generate_order_number
from pos_backend.domain.sales.repositories import SaleOrderRepository
from pos_backend.shared.logging import logger


@dataclass(slots=True, frozen=True)
class CreateSaleOrderInput:
    customer_name: str
    lines: Sequence[SaleOrderLine]
    notes: str = ""


class CreateSaleOrderUseCase:
    def __init__(
        self,
        orders: SaleOrderRepository,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._orders = orders
        self._clock = clock or (lambda: datetime.now(UTC))

    def execute(self, data: CreateSaleOrderInput, *, created_by_id: int) -> SaleOrder:
        customer_name = data.customer_name.strip()
        if not customer_name:
            raise InvariantViolation("customer name is required", field="customer_name")
        if not data.lines:
            raise InvariantViolation("an order needs at least one item", field="items")

        now = self._clock()
        order = self._orders.add(
            order_number=generate_order_number(created_by_id, now),
            customer_name=customer_name,
            notes=data.notes,
            created_by_id=created_by_id,
            lines=list(data.lines),
            created_at=now,
        )
        logger.info(
            f"sale_orders: created order_id={order.id} number={order.order_number} "
            f"items={len(order.items)} total={order.total_amount:.2f}"
        )
        return order


__all__ = ["CreateSaleOrderInput", "CreateSaleOrderUseCase"]
