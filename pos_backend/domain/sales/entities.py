# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Domain entities for sale orders and their line items."""

from __future__ import annotations

import secrets
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from pos_backend.domain.exceptions import InvariantViolation
from pos_backend.domain.users.entities import Role

ORDER_NUMBER_PREFIX = "SO"


def _to_cents(value: float) -> float:
    return round(float(value) + 0.0, 2)


@dataclass(slots=True, frozen=True)
class SaleOrderLine:
    """A product line requested for an order, before persistence."""

    product_name: str
    quantity: int
    unit_price: float

    def __post_init__(self) -> None:
        name = (self.product_name or "").strip()
        if not name:
            raise InvariantViolation("product name is required", field="product_name")
        object.__setattr__(self, "product_name", name)
        if isinstance(self.quantity, bool) or int(self.quantity) != self.quantity:
            raise InvariantViolation("quantity must be a whole number", field="quantity")
        if self.quantity < 1:
            raise InvariantViolation("quantity must be at least 1", field="quantity")
        if self.unit_price < 0:
            raise InvariantViolation("unit price cannot be negative", field="unit_price")

    @property
    def subtotal(self) -> float:
        return _to_cents(self.quantity * self.unit_price)


def order_total(lines: Iterable[SaleOrderLine]) -> float:
    return _to_cents(sum(line.subtotal for line in lines))


def generate_order_number(user_id: int, now: datetime) -> str:
    """``SO-<timestamp>-<user>-<suffix>``; the suffix keeps same-second orders unique."""

    return f"{ORDER_NUMBER_PREFIX}-{now:%Y%m%d%H%M%S}-{user_id}-{secrets.token_hex(2)}"


@dataclass(slots=True, frozen=True)
class SaleOrderItem:
    id: int
    sale_order_id: int
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class OrderAuthor:
    id: int
    username: str
    name: str
    role: Role


@dataclass(slots=True, frozen=True)
class SaleOrder:
    id: int
    order_number: str
    customer_name: str
    notes: str
    total_amount: float
    created_by_id: int
    created_by: OrderAuthor | None = None
    items: Sequence[SaleOrderItem] = field(default_factory=tuple)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class SaleOrderChanges:
    """Partial update; ``None`` means "leave unchanged"."""

    customer_name: str | None = None
    notes: str | None = None
    lines: tuple[SaleOrderLine, ...] | None = None

    def __post_init__(self) -> None:
        if self.customer_name is not None and not self.customer_name.strip():
            raise InvariantViolation("customer name cannot be blank", field="customer_name")
        if self.lines is not None and not self.lines:
            object.__setattr__(self, "lines", None)

    @property
    def total_amount(self) -> float | None:
        if self.lines is None:
            return None
        return order_total(self.lines)
