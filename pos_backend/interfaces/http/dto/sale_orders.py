# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pos_backend.domain.sales.entities import SaleOrderChanges, SaleOrderLine
from pos_backend.domain.users.entities import Role


class SaleOrderItemInputDTO(BaseModel):
    product_name: str = Field(min_length=1, max_length=255)
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)

    def to_line(self) -> SaleOrderLine:
        return SaleOrderLine(
            product_name=self.product_name,
            quantity=self.quantity,
            unit_price=self.unit_price,
        )


class CreateSaleOrderDTO(BaseModel):
    customer_name: str = Field(min_length=1, max_length=255)
    notes: str = Field("", max_length=2000)
    items: list[SaleOrderItemInputDTO] = Field(min_length=1)


class UpdateSaleOrderDTO(BaseModel):
    customer_name: str | None = Field(None, min_length=1, max_length=255)
    notes: str | None = Field(None, max_length=2000)
    items: list[SaleOrderItemInputDTO] | None = None

    def to_changes(self) -> SaleOrderChanges:
        lines = tuple(item.to_line() for item in self.items) if self.items else None
        return SaleOrderChanges(
            customer_name=self.customer_name, notes=self.notes, lines=lines
        )


class SaleOrderItemDTO(BaseModel):
    id: int
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float

    model_config = ConfigDict(from_attributes=True)


class OrderAuthorDTO(BaseModel):
    id: int
    username: str
    name: str
    role: Role

    model_config = ConfigDict(from_attributes=True)


class SaleOrderDTO(BaseModel):
    id: int
    order_number: str
    customer_name: str
    notes: str
    total_amount: float
    created_by: OrderAuthorDTO | None
    items: list[SaleOrderItemDTO]
    created_at: datetime | None
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)
