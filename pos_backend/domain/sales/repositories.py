# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from .entities import SaleOrder, SaleOrderChanges, SaleOrderLine


class SaleOrderRepository(Protocol):
    def add(
        self,
        *,
        order_number: str,
        customer_name: str,
        notes: str,
        created_by_id: int,
        lines: Sequence[SaleOrderLine],
        created_at: datetime,
    ) -> SaleOrder: ...

    def find_by_id(self, order_id: int) -> SaleOrder | None: ...
    def list(self, *, offset: int, limit: int) -> tuple[list[SaleOrder], int]: ...
    def apply_changes(self, order_id: int, changes: SaleOrderChanges) -> SaleOrder | None: ...
    def soft_delete(self, order_id: int) -> bool: ...
