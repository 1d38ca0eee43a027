# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from pos_backend.shared.errors.base import DomainError


class SaleOrderNotFoundError(DomainError):
    code = "sale_order_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "Sale order not found"

    def __init__(self, order_id: int) -> None:
        super().__init__(context={"order_id": order_id})


__all__ = ["SaleOrderNotFoundError"]
