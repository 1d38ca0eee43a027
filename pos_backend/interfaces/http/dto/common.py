# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator

from pos_backend.application.pagination import Page, PageRequest


class PaginationQueryDTO(BaseModel):
    """``?page=&limit=`` with unparseable or out-of-range values replaced by defaults."""

    page: int | None = None
    limit: int | None = None

    @field_validator("page", "limit", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any) -> int | None:
        if value is None or value == "":
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def to_page_request(self) -> PageRequest:
        return PageRequest.clamped(self.page, self.limit)


class PaginatedDTO(BaseModel):
    items: list[dict[str, Any]]
    total_items: int
    total_pages: int
    page: int
    limit: int

    @classmethod
    def from_page(cls, page: Page[Any], item_dto: type[BaseModel]) -> PaginatedDTO:
        return cls(
            items=[item_dto.model_validate(item).model_dump(mode="json") for item in page.items],
            total_items=page.total_items,
            total_pages=page.total_pages,
            page=page.page,
            limit=page.limit,
        )
