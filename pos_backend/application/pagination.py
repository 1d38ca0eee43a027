# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(slots=True, frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def clamped(cls, page: int | None, limit: int | None) -> PageRequest:
        """Out-of-range values fall back to defaults; ``limit`` is capped."""
        resolved_page = page if page is not None and page >= 1 else DEFAULT_PAGE
        resolved_limit = limit if limit is not None and limit >= 1 else DEFAULT_LIMIT
        return cls(page=resolved_page, limit=min(resolved_limit, MAX_LIMIT))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True, frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total_items: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.total_items <= 0:
            return 0
        return math.ceil(self.total_items / self.limit)


__all__ = ["DEFAULT_LIMIT", "DEFAULT_PAGE", "MAX_LIMIT", "Page", "PageRequest"]
