"""Pagination value objects shared by every list operation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def of(cls, page: int | None, limit: int | None) -> PageRequest:
        """Clamp missing or non-positive values to the defaults."""
        return cls(
            page=page if page and page > 0 else DEFAULT_PAGE,
            limit=limit if limit and limit > 0 else DEFAULT_LIMIT,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    request: PageRequest = field(default_factory=PageRequest)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.request.limit) if self.total else 0

    def pagination(self) -> dict[str, int]:
        return {
            "total": self.total,
            "page": self.request.page,
            "limit": self.request.limit,
            "totalPages": self.total_pages,
        }
