"""Application pagination – PaginationResult, PagedResult."""
from __future__ import annotations

import dataclasses
import math
from typing import Any, Callable, Generic, TypeVar

from mp_docstore.application.pagination.page_request import PageRequest

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class PaginationResult:
    """Navigation metadata for one page of a listing."""

    total_items: int
    total_pages: int
    current_page: int
    page_size: int

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    def to_dict(self) -> dict[str, int]:
        """Wire representation (camelCase keys)."""
        return {
            "totalItems": self.total_items,
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "pageSize": self.page_size,
        }


def resolve_pagination(total_items: int, request: PageRequest) -> PaginationResult:
    """Turn a total count and the originating request into metadata."""
    page_size = request.limit
    total_pages = math.ceil(total_items / page_size) if total_items > 0 else 0
    return PaginationResult(
        total_items=total_items,
        total_pages=total_pages,
        current_page=request.skip // request.limit + 1,
        page_size=page_size,
    )


@dataclasses.dataclass
class PagedResult(Generic[T]):
    """A page of records plus its pagination metadata."""

    data: list[T]
    pagination: PaginationResult

    def map(self, fn: Callable[[T], Any]) -> "PagedResult[Any]":
        """Return a new :class:`PagedResult` with each record transformed by *fn*."""
        return PagedResult(data=[fn(item) for item in self.data], pagination=self.pagination)

    def to_dict(self) -> dict[str, Any]:
        return {"data": list(self.data), "pagination": self.pagination.to_dict()}


__all__ = ["PagedResult", "PaginationResult", "resolve_pagination"]
