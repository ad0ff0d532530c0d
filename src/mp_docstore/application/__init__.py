"""Application – query decoding and pagination building blocks."""

from mp_docstore.application.pagination import PagedResult, PageRequest, PaginationResult
from mp_docstore.application.query import SortSpec, decode_sort, ensure_filterable, parse_filter

__all__ = [
    "PageRequest",
    "PagedResult",
    "PaginationResult",
    "SortSpec",
    "decode_sort",
    "ensure_filterable",
    "parse_filter",
]
