"""Application pagination – page windows and result metadata."""
from mp_docstore.application.pagination.page import PagedResult, PaginationResult, resolve_pagination
from mp_docstore.application.pagination.page_request import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, PageRequest

__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "PageRequest",
    "PagedResult",
    "PaginationResult",
    "resolve_pagination",
]
