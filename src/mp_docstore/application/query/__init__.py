"""Application query – filter, sort and allow-list decoding for listings."""
from mp_docstore.application.query.allow_list import ensure_filterable, non_filterable_fields
from mp_docstore.application.query.filter_parser import (
    build_condition,
    extract_field_value,
    parse_date,
    parse_filter,
)
from mp_docstore.application.query.sort import SortDirection, SortField, SortSpec, decode_sort

__all__ = [
    "SortDirection",
    "SortField",
    "SortSpec",
    "build_condition",
    "decode_sort",
    "ensure_filterable",
    "extract_field_value",
    "non_filterable_fields",
    "parse_date",
    "parse_filter",
]
