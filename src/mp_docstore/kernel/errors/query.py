"""Query errors — raised while decoding caller-supplied filter and sort input.

All of these are raised synchronously, before the store is touched.
"""

from __future__ import annotations

from typing import Any, Sequence

from mp_docstore.kernel.errors.domain import ValidationError


class QueryError(ValidationError):
    """Caller-supplied query parameters could not be used."""

    default_code = "query_error"


class InvalidFilterFormatError(QueryError):
    """The filter string is malformed or an operator got the wrong arity."""

    default_code = "invalid_filter_format"

    def __init__(self, reason: str, *, operator: str | None = None, **kwargs: Any) -> None:
        super().__init__(f"Invalid filter format: {reason}", **kwargs)
        self.reason = reason
        self.operator = operator


class NonFilterableFieldError(QueryError):
    """One or more filter fields are outside the endpoint's allow-list."""

    default_code = "non_filterable_field"

    def __init__(self, fields: Sequence[str], **kwargs: Any) -> None:
        fields = list(fields)
        if len(fields) == 1:
            message = f"Field is not filterable: {fields[0]}"
        else:
            message = f"Fields are not filterable: {', '.join(fields)}"
        super().__init__(
            message,
            errors=[{"field": f, "reason": "not_filterable"} for f in fields],
            **kwargs,
        )
        self.fields = fields


class BadSortFormatError(QueryError):
    """The sort string could not be decoded."""

    default_code = "bad_sort_format"

    def __init__(self, reason: str | None = None, **kwargs: Any) -> None:
        message = "Bad sort format" if reason is None else f"Bad sort format: {reason}"
        super().__init__(message, **kwargs)
        self.reason = reason


__all__ = [
    "BadSortFormatError",
    "InvalidFilterFormatError",
    "NonFilterableFieldError",
    "QueryError",
]
