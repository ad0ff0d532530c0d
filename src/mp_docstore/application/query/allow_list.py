"""Application query – per-endpoint filterable-field allow-list."""
from __future__ import annotations

from typing import Iterable

from mp_docstore.kernel.errors import NonFilterableFieldError
from mp_docstore.kernel.query import FilterSpecification


def non_filterable_fields(expression: FilterSpecification, allowed: Iterable[str]) -> list[str]:
    """Fields referenced by *expression* that are missing from *allowed*.

    Order of first appearance is kept and duplicates are dropped. An empty
    allow-list means "no restriction".
    """
    permitted = set(allowed)
    if not permitted:
        return []
    offending: list[str] = []
    for field in expression.fields():
        if field not in permitted and field not in offending:
            offending.append(field)
    return offending


def ensure_filterable(expression: FilterSpecification, allowed: Iterable[str]) -> None:
    """Raise :class:`NonFilterableFieldError` naming every disallowed field."""
    offending = non_filterable_fields(expression, allowed)
    if offending:
        raise NonFilterableFieldError(offending)


__all__ = ["ensure_filterable", "non_filterable_fields"]
