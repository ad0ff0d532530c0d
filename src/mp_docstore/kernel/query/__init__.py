"""Filter AST — operators, conditions and composable filter specifications."""

from mp_docstore.kernel.query.expression import (
    AndSpecification,
    Bounds,
    Condition,
    FilterExpression,
    FilterSpecification,
    NotSpecification,
    OrSpecification,
    RawFilter,
    build_nested_query,
    merge_filters,
)
from mp_docstore.kernel.query.operators import DATE_OPERATORS, Operator

__all__ = [
    "DATE_OPERATORS",
    "AndSpecification",
    "Bounds",
    "Condition",
    "FilterExpression",
    "FilterSpecification",
    "NotSpecification",
    "Operator",
    "OrSpecification",
    "RawFilter",
    "build_nested_query",
    "merge_filters",
]
