"""Filter operators — the closed set of ``field__op`` suffixes the DSL accepts."""

from __future__ import annotations

from enum import Enum


class Operator(str, Enum):
    """Condition operator; the value is the DSL suffix."""

    # basic
    EQ = "eq"
    NE = "ne"
    IN = "in"
    NIN = "nin"
    # ordering
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    BETWEEN = "between"
    # string matching
    LIKE = "like"
    CONTAINS = "contains"
    ILIKE = "ilike"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    NOT_CONTAINS = "notContains"
    EXACT_CONTAINS = "exactContains"
    EXACT_STARTS_WITH = "exactStartsWith"
    EXACT_ENDS_WITH = "exactEndsWith"
    REGEX = "regex"
    SEARCH = "search"
    # null / boolean
    IS_NULL = "isNull"
    IS_NOT_NULL = "isNotNull"
    IS_TRUE = "isTrue"
    IS_FALSE = "isFalse"
    # arrays
    HAS = "has"
    HAS_SOME = "hasSome"
    HAS_EVERY = "hasEvery"
    IS_EMPTY = "isEmpty"
    # dates
    DAY = "day"
    MONTH = "month"
    YEAR = "year"
    BEFORE = "before"
    AFTER = "after"
    DATE_RANGE = "dateRange"
    # structured values
    JSON_CONTAINS = "jsonContains"
    JSON_HAS = "jsonHas"

    @classmethod
    def parse(cls, suffix: str | None) -> "Operator":
        """Resolve a key suffix; aliases map to their canonical member and
        unrecognised suffixes fall back to :attr:`EQ`."""
        if not suffix:
            return cls.EQ
        suffix = _ALIASES.get(suffix, suffix)
        try:
            return cls(suffix)
        except ValueError:
            return cls.EQ


_ALIASES: dict[str, str] = {
    "neq": "ne",
    "notIn": "nin",
}

DATE_OPERATORS: frozenset[Operator] = frozenset(
    {
        Operator.DAY,
        Operator.MONTH,
        Operator.YEAR,
        Operator.BEFORE,
        Operator.AFTER,
        Operator.DATE_RANGE,
    }
)

# Numeric-looking text stays text for these so substring matching still works.
TEXT_PRESERVING_OPERATORS: frozenset[Operator] = frozenset({Operator.LIKE, Operator.ILIKE})


__all__ = ["DATE_OPERATORS", "TEXT_PRESERVING_OPERATORS", "Operator"]
