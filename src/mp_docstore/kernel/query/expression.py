"""Filter expressions — composable query specifications rendered to MongoDB.

Every node implements :meth:`FilterSpecification.to_mongo_filter`; nodes combine
with ``&``, ``|`` and ``~`` the same way domain specifications do.

Example::

    expr = Condition("age", Operator.GTE, 18) & ~Condition("status", Operator.EQ, "banned")
    collection.find(expr.to_mongo_filter())
"""

from __future__ import annotations

import abc
import dataclasses
import re
from typing import Any, Iterator, Mapping

from mp_docstore.kernel.query.operators import Operator


class FilterSpecification(abc.ABC):
    """Abstract base for filter nodes — provides operator overloads."""

    @abc.abstractmethod
    def to_mongo_filter(self) -> dict[str, Any]: ...

    def fields(self) -> Iterator[str]:
        """Yield every field path this node constrains (depth-first)."""
        return iter(())

    # Named combinators ------------------------------------------------
    def and_(self, other: "FilterSpecification") -> "AndSpecification":
        return AndSpecification((self, other))

    def or_(self, other: "FilterSpecification") -> "OrSpecification":
        return OrSpecification((self, other))

    def not_(self) -> "NotSpecification":
        return NotSpecification((self,))

    # Operator overloads -----------------------------------------------
    def __and__(self, other: "FilterSpecification") -> "AndSpecification":
        return AndSpecification((self, other))

    def __or__(self, other: "FilterSpecification") -> "OrSpecification":
        return OrSpecification((self, other))

    def __invert__(self) -> "NotSpecification":
        return NotSpecification((self,))


@dataclasses.dataclass(frozen=True)
class Bounds:
    """Range value produced by ``between`` and the date operators."""

    gte: Any = None
    gt: Any = None
    lte: Any = None
    lt: Any = None

    def to_mongo(self) -> dict[str, Any]:
        parts = {"$gte": self.gte, "$gt": self.gt, "$lte": self.lte, "$lt": self.lt}
        return {k: v for k, v in parts.items() if v is not None}


def _contains(value: Any, *, insensitive: bool = True) -> dict[str, Any]:
    clause: dict[str, Any] = {"$regex": re.escape(str(value))}
    if insensitive:
        clause["$options"] = "i"
    return clause


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _flatten(prefix: str, value: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, sub in value.items():
        path = f"{prefix}.{key}"
        if isinstance(sub, Mapping) and sub:
            out.update(_flatten(path, sub))
        else:
            out[path] = {"$eq": sub}
    return out


@dataclasses.dataclass(frozen=True)
class Condition(FilterSpecification):
    """A single ``field <operator> value`` predicate (the leaf of the tree)."""

    field: str
    operator: Operator
    value: Any = None

    def fields(self) -> Iterator[str]:
        yield self.field

    def to_mongo_filter(self) -> dict[str, Any]:  # noqa: PLR0911, PLR0912
        f, v = self.field, self.value
        match self.operator:
            case Operator.EQ:
                return {f: {"$eq": v}}
            case Operator.NE:
                return {f: {"$ne": v}}
            case Operator.IN | Operator.HAS_SOME:
                return {f: {"$in": _as_list(v)}}
            case Operator.NIN:
                return {f: {"$nin": _as_list(v)}}
            case Operator.GT:
                return {f: {"$gt": v}}
            case Operator.LT:
                return {f: {"$lt": v}}
            case Operator.GTE:
                return {f: {"$gte": v}}
            case Operator.LTE:
                return {f: {"$lte": v}}
            case Operator.LIKE | Operator.CONTAINS | Operator.ILIKE | Operator.SEARCH:
                return {f: _contains(v)}
            case Operator.STARTS_WITH:
                return {f: {"$regex": "^" + re.escape(str(v)), "$options": "i"}}
            case Operator.ENDS_WITH:
                return {f: {"$regex": re.escape(str(v)) + "$", "$options": "i"}}
            case Operator.NOT_CONTAINS:
                return {f: {"$not": _contains(v)}}
            case Operator.EXACT_CONTAINS:
                return {f: _contains(v, insensitive=False)}
            case Operator.EXACT_STARTS_WITH:
                return {f: {"$regex": "^" + re.escape(str(v))}}
            case Operator.EXACT_ENDS_WITH:
                return {f: {"$regex": re.escape(str(v)) + "$"}}
            case Operator.REGEX:
                return {f: {"$regex": str(v)}}
            case Operator.IS_NULL:
                return {f: {"$eq": None}}
            case Operator.IS_NOT_NULL:
                return {f: {"$ne": None}}
            case Operator.IS_TRUE:
                return {f: {"$eq": True}}
            case Operator.IS_FALSE:
                return {f: {"$eq": False}}
            case Operator.HAS:
                return {f: {"$all": [v]}}
            case Operator.HAS_EVERY:
                return {f: {"$all": _as_list(v)}}
            case Operator.IS_EMPTY:
                return {f: {"$size": 0}}
            case (
                Operator.BETWEEN
                | Operator.DAY
                | Operator.MONTH
                | Operator.YEAR
                | Operator.BEFORE
                | Operator.AFTER
                | Operator.DATE_RANGE
            ):
                # a date operator whose value was not a date degrades to equality
                if isinstance(v, Bounds):
                    return {f: v.to_mongo()}
                return {f: {"$eq": v}}
            case Operator.JSON_CONTAINS:
                if isinstance(v, Mapping) and v:
                    return _flatten(f, v)
                return {f: {"$eq": v}}
            case Operator.JSON_HAS:
                return {f"{f}.{v}": {"$exists": True}}


class _Group(FilterSpecification):
    mongo_key: str = ""

    def __init__(self, children: tuple[FilterSpecification, ...] | list[FilterSpecification]) -> None:
        self.children: tuple[FilterSpecification, ...] = tuple(children)

    def fields(self) -> Iterator[str]:
        for child in self.children:
            yield from child.fields()

    def to_mongo_filter(self) -> dict[str, Any]:
        if not self.children:
            return {}
        return {self.mongo_key: [c.to_mongo_filter() for c in self.children]}

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.children == self.children  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.children))

    def __repr__(self) -> str:  # pragma: no cover
        return f"{type(self).__name__}({list(self.children)!r})"


class AndSpecification(_Group):
    """All children must match."""

    mongo_key = "$and"


class OrSpecification(_Group):
    """At least one child must match."""

    mongo_key = "$or"


class NotSpecification(_Group):
    """None of the children may match."""

    mongo_key = "$nor"


class RawFilter(FilterSpecification):
    """Wraps a caller-built MongoDB filter document."""

    def __init__(self, document: Mapping[str, Any] | None = None) -> None:
        self.document: dict[str, Any] = dict(document or {})

    def to_mongo_filter(self) -> dict[str, Any]:
        return dict(self.document)

    def fields(self) -> Iterator[str]:
        return (k for k in self.document if not k.startswith("$"))


@dataclasses.dataclass(frozen=True)
class FilterExpression(FilterSpecification):
    """Root of a decoded filter: top-level ``and`` / ``or`` / ``not`` groups."""

    and_group: tuple[Condition, ...] = ()
    or_group: tuple[Condition, ...] = ()
    not_group: tuple[Condition, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.and_group or self.or_group or self.not_group)

    def groups(self) -> Iterator[_Group]:
        yield AndSpecification(self.and_group)
        yield OrSpecification(self.or_group)
        yield NotSpecification(self.not_group)

    def conditions(self) -> Iterator[Condition]:
        yield from self.and_group
        yield from self.or_group
        yield from self.not_group

    def fields(self) -> Iterator[str]:
        for cond in self.conditions():
            yield cond.field

    def to_mongo_filter(self) -> dict[str, Any]:
        query: dict[str, Any] = {}
        for group in self.groups():
            query.update(group.to_mongo_filter())
        return query


def merge_filters(*clauses: Mapping[str, Any] | FilterSpecification | None) -> dict[str, Any]:
    """Combine filter clauses: none → ``{}``, one → itself, many → ``$and``."""
    rendered = [
        c.to_mongo_filter() if isinstance(c, FilterSpecification) else dict(c)
        for c in clauses
        if c is not None
    ]
    non_empty = [c for c in rendered if c]
    if not non_empty:
        return {}
    if len(non_empty) == 1:
        return non_empty[0]
    return {"$and": non_empty}


def build_nested_query(path: list[str] | tuple[str, ...], value: Any) -> Any:
    """``build_nested_query(["user", "profile", "name"], "John")`` →
    ``{"user": {"profile": {"name": "John"}}}``."""
    if not path:
        return value
    first, *rest = path
    return {first: build_nested_query(rest, value)}


__all__ = [
    "AndSpecification",
    "Bounds",
    "Condition",
    "FilterExpression",
    "FilterSpecification",
    "NotSpecification",
    "OrSpecification",
    "RawFilter",
    "build_nested_query",
    "merge_filters",
]
