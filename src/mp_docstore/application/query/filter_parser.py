"""Application query – filter DSL parser.

A filter is a JSON object (single quotes tolerated) with up to three groups::

    {"and": {"status__eq": "active", "age__between": [18, 65]},
     "or":  [{"role": "admin"}, {"role": "moderator"}],
     "not": {"title__contains": "draft"}}

Each key is ``<field>[__<operator>]``; a missing operator means ``eq``. The
result is a :class:`~mp_docstore.kernel.query.FilterExpression`.
"""
from __future__ import annotations

import calendar
import json
import re
from datetime import datetime
from typing import Any, Iterator, Mapping

from mp_docstore.kernel.errors import InvalidFilterFormatError
from mp_docstore.kernel.query import Bounds, Condition, FilterExpression, Operator
from mp_docstore.kernel.query.operators import DATE_OPERATORS, TEXT_PRESERVING_OPERATORS
from mp_docstore.observability.logging import get_logger

_log = get_logger(__name__)

_NUMERIC = re.compile(r"^\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?\s*$")
_INTEGER = re.compile(r"^\s*[-+]?\d+\s*$")
_PARTIAL_DATE_FORMATS = ("%Y-%m", "%Y")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1

# Operators that receive the caller's value untouched.
_RAW_VALUE_OPERATORS = frozenset(
    {
        Operator.LIKE,
        Operator.CONTAINS,
        Operator.ILIKE,
        Operator.STARTS_WITH,
        Operator.ENDS_WITH,
        Operator.NOT_CONTAINS,
        Operator.EXACT_CONTAINS,
        Operator.EXACT_STARTS_WITH,
        Operator.EXACT_ENDS_WITH,
        Operator.REGEX,
        Operator.SEARCH,
        Operator.JSON_CONTAINS,
        Operator.JSON_HAS,
    }
)


def _decode(raw: str | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        decoded = json.loads(raw.replace("'", '"'))
    except json.JSONDecodeError as exc:
        _log.debug("filter.decode_failed", filter=raw, reason=str(exc))
        raise InvalidFilterFormatError(str(exc), cause=exc) from exc
    if not isinstance(decoded, dict):
        raise InvalidFilterFormatError("filter must be a JSON object")
    return decoded


def parse_date(value: Any) -> datetime | None:
    """Return *value* as a datetime when it is a parseable date string."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _PARTIAL_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _start_of_day(d: datetime) -> datetime:
    return d.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(d: datetime) -> datetime:
    # millisecond precision, the resolution of BSON dates
    return d.replace(hour=23, minute=59, second=59, microsecond=999000)


def _date_bounds(op: Operator, d: datetime) -> Bounds:
    match op:
        case Operator.DAY:
            return Bounds(gte=_start_of_day(d), lte=_end_of_day(d))
        case Operator.MONTH:
            last = calendar.monthrange(d.year, d.month)[1]
            return Bounds(
                gte=_start_of_day(d.replace(day=1)),
                lte=_end_of_day(d.replace(day=last)),
            )
        case Operator.YEAR:
            return Bounds(
                gte=_start_of_day(d.replace(month=1, day=1)),
                lte=_end_of_day(d.replace(month=12, day=31)),
            )
        case Operator.BEFORE:
            return Bounds(lt=d)
        case _:
            return Bounds(gt=d)


def _normalize(value: Any, op: Operator) -> Any:
    if op in DATE_OPERATORS:
        parsed = parse_date(value)
        if parsed is not None:
            return _date_bounds(op, parsed)

    if isinstance(value, str):
        lowered = value.lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        if op not in TEXT_PRESERVING_OPERATORS and _NUMERIC.match(value):
            if _INTEGER.match(value):
                number = int(value)
                # BSON integers are signed 64-bit
                if _INT64_MIN <= number <= _INT64_MAX:
                    return number
            return float(value)
    return value


def _pair(value: Any, op: Operator) -> tuple[Any, Any]:
    if not isinstance(value, list) or len(value) != 2:
        raise InvalidFilterFormatError(
            f"'{op.value}' operator requires an array with 2 values: [min, max]",
            operator=op.value,
        )
    return value[0], value[1]


def build_condition(raw_key: str, value: Any) -> Condition:
    """Build one condition from a ``field__op`` key and its raw value."""
    field, sep, suffix = raw_key.partition("__")
    if not field:
        raise InvalidFilterFormatError(f"missing field name in key {raw_key!r}")
    op = Operator.parse(suffix if sep else None)

    match op:
        case Operator.BETWEEN:
            low, high = _pair(value, op)
            bounds = Bounds(gte=_normalize(low, Operator.GTE), lte=_normalize(high, Operator.LTE))
            return Condition(field, op, bounds)
        case Operator.DATE_RANGE:
            low, high = _pair(value, op)
            start, end = parse_date(low), parse_date(high)
            if start is None or end is None:
                raise InvalidFilterFormatError(
                    f"'dateRange' values must be dates, got [{low!r}, {high!r}]",
                    operator=op.value,
                )
            return Condition(field, op, Bounds(gte=start, lte=_end_of_day(end)))
        case _ if op in _RAW_VALUE_OPERATORS:
            return Condition(field, op, value)
        case _ if isinstance(value, list):
            return Condition(field, op, [_normalize(v, op) for v in value])
        case _:
            return Condition(field, op, _normalize(value, op))


def _iter_group(group: Any, name: str) -> Iterator[Condition]:
    items = group if isinstance(group, list) else [group]
    for item in items:
        if not isinstance(item, Mapping):
            raise InvalidFilterFormatError(f"'{name}' entries must be objects, got {item!r}")
        for raw_key, value in item.items():
            yield build_condition(raw_key, value)


def parse_filter(raw: str | Mapping[str, Any] | None) -> FilterExpression:
    """Decode a filter string into a :class:`FilterExpression`.

    Blank input and ``"{}"`` yield an empty expression.

    Raises:
        InvalidFilterFormatError: malformed text, non-object groups, or a
            ``between`` / ``dateRange`` value that is not a 2-element array.
    """
    if raw is None or (isinstance(raw, str) and raw.strip() in ("", "{}")):
        return FilterExpression()

    decoded = _decode(raw)
    return FilterExpression(
        and_group=tuple(_iter_group(decoded.get("and") or {}, "and")),
        or_group=tuple(_iter_group(decoded.get("or") or [], "or")),
        not_group=tuple(_iter_group(decoded.get("not") or {}, "not")),
    )


def _key_names_field(key: str, field_name: str) -> bool:
    return key == field_name or key.endswith("." + field_name) or f"{field_name}__" in key


def extract_field_value(raw: str | Mapping[str, Any] | None, field_name: str) -> Any:
    """Depth-first, first-match lookup of the value bound to *field_name*.

    Matches a key equal to ``name``, ending with ``.name`` or containing
    ``name__`` (so ``a.b.name__op`` too) anywhere in the and/or/not tree;
    returns ``None`` when absent.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    tree = _decode(raw)

    def _search(node: Any) -> tuple[bool, Any]:
        if isinstance(node, list):
            for item in node:
                found, value = _search(item)
                if found:
                    return True, value
        elif isinstance(node, Mapping):
            for key, value in node.items():
                if _key_names_field(key, field_name):
                    return True, value
                found, inner = _search(value)
                if found:
                    return True, inner
        return False, None

    return _search(tree)[1]


__all__ = ["build_condition", "extract_field_value", "parse_date", "parse_filter"]
