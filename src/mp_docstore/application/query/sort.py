"""Application query – sort string decoding.

Accepted shapes::

    "-createdAt"                   single token
    "title:asc,age:desc"           comma separated
    "['+title', 'age:desc']"       JSON array (single quotes tolerated)

Tokens are ``field``, ``+field``, ``-field`` or ``field:asc|desc``.
"""
from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any, Iterator

from mp_docstore.kernel.errors import BadSortFormatError
from mp_docstore.observability.logging import get_logger

_log = get_logger(__name__)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def mongo(self) -> int:
        return 1 if self is SortDirection.ASC else -1


@dataclasses.dataclass(frozen=True)
class SortField:
    """Single sort criterion."""
    field: str
    direction: SortDirection = SortDirection.ASC


@dataclasses.dataclass(frozen=True)
class SortSpec:
    """Ordered sort keys; the first entry is the primary key."""

    fields: tuple[SortField, ...] = ()

    def __iter__(self) -> Iterator[SortField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __bool__(self) -> bool:
        return bool(self.fields)

    def to_mongo_sort(self) -> list[tuple[str, int]]:
        """Key list for ``collection.find(sort=...)``."""
        return [(f.field, f.direction.mongo) for f in self.fields]

    def to_stage(self) -> dict[str, int]:
        """Document for a ``$sort`` aggregation stage (insertion ordered)."""
        return {f.field: f.direction.mongo for f in self.fields}

    def with_tiebreaker(self, field: str = "_id") -> "SortSpec":
        """Append *field* ascending unless already present.

        Gives skip/limit windows a total order so repeated reads page the
        same way.
        """
        if any(f.field == field for f in self.fields):
            return self
        return SortSpec(self.fields + (SortField(field),))


def _decode_token(token: Any) -> SortField:
    if not isinstance(token, str):
        raise BadSortFormatError(f"sort entries must be strings, got {token!r}")
    item = token.strip()
    if not item:
        raise BadSortFormatError("empty sort token")

    if ":" in item:
        name, _, order = item.partition(":")
        name, order = name.strip(), order.strip().lower()
        try:
            direction = SortDirection(order)
        except ValueError:
            raise BadSortFormatError(f"unknown sort direction {order!r} for {name!r}") from None
    elif item[0] in "+-":
        name = item[1:].strip()
        direction = SortDirection.ASC if item[0] == "+" else SortDirection.DESC
    else:
        name, direction = item, SortDirection.ASC

    if not name:
        raise BadSortFormatError(f"missing field name in {token!r}")
    return SortField(name, direction)


def decode_sort(raw: str | None) -> SortSpec | None:
    """Decode a sort string; blank input means "no sort" and returns ``None``.

    Raises:
        BadSortFormatError: when the string or any token is malformed.
    """
    if raw is None or not raw.strip():
        return None

    text = raw.strip()
    if text.startswith("["):
        try:
            tokens = json.loads(text.replace("'", '"'))
        except json.JSONDecodeError as exc:
            _log.debug("sort.decode_failed", sort=raw, reason=str(exc))
            raise BadSortFormatError(str(exc), cause=exc) from exc
        if not isinstance(tokens, list):
            raise BadSortFormatError("expected a JSON array")
    else:
        tokens = text.split(",")

    spec = SortSpec(tuple(_decode_token(t) for t in tokens))
    return spec or None


__all__ = ["SortDirection", "SortField", "SortSpec", "decode_sort"]
