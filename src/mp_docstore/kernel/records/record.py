"""Managed records — the capability contract a repository is parameterised by."""

from __future__ import annotations

import dataclasses
from typing import Any, ClassVar, Mapping, Protocol, runtime_checkable

from mp_docstore.kernel.query.expression import FilterSpecification


@dataclasses.dataclass(frozen=True)
class RecordCapabilities:
    """Where a collection keeps its identity, soft-delete and bookkeeping fields."""

    identity_field: str = "_id"
    soft_delete_field: str = "isDeleted"
    revision_field: str = "__v"
    timestamps: bool = True
    created_at_field: str = "createdAt"
    updated_at_field: str = "updatedAt"

    @property
    def internal_fields(self) -> tuple[str, ...]:
        """Fields hidden from paginated listings by default."""
        return (self.soft_delete_field, self.revision_field)


@runtime_checkable
class ManagedRecord(Protocol):
    """A record type stored in a soft-delete aware collection.

    Implementations declare their :class:`RecordCapabilities` and know how to
    hydrate themselves from a raw document::

        @dataclasses.dataclass
        class Note:
            capabilities: ClassVar[RecordCapabilities] = RecordCapabilities()
            _id: str
            title: str

            @classmethod
            def from_document(cls, doc):
                return cls(_id=doc["_id"], title=doc["title"])
    """

    capabilities: ClassVar[RecordCapabilities]

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ManagedRecord": ...


class NotDeleted(FilterSpecification):
    """Matches records whose soft-delete marker is not ``True``.

    Missing markers count as live, so documents written before the marker
    existed stay visible.
    """

    def __init__(self, field: str = "isDeleted") -> None:
        self.field = field

    def to_mongo_filter(self) -> dict[str, Any]:
        return {self.field: {"$ne": True}}


def not_deleted(
    filters: Mapping[str, Any] | FilterSpecification | None,
    capabilities: RecordCapabilities,
) -> dict[str, Any]:
    """Restrict *filters* to live records.

    The predicate is written last so a caller-supplied clause on the
    soft-delete field can never re-expose deleted records.
    """
    if isinstance(filters, FilterSpecification):
        base = filters.to_mongo_filter()
    else:
        base = dict(filters or {})
    base.update(NotDeleted(capabilities.soft_delete_field).to_mongo_filter())
    return base


__all__ = ["ManagedRecord", "NotDeleted", "RecordCapabilities", "not_deleted"]
