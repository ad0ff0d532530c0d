"""Managed record contract and the soft-delete predicate."""

from mp_docstore.kernel.records.record import (
    ManagedRecord,
    NotDeleted,
    RecordCapabilities,
    not_deleted,
)

__all__ = ["ManagedRecord", "NotDeleted", "RecordCapabilities", "not_deleted"]
