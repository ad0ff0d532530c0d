"""Kernel – framework-agnostic errors, filter AST, record contract and clock."""

from mp_docstore.kernel.errors import (
    ApplicationError,
    BadSortFormatError,
    BaseError,
    DomainError,
    InvalidFilterFormatError,
    NonFilterableFieldError,
    NotFoundError,
    QueryError,
    ValidationError,
)
from mp_docstore.kernel.records import ManagedRecord, RecordCapabilities
from mp_docstore.kernel.time import Clock, FrozenClock, SystemClock

__all__ = [
    "ApplicationError",
    "BadSortFormatError",
    "BaseError",
    "Clock",
    "DomainError",
    "FrozenClock",
    "InvalidFilterFormatError",
    "ManagedRecord",
    "NonFilterableFieldError",
    "NotFoundError",
    "QueryError",
    "RecordCapabilities",
    "SystemClock",
    "ValidationError",
]
