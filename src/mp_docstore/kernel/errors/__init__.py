"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError                  (domain.py)
    │   ├── ValidationError
    │   │   └── QueryError           (query.py)
    │   │       ├── InvalidFilterFormatError
    │   │       ├── NonFilterableFieldError
    │   │       └── BadSortFormatError
    │   └── NotFoundError
    └── ApplicationError             (application.py)
        └── ConfigError              (config.validation)

Store-level failures (``pymongo.errors.*``, including ``DuplicateKeyError`` on
create) are not wrapped and propagate unchanged.
"""

from mp_docstore.kernel.errors.application import ApplicationError
from mp_docstore.kernel.errors.base import BaseError
from mp_docstore.kernel.errors.domain import (
    DomainError,
    NotFoundError,
    ValidationError,
)
from mp_docstore.kernel.errors.query import (
    BadSortFormatError,
    InvalidFilterFormatError,
    NonFilterableFieldError,
    QueryError,
)

__all__ = [
    "ApplicationError",
    "BadSortFormatError",
    "BaseError",
    "DomainError",
    "InvalidFilterFormatError",
    "NonFilterableFieldError",
    "NotFoundError",
    "QueryError",
    "ValidationError",
]
