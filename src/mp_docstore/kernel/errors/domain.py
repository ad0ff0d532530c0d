"""Domain errors: record lookups and rejected input."""

from __future__ import annotations

from typing import Any

from mp_docstore.kernel.errors.base import BaseError


class DomainError(BaseError):
    """A record-level rule was violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Caller input was rejected.

    ``errors`` holds one ``{"field": ..., "reason": ...}`` entry per problem.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "errors": self.errors}


class NotFoundError(DomainError):
    """No live (non soft-deleted) record matched the identity."""

    default_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        if identifier is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} '{identifier}' not found"
        kwargs.setdefault("detail", {"resource": resource, "id": None if identifier is None else str(identifier)})
        super().__init__(message, **kwargs)
        self.resource = resource
        self.identifier = identifier


__all__ = [
    "DomainError",
    "NotFoundError",
    "ValidationError",
]
