"""Application-layer errors — cross-cutting concerns outside record rules."""

from __future__ import annotations

from mp_docstore.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern (configuration, wiring)."""

    default_code = "application_error"


__all__ = ["ApplicationError"]
