"""Root of the mp-docstore error hierarchy."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Common parent of every error raised by the repository layer.

    Args:
        message: Human-readable description.
        code: Stable slug for callers that map errors to responses
            (defaults to the class-level ``default_code``).
        detail: Extra JSON-friendly context, e.g. the offending field.
        cause: Lower-level exception this error wraps.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form for structured log fields and API error bodies."""
        out: dict[str, Any] = {"code": self.code, "message": self.message, "detail": self.detail}
        if self.cause is not None:
            out["cause"] = repr(self.cause)
        return out

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


__all__ = ["BaseError"]
