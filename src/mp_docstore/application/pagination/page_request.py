"""Application pagination – PageRequest."""
from __future__ import annotations

import dataclasses
import re

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_positive_int(raw: str | int | None, default: int) -> int:
    """Read the leading integer of *raw*; anything unusable yields *default*."""
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(raw or "")
        if match is None:
            return default
        value = int(match.group(1))
    return value if value >= 1 else default


@dataclasses.dataclass(frozen=True)
class PageRequest:
    """Offset-based pagination window.

    ``skip`` and ``limit`` are what the store sees; ``page`` is recomputed from
    them so a request reused across calls always reports the same page.
    """

    skip: int = 0
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.skip < 0:
            raise ValueError("skip must be >= 0")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @classmethod
    def of(cls, page: int = DEFAULT_PAGE, size: int = DEFAULT_PAGE_SIZE) -> "PageRequest":
        if page < 1:
            raise ValueError("page must be >= 1")
        return cls(skip=(page - 1) * size, limit=size)

    @classmethod
    def from_query(
        cls,
        page: str | int | None,
        length: str | int | None,
        *,
        default_size: int = DEFAULT_PAGE_SIZE,
        max_size: int | None = None,
    ) -> "PageRequest":
        """Build a request from raw query-string values.

        Missing, non-numeric or non-positive values fall back to page 1 and
        *default_size*; there is no error path. A *max_size* clamps the size.
        """
        page_no = _parse_positive_int(page, DEFAULT_PAGE)
        size = _parse_positive_int(length, default_size)
        if max_size is not None:
            size = min(size, max_size)
        return cls.of(page_no, size)

    @property
    def page(self) -> int:
        return self.skip // self.limit + 1

    @property
    def size(self) -> int:
        return self.limit


__all__ = ["DEFAULT_PAGE", "DEFAULT_PAGE_SIZE", "PageRequest"]
