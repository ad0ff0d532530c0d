"""Config settings – RepositorySettings."""
from __future__ import annotations

import dataclasses

from mp_docstore.config.settings.base import Settings
from mp_docstore.config.validation import InvalidSettingValueError

PAGINATION_MODES = ("query", "aggregation")


@dataclasses.dataclass
class RepositorySettings(Settings):
    """Defaults applied by every :class:`~mp_docstore.adapters.mongodb.MongoRepository`.

    Loaded from ``DOCSTORE_*`` environment variables, e.g.
    ``DOCSTORE_MAX_PAGE_SIZE=200``.
    """

    _prefix = "DOCSTORE"

    default_page_size: int = 10
    max_page_size: int = 1000
    default_sort: str = "-createdAt"
    use_lean: bool = True
    max_time_ms: int = 30000
    pagination_mode: str = "query"

    def _validate(self) -> None:
        if self.default_page_size < 1:
            raise InvalidSettingValueError("default_page_size", self.default_page_size, "must be >= 1")
        if self.max_page_size < self.default_page_size:
            raise InvalidSettingValueError(
                "max_page_size", self.max_page_size, "must be >= default_page_size"
            )
        if self.max_time_ms < 0:
            raise InvalidSettingValueError("max_time_ms", self.max_time_ms, "must be >= 0")
        if self.pagination_mode not in PAGINATION_MODES:
            raise InvalidSettingValueError(
                "pagination_mode", self.pagination_mode, f"expected one of {PAGINATION_MODES}"
            )


__all__ = ["PAGINATION_MODES", "RepositorySettings"]
