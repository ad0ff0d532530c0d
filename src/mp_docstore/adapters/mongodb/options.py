"""MongoDB adapter — per-call parameter objects.

Each object is built by the caller for one repository call and then
discarded. ``None`` means "use the repository default" (hydration, time
ceiling) or "do not send this option to the server".
"""

from __future__ import annotations

import dataclasses
from typing import Any, Literal, Mapping, Sequence

from pymongo import ReadPreference
from pymongo.read_concern import ReadConcern

from mp_docstore.application.query import SortSpec
from mp_docstore.kernel.query import FilterSpecification

ReadPreferenceName = Literal[
    "primary",
    "primaryPreferred",
    "secondary",
    "secondaryPreferred",
    "nearest",
]

_READ_PREFERENCES: dict[str, Any] = {
    "primary": ReadPreference.PRIMARY,
    "primaryPreferred": ReadPreference.PRIMARY_PREFERRED,
    "secondary": ReadPreference.SECONDARY,
    "secondaryPreferred": ReadPreference.SECONDARY_PREFERRED,
    "nearest": ReadPreference.NEAREST,
}

Filters = Mapping[str, Any] | FilterSpecification
Select = str | Sequence[str]
SortInput = SortSpec | Sequence[tuple[str, int]] | Mapping[str, int]


@dataclasses.dataclass(frozen=True)
class Populate:
    """Relation expansion: replace the identities stored under *path* with the
    matching documents from *collection*."""

    path: str
    collection: Any
    select: Select | None = None
    foreign_field: str = "_id"


@dataclasses.dataclass(frozen=True, kw_only=True)
class QueryOptions:
    """Modifiers shared by every read."""

    session: Any = None
    use_lean: bool | None = None
    select: Select | None = None
    populate: Sequence[Populate] = ()
    max_time_ms: int | None = None
    hint: str | Mapping[str, Any] | None = None
    comment: str | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class FindByIdParams(QueryOptions):
    """Options for :meth:`MongoRepository.find_by_id`."""


@dataclasses.dataclass(frozen=True, kw_only=True)
class FindParams(QueryOptions):
    filters: Filters = dataclasses.field(default_factory=dict)
    sort: SortInput | None = None
    limit: int = 0
    skip: int = 0
    collation: Mapping[str, Any] | None = None
    batch_size: int | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class FindOneParams(QueryOptions):
    filters: Filters = dataclasses.field(default_factory=dict)
    sort: SortInput | None = None
    collation: Mapping[str, Any] | None = None
    with_deleted: bool = False


@dataclasses.dataclass(frozen=True, kw_only=True)
class CreateOptions:
    session: Any = None
    use_lean: bool | None = None
    run_validators: bool = True
    ordered: bool = True


@dataclasses.dataclass(frozen=True, kw_only=True)
class UpdateOptions:
    """Options for the find-and-update family (``EnhancedUpdateOptions``)."""

    session: Any = None
    new: bool = True
    run_validators: bool = True
    upsert: bool = False
    use_lean: bool | None = None
    select: Select | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class DeleteOptions:
    session: Any = None
    use_lean: bool | None = None
    select: Select | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class CountOptions:
    session: Any = None
    hint: str | Mapping[str, Any] | None = None
    limit: int | None = None
    skip: int | None = None
    max_time_ms: int | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class AggregateOptions:
    session: Any = None
    allow_disk_use: bool | None = None
    read_preference: ReadPreferenceName | None = None
    read_concern: Mapping[str, str] | None = None
    hint: str | Mapping[str, Any] | None = None
    collation: Mapping[str, Any] | None = None
    max_time_ms: int | None = None
    comment: str | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class GetAllParams:
    """Input of :meth:`MongoRepository.get_all_data`.

    ``filter``, ``sort_str``, ``page`` and ``length`` are the raw query-string
    values; ``sort_str=None`` applies the configured default sort while an
    empty string means "no sort". ``use_aggregation=None`` selects the
    repository's configured pagination mode.
    """

    filter: str | Mapping[str, Any] | None = None
    sort_str: str | None = None
    page: str | int | None = None
    length: str | int | None = None
    filterable_fields: Sequence[str] = ()
    aggregation_pipeline: Sequence[Mapping[str, Any]] = ()
    project_stage: Mapping[str, Any] | None = None
    use_aggregation: bool | None = None
    exclude_fields: Sequence[str] = ()
    use_lean: bool | None = None
    session: Any = None
    allow_disk_use: bool | None = None
    max_time_ms: int | None = None
    read_preference: ReadPreferenceName | None = None
    read_concern: Mapping[str, str] | None = None
    hint: str | Mapping[str, Any] | None = None
    collation: Mapping[str, Any] | None = None


def to_projection(select: Select | None) -> dict[str, int] | None:
    """``"title -body"`` or ``["title", "-body"]`` → ``{"title": 1, "body": 0}``."""
    if not select:
        return None
    tokens = select.split() if isinstance(select, str) else list(select)
    projection: dict[str, int] = {}
    for token in tokens:
        if token.startswith("-"):
            projection[token[1:]] = 0
        else:
            projection[token.lstrip("+")] = 1
    return projection or None


def to_sort_list(sort: SortInput | None) -> list[tuple[str, int]] | None:
    if sort is None:
        return None
    if isinstance(sort, SortSpec):
        return sort.to_mongo_sort() or None
    if isinstance(sort, Mapping):
        return [(k, int(v)) for k, v in sort.items()] or None
    return [(k, int(v)) for k, v in sort] or None


def with_read_options(
    collection: Any,
    read_preference: ReadPreferenceName | None = None,
    read_concern: Mapping[str, str] | None = None,
) -> Any:
    """Return *collection* rebound to the requested read preference / concern."""
    kwargs: dict[str, Any] = {}
    if read_preference:
        try:
            kwargs["read_preference"] = _READ_PREFERENCES[read_preference]
        except KeyError:
            raise ValueError(f"unknown read preference {read_preference!r}") from None
    if read_concern:
        kwargs["read_concern"] = ReadConcern(read_concern.get("level"))
    return collection.with_options(**kwargs) if kwargs else collection


def compact(**kwargs: Any) -> dict[str, Any]:
    """Drop ``None`` values so unset options never reach the driver."""
    return {k: v for k, v in kwargs.items() if v is not None}


__all__ = [
    "AggregateOptions",
    "CountOptions",
    "CreateOptions",
    "DeleteOptions",
    "FindByIdParams",
    "FindOneParams",
    "FindParams",
    "GetAllParams",
    "Populate",
    "QueryOptions",
    "ReadPreferenceName",
    "UpdateOptions",
    "compact",
    "to_projection",
    "to_sort_list",
    "with_read_options",
]
