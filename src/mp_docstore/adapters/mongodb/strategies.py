"""MongoDB adapter — pagination strategies for ``get_all_data``.

Both strategies return ``(documents, total)`` for the same :class:`PageQuery`:

* :class:`SimpleQueryStrategy` issues a ``find`` and a ``count_documents``
  concurrently. They are independent reads, so a concurrent writer can make
  the page and the total disagree.
* :class:`FacetAggregationStrategy` runs one pipeline whose ``$facet`` stage
  derives the page and the total from a single pass over the matched set.
"""

from __future__ import annotations

import abc
import asyncio
import dataclasses
from enum import Enum
from typing import Any, ClassVar

from mp_docstore.adapters.mongodb.options import GetAllParams, compact, with_read_options
from mp_docstore.application.pagination import PageRequest
from mp_docstore.application.query import SortSpec


class PaginationMode(str, Enum):
    QUERY = "query"
    AGGREGATION = "aggregation"


@dataclasses.dataclass(frozen=True)
class PageQuery:
    """Everything a strategy needs, already decoded and validated."""

    filter: dict[str, Any]
    sort: SortSpec | None
    page: PageRequest
    exclude_fields: tuple[str, ...]
    params: GetAllParams
    max_time_ms: int | None = None


class PaginationStrategy(abc.ABC):
    """Port: produce one page of raw documents plus the total match count."""

    mode: ClassVar[PaginationMode]

    @abc.abstractmethod
    async def fetch(self, collection: Any, query: PageQuery) -> tuple[list[dict[str, Any]], int]: ...


class SimpleQueryStrategy(PaginationStrategy):
    """Filtered/sorted/paginated ``find`` alongside an independent count."""

    mode = PaginationMode.QUERY

    async def fetch(self, collection: Any, query: PageQuery) -> tuple[list[dict[str, Any]], int]:
        p = query.params
        coll = with_read_options(collection, p.read_preference, p.read_concern)
        cursor = coll.find(
            query.filter,
            projection={f: 0 for f in query.exclude_fields} or None,
            **compact(
                sort=query.sort.to_mongo_sort() if query.sort else None,
                skip=query.page.skip,
                limit=query.page.limit,
                session=p.session,
                max_time_ms=query.max_time_ms,
                hint=p.hint,
                collation=p.collation,
                allow_disk_use=p.allow_disk_use,
            ),
        )
        count = coll.count_documents(
            query.filter,
            **compact(session=p.session, maxTimeMS=query.max_time_ms, collation=p.collation),
        )
        data, total = await asyncio.gather(cursor.to_list(length=None), count)
        return data, total


class FacetAggregationStrategy(PaginationStrategy):
    """``prefix → $match → $facet{data, totalCount}`` in a single round trip."""

    mode = PaginationMode.AGGREGATION

    def build_pipeline(self, query: PageQuery) -> list[dict[str, Any]]:
        data_stages: list[dict[str, Any]] = []
        if query.sort:
            data_stages.append({"$sort": query.sort.to_stage()})
        data_stages += [{"$skip": query.page.skip}, {"$limit": query.page.limit}]
        if query.params.project_stage:
            data_stages.append(dict(query.params.project_stage))
        if query.exclude_fields:
            data_stages.append({"$unset": list(query.exclude_fields)})

        return [
            *(dict(stage) for stage in query.params.aggregation_pipeline),
            {"$match": query.filter},
            {"$facet": {"data": data_stages, "totalCount": [{"$count": "count"}]}},
        ]

    async def fetch(self, collection: Any, query: PageQuery) -> tuple[list[dict[str, Any]], int]:
        p = query.params
        coll = with_read_options(collection, p.read_preference, p.read_concern)
        cursor = coll.aggregate(
            self.build_pipeline(query),
            **compact(
                session=p.session,
                allowDiskUse=p.allow_disk_use,
                maxTimeMS=query.max_time_ms,
                hint=p.hint,
                collation=p.collation,
            ),
        )
        result = await cursor.to_list(length=None)
        if not result:
            return [], 0
        facet = result[0]
        counts = facet.get("totalCount") or []
        total = counts[0].get("count", 0) if counts else 0
        return list(facet.get("data") or []), total


def default_strategies() -> dict[PaginationMode, PaginationStrategy]:
    return {
        PaginationMode.QUERY: SimpleQueryStrategy(),
        PaginationMode.AGGREGATION: FacetAggregationStrategy(),
    }


__all__ = [
    "FacetAggregationStrategy",
    "PageQuery",
    "PaginationMode",
    "PaginationStrategy",
    "SimpleQueryStrategy",
    "default_strategies",
]
