"""MongoDB adapter — MongoRepository, a soft-delete aware generic repository."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Awaitable, Callable, Generic, Mapping, Sequence, TypeVar

from bson import ObjectId
from pymongo import ReturnDocument

from mp_docstore.adapters.mongodb.options import (
    AggregateOptions,
    CountOptions,
    CreateOptions,
    DeleteOptions,
    Filters,
    FindByIdParams,
    FindOneParams,
    FindParams,
    GetAllParams,
    Populate,
    QueryOptions,
    UpdateOptions,
    compact,
    to_projection,
    to_sort_list,
    with_read_options,
)
from mp_docstore.adapters.mongodb.strategies import (
    PageQuery,
    PaginationMode,
    PaginationStrategy,
    default_strategies,
)
from mp_docstore.adapters.mongodb.uow import MongoTransaction
from mp_docstore.application.pagination import PagedResult, PageRequest, resolve_pagination
from mp_docstore.application.query import decode_sort, ensure_filterable, parse_filter
from mp_docstore.config.settings import RepositorySettings
from mp_docstore.kernel.errors import NotFoundError
from mp_docstore.kernel.records import ManagedRecord, RecordCapabilities, not_deleted
from mp_docstore.kernel.time import Clock, SystemClock
from mp_docstore.observability.logging import get_logger

TRecord = TypeVar("TRecord", bound=ManagedRecord)
R = TypeVar("R")

_log = get_logger(__name__)


@dataclasses.dataclass
class _Defaults:
    use_lean: bool
    max_time_ms: int | None


class MongoRepository(Generic[TRecord]):
    """Generic repository over one MongoDB collection.

    The repository is parameterised, not subclassed: pass the motor
    collection and, optionally, the record type used for hydrated reads::

        notes = MongoRepository(db.notes, Note)
        page = await notes.get_all_data(GetAllParams(filter=raw, page="2", length="10"))

    Every default-path read, update, delete and count is restricted to live
    records (soft-delete marker not ``True``). Reads are lean (plain dicts)
    unless ``use_lean=False`` is passed or configured, in which case documents
    are hydrated through ``record_type.from_document``.

    ``update_many`` (write, then re-read) and ``find_or_create`` (read, then
    insert) are two separate store calls and are not atomic.
    """

    def __init__(
        self,
        collection: Any,
        record_type: type[TRecord] | None = None,
        *,
        capabilities: RecordCapabilities | None = None,
        settings: RepositorySettings | None = None,
        strategies: Mapping[PaginationMode, PaginationStrategy] | None = None,
        client: Any = None,
        clock: Clock | None = None,
        name: str | None = None,
    ) -> None:
        self._col = collection
        self._record_type = record_type
        self._caps = capabilities or getattr(record_type, "capabilities", None) or RecordCapabilities()
        self._settings = settings or RepositorySettings()
        self._strategies = dict(strategies or default_strategies())
        self._client = client
        self._clock = clock or SystemClock()
        self.name = name or getattr(collection, "name", None) or (
            record_type.__name__ if record_type is not None else "record"
        )
        self._defaults = _Defaults(
            use_lean=self._settings.use_lean,
            max_time_ms=self._settings.max_time_ms or None,
        )
        self._log = _log.bind(collection=self.name)

    # ------------------------------------------------------------------
    # Accessors / defaults
    # ------------------------------------------------------------------

    @property
    def collection(self) -> Any:
        """The underlying motor collection, for operations not covered here."""
        return self._col

    @property
    def capabilities(self) -> RecordCapabilities:
        return self._caps

    def set_default_options(self, *, use_lean: bool | None = None, max_time_ms: int | None = None) -> None:
        """Change the hydration mode / time ceiling applied when a call omits them."""
        if use_lean is not None:
            self._defaults.use_lean = use_lean
        if max_time_ms is not None:
            self._defaults.max_time_ms = max_time_ms or None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _live(self, filters: Filters | None) -> dict[str, Any]:
        return not_deleted(filters, self._caps)

    def _id_filter(self, id: Any) -> dict[str, Any]:  # noqa: A002
        return self._live({self._caps.identity_field: self._coerce_id(id)})

    def _coerce_id(self, id: Any) -> Any:  # noqa: A002
        if self._caps.identity_field == "_id" and isinstance(id, str) and ObjectId.is_valid(id):
            return ObjectId(id)
        return id

    def _lean(self, use_lean: bool | None) -> bool:
        return self._defaults.use_lean if use_lean is None else use_lean

    def _max_time(self, max_time_ms: int | None) -> int | None:
        return self._defaults.max_time_ms if max_time_ms is None else (max_time_ms or None)

    def _hydrate(self, doc: dict[str, Any] | None, use_lean: bool | None) -> Any:
        if doc is None:
            return None
        if self._lean(use_lean) or self._record_type is None:
            return doc
        return self._record_type.from_document(doc)

    def _hydrate_all(self, docs: list[dict[str, Any]], use_lean: bool | None) -> list[Any]:
        return [self._hydrate(d, use_lean) for d in docs]

    def _now(self) -> datetime:
        return self._clock.now()

    def _new_document(self, data: Mapping[str, Any]) -> dict[str, Any]:
        doc = dict(data)
        doc.setdefault(self._caps.soft_delete_field, False)
        doc.setdefault(self._caps.revision_field, 0)
        if self._caps.timestamps:
            now = self._now()
            doc.setdefault(self._caps.created_at_field, now)
            doc.setdefault(self._caps.updated_at_field, now)
        return doc

    def _update_document(self, data: Mapping[str, Any], *, upsert: bool = False) -> dict[str, Any]:
        """Wrap plain field maps in ``$set`` and add bookkeeping fields."""
        if any(k.startswith("$") for k in data):
            update = {k: (dict(v) if isinstance(v, Mapping) else v) for k, v in data.items()}
        else:
            update = {"$set": dict(data)}

        touched = {f for op in update.values() if isinstance(op, Mapping) for f in op}
        if self._caps.timestamps and self._caps.updated_at_field not in touched:
            update.setdefault("$set", {})[self._caps.updated_at_field] = self._now()
            touched.add(self._caps.updated_at_field)

        if upsert:
            on_insert = {
                k: v
                for k, v in self._new_document({}).items()
                if k not in touched
            }
            on_insert.update(update.get("$setOnInsert", {}))
            if on_insert:
                update["$setOnInsert"] = on_insert
        return update

    async def _expand(self, docs: list[dict[str, Any]], populate: Sequence[Populate], session: Any) -> None:
        """Resolve relations in place with one ``$in`` read per relation."""
        for relation in populate:
            refs: list[Any] = []
            for doc in docs:
                value = doc.get(relation.path)
                refs.extend(value if isinstance(value, list) else [value] if value is not None else [])
            if not refs:
                continue
            cursor = relation.collection.find(
                {relation.foreign_field: {"$in": refs}},
                **compact(projection=to_projection(relation.select), session=session),
            )
            by_key = {d.get(relation.foreign_field): d async for d in cursor}
            for doc in docs:
                value = doc.get(relation.path)
                if isinstance(value, list):
                    doc[relation.path] = [by_key[v] for v in value if v in by_key]
                elif value is not None:
                    doc[relation.path] = by_key.get(value)

    def _read_kwargs(self, options: QueryOptions) -> dict[str, Any]:
        return compact(
            projection=to_projection(options.select),
            session=options.session,
            max_time_ms=self._max_time(options.max_time_ms),
            hint=options.hint,
            comment=options.comment,
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create(
        self,
        data: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        options: CreateOptions | None = None,
    ) -> Any:
        """Insert one record or a batch; the result mirrors the input arity."""
        if isinstance(data, Mapping):
            return await self.create_one(data, options)
        return await self.create_many(data, options)

    async def create_one(self, data: Mapping[str, Any], options: CreateOptions | None = None) -> Any:
        options = options or CreateOptions()
        doc = self._new_document(data)
        result = await self._col.insert_one(
            doc,
            **compact(
                session=options.session,
                bypass_document_validation=not options.run_validators or None,
            ),
        )
        doc.setdefault("_id", result.inserted_id)
        self._log.debug("repository.created", count=1)
        return self._hydrate(doc, options.use_lean)

    async def create_many(
        self,
        data: Sequence[Mapping[str, Any]],
        options: CreateOptions | None = None,
    ) -> list[Any]:
        options = options or CreateOptions()
        docs = [self._new_document(d) for d in data]
        if not docs:
            return []
        result = await self._col.insert_many(
            docs,
            ordered=options.ordered,
            **compact(
                session=options.session,
                bypass_document_validation=not options.run_validators or None,
            ),
        )
        for doc, inserted_id in zip(docs, result.inserted_ids):
            doc.setdefault("_id", inserted_id)
        self._log.debug("repository.created", count=len(docs))
        return self._hydrate_all(docs, options.use_lean)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def find_by_id(self, id: Any, params: FindByIdParams | None = None) -> Any:  # noqa: A002
        """Live record with identity *id*, or ``None``."""
        params = params or FindByIdParams()
        doc = await self._col.find_one(self._id_filter(id), **self._read_kwargs(params))
        if doc is not None and params.populate:
            await self._expand([doc], params.populate, params.session)
        return self._hydrate(doc, params.use_lean)

    async def get_or_raise(self, id: Any, params: FindByIdParams | None = None) -> Any:  # noqa: A002
        """Like :meth:`find_by_id` but raises :class:`NotFoundError` when missing."""
        record = await self.find_by_id(id, params)
        if record is None:
            raise NotFoundError(self.name, id)
        return record

    async def find(self, params: FindParams | None = None) -> list[Any]:
        params = params or FindParams()
        cursor = self._col.find(
            self._live(params.filters),
            **self._read_kwargs(params),
            **compact(
                sort=to_sort_list(params.sort),
                limit=params.limit or None,
                skip=params.skip or None,
                collation=params.collation,
                batch_size=params.batch_size,
            ),
        )
        docs = await cursor.to_list(length=None)
        if params.populate:
            await self._expand(docs, params.populate, params.session)
        return self._hydrate_all(docs, params.use_lean)

    async def find_one(self, params: FindOneParams | None = None) -> Any:
        """First live record matching the filter, or ``None``.

        ``with_deleted=True`` skips the soft-delete restriction.
        """
        params = params or FindOneParams()
        filters = params.filters
        if not params.with_deleted:
            filters = self._live(filters)
        elif filters is not None and not isinstance(filters, Mapping):
            filters = filters.to_mongo_filter()
        doc = await self._col.find_one(
            filters,
            **self._read_kwargs(params),
            **compact(sort=to_sort_list(params.sort), collation=params.collation),
        )
        if doc is not None and params.populate:
            await self._expand([doc], params.populate, params.session)
        return self._hydrate(doc, params.use_lean)

    async def find_latest(self, params: FindOneParams | None = None) -> Any:
        """Newest live record (by creation timestamp) matching the filter."""
        params = params or FindOneParams()
        return await self.find_one(
            dataclasses.replace(params, sort=[(self._caps.created_at_field, -1)])
        )

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def find_one_and_update(
        self,
        filters: Filters,
        data: Mapping[str, Any],
        options: UpdateOptions | None = None,
    ) -> Any:
        """Atomically update the first live match; ``None`` when nothing matched."""
        options = options or UpdateOptions()
        doc = await self._col.find_one_and_update(
            self._live(filters),
            self._update_document(data, upsert=options.upsert),
            return_document=ReturnDocument.AFTER if options.new else ReturnDocument.BEFORE,
            upsert=options.upsert,
            **compact(
                projection=to_projection(options.select),
                session=options.session,
                # sent verbatim as a findAndModify command field
                bypassDocumentValidation=not options.run_validators or None,
            ),
        )
        return self._hydrate(doc, options.use_lean)

    async def update_one(
        self,
        filters: Filters,
        data: Mapping[str, Any],
        options: UpdateOptions | None = None,
    ) -> Any:
        return await self.find_one_and_update(filters, data, options)

    async def update_by_id(
        self,
        id: Any,  # noqa: A002
        data: Mapping[str, Any],
        options: UpdateOptions | None = None,
    ) -> Any:
        """Update the live record *id*; raises :class:`NotFoundError` when absent."""
        options = options or UpdateOptions()
        record = await self.find_one_and_update(
            {self._caps.identity_field: self._coerce_id(id)}, data, options
        )
        if record is None and not options.upsert:
            raise NotFoundError(self.name, id)
        return record

    async def update_many(
        self,
        filters: Filters,
        data: Mapping[str, Any],
        options: UpdateOptions | None = None,
    ) -> list[Any]:
        """Bulk update, then re-read the same filter.

        The re-read is a second query: records changed by another writer in
        between show their latest state, and records that stop matching the
        filter are not returned.
        """
        options = options or UpdateOptions()
        live = self._live(filters)
        result = await self._col.update_many(
            live,
            self._update_document(data, upsert=options.upsert),
            upsert=options.upsert,
            **compact(
                session=options.session,
                bypass_document_validation=not options.run_validators or None,
            ),
        )
        self._log.debug(
            "repository.updated_many",
            matched=result.matched_count,
            modified=result.modified_count,
        )
        cursor = self._col.find(
            live,
            **compact(projection=to_projection(options.select), session=options.session),
        )
        return self._hydrate_all(await cursor.to_list(length=None), options.use_lean)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_by_id(self, id: Any, options: DeleteOptions | None = None) -> Any:  # noqa: A002
        """Physically remove the live record *id* and return it."""
        options = options or DeleteOptions()
        doc = await self._col.find_one_and_delete(
            self._id_filter(id),
            **compact(projection=to_projection(options.select), session=options.session),
        )
        if doc is None:
            raise NotFoundError(self.name, id)
        self._log.debug("repository.deleted", id=str(id))
        return self._hydrate(doc, options.use_lean)

    async def delete_many(self, filters: Filters, options: DeleteOptions | None = None) -> int:
        """Physically remove every live match; returns the deleted count."""
        options = options or DeleteOptions()
        result = await self._col.delete_many(self._live(filters), **compact(session=options.session))
        self._log.debug("repository.deleted_many", count=result.deleted_count)
        return result.deleted_count

    async def soft_delete_by_id(
        self,
        id: Any,  # noqa: A002
        options: UpdateOptions | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> Any:
        """Mark the live record *id* deleted.

        A record that is already soft-deleted is invisible to this path, so a
        second call raises :class:`NotFoundError`.
        """
        options = dataclasses.replace(options or UpdateOptions(), use_lean=True)
        changes = {self._caps.soft_delete_field: True, **(extra or {})}
        return await self.update_by_id(id, {"$set": changes}, options)

    async def soft_delete_many(self, filters: Filters, options: UpdateOptions | None = None) -> int:
        """Mark every live match deleted; returns the number of records changed."""
        options = options or UpdateOptions()
        result = await self._col.update_many(
            self._live(filters),
            self._update_document({self._caps.soft_delete_field: True}),
            **compact(session=options.session),
        )
        self._log.debug("repository.soft_deleted_many", count=result.modified_count)
        return result.modified_count

    # ------------------------------------------------------------------
    # Count / existence
    # ------------------------------------------------------------------

    async def count_documents(self, filters: Filters | None = None, options: CountOptions | None = None) -> int:
        options = options or CountOptions()
        return await self._col.count_documents(
            self._live(filters),
            **compact(
                session=options.session,
                hint=options.hint,
                limit=options.limit or None,
                skip=options.skip or None,
                maxTimeMS=self._max_time(options.max_time_ms),
            ),
        )

    async def exists(self, filters: Filters, options: CountOptions | None = None) -> bool:
        options = options or CountOptions()
        doc = await self._col.find_one(
            self._live(filters),
            projection={"_id": 1},
            **compact(
                session=options.session,
                hint=options.hint,
                max_time_ms=self._max_time(options.max_time_ms),
            ),
        )
        return doc is not None

    async def find_or_create(
        self,
        filters: Filters,
        data: Mapping[str, Any],
        options: CreateOptions | None = None,
    ) -> Any:
        """Return the first live match or insert *data*.

        Lookup and insert are separate calls; without a unique index two
        concurrent callers can both insert.
        """
        options = options or CreateOptions()
        found = await self.find_one(
            FindOneParams(filters=filters, session=options.session, use_lean=options.use_lean)
        )
        if found is not None:
            return found
        return await self.create_one(data, options)

    # ------------------------------------------------------------------
    # Aggregation / listing
    # ------------------------------------------------------------------

    async def aggregate(
        self,
        pipeline: Sequence[Mapping[str, Any]],
        options: AggregateOptions | None = None,
    ) -> list[dict[str, Any]]:
        """Run a raw pipeline. No soft-delete stage is added."""
        options = options or AggregateOptions()
        coll = with_read_options(self._col, options.read_preference, options.read_concern)
        cursor = coll.aggregate(
            [dict(stage) for stage in pipeline],
            **compact(
                session=options.session,
                allowDiskUse=options.allow_disk_use,
                maxTimeMS=self._max_time(options.max_time_ms),
                hint=options.hint,
                collation=options.collation,
                comment=options.comment,
            ),
        )
        return await cursor.to_list(length=None)

    def _page_request(self, params: GetAllParams) -> PageRequest:
        requested = PageRequest.from_query(
            params.page, params.length, default_size=self._settings.default_page_size
        )
        if requested.limit > self._settings.max_page_size:
            self._log.warning(
                "repository.page_size_clamped",
                requested=requested.limit,
                max_page_size=self._settings.max_page_size,
            )
            return PageRequest.of(requested.page, self._settings.max_page_size)
        return requested

    def _strategy(self, params: GetAllParams) -> PaginationStrategy:
        if params.use_aggregation is None:
            mode = PaginationMode(self._settings.pagination_mode)
        else:
            mode = PaginationMode.AGGREGATION if params.use_aggregation else PaginationMode.QUERY
        return self._strategies[mode]

    def build_page_query(self, params: GetAllParams) -> PageQuery:
        """Decode and validate listing input without touching the store.

        Raises:
            InvalidFilterFormatError, BadSortFormatError, NonFilterableFieldError
        """
        expression = parse_filter(params.filter)
        sort_str = self._settings.default_sort if params.sort_str is None else params.sort_str
        sort = decode_sort(sort_str)
        page = self._page_request(params)
        ensure_filterable(expression, params.filterable_fields)

        if sort is not None:
            sort = sort.with_tiebreaker(self._caps.identity_field)
        exclude = tuple(dict.fromkeys([*self._caps.internal_fields, *params.exclude_fields]))
        return PageQuery(
            filter=self._live(expression),
            sort=sort,
            page=page,
            exclude_fields=exclude,
            params=params,
            max_time_ms=self._max_time(params.max_time_ms),
        )

    async def get_all_data(self, params: GetAllParams) -> PagedResult[Any]:
        """Paginated listing: decode, validate, fetch one page and the total."""
        query = self.build_page_query(params)
        strategy = self._strategy(params)
        docs, total = await strategy.fetch(self._col, query)
        pagination = resolve_pagination(total, query.page)
        self._log.debug(
            "repository.get_all_data",
            mode=strategy.mode.value,
            total=total,
            page=pagination.current_page,
            page_size=pagination.page_size,
        )
        return PagedResult(data=self._hydrate_all(docs, params.use_lean), pagination=pagination)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def transaction(self) -> MongoTransaction:
        """``async with repo.transaction() as tx:``, then pass ``tx.session`` along."""
        client = self._client if self._client is not None else self._col.database.client
        return MongoTransaction(client)

    async def with_transaction(self, fn: Callable[[Any], Awaitable[R]]) -> R:
        """Run ``fn(session)`` inside a transaction; the session is always released."""
        async with self.transaction() as tx:
            return await fn(tx.session)


__all__ = ["MongoRepository"]
