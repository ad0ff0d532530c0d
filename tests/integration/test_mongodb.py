"""Integration tests for MongoRepository against a real MongoDB.

Run with::

    pytest -m integration tests/integration/test_mongodb.py -v

Requires Docker (used automatically via ``testcontainers``).
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from pymongo.errors import DuplicateKeyError
from testcontainers.mongodb import MongoDbContainer

from mp_docstore.adapters.mongodb import GetAllParams, MongoRepository, UpdateOptions
from mp_docstore.kernel.errors import NotFoundError

BASE = datetime(2026, 1, 1, tzinfo=UTC)


# ---------------------------------------------------------------------------
# MongoDB fixture (one container per module)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def mongo_uri() -> str:  # type: ignore[return]
    with MongoDbContainer("mongo:7.0") as mongo:
        yield mongo.get_connection_url()


def _run(uri: str, scenario: Any) -> Any:
    """Run ``scenario(db)`` on a fresh database with a client bound to this loop."""

    async def main() -> Any:
        import motor.motor_asyncio as motor_async

        client = motor_async.AsyncIOMotorClient(uri, tz_aware=True)
        name = f"docstore_{id(scenario)}"
        try:
            return await scenario(client[name])
        finally:
            await client.drop_database(name)
            client.close()

    return asyncio.run(main())


# ---------------------------------------------------------------------------
# CRUD / soft delete
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestMongoRepository:
    def test_create_and_find_by_id(self, mongo_uri: str) -> None:
        async def scenario(db: Any) -> Any:
            repo = MongoRepository(db.notes)
            created = await repo.create_one({"title": "hello"})
            return await repo.find_by_id(str(created["_id"]))

        doc = _run(mongo_uri, scenario)
        assert doc["title"] == "hello"
        assert doc["isDeleted"] is False

    def test_soft_delete_twice_raises(self, mongo_uri: str) -> None:
        async def scenario(db: Any) -> None:
            repo = MongoRepository(db.notes)
            created = await repo.create_one({"title": "x"})
            await repo.soft_delete_by_id(created["_id"])
            assert await repo.find_by_id(created["_id"]) is None
            assert await db.notes.count_documents({}) == 1
            await repo.soft_delete_by_id(created["_id"])

        with pytest.raises(NotFoundError):
            _run(mongo_uri, scenario)

    def test_update_many_and_counts(self, mongo_uri: str) -> None:
        async def scenario(db: Any) -> tuple[list[Any], int]:
            repo = MongoRepository(db.notes)
            await repo.create_many([{"kind": "memo", "n": i} for i in range(4)])
            await repo.soft_delete_many({"n": 0})
            updated = await repo.update_many({"kind": "memo"}, {"done": True})
            return updated, await repo.count_documents({"done": True})

        updated, done = _run(mongo_uri, scenario)
        assert len(updated) == 3
        assert done == 3

    def test_upsert_stamps_bookkeeping_fields(self, mongo_uri: str) -> None:
        async def scenario(db: Any) -> Any:
            repo = MongoRepository(db.notes)
            return await repo.update_by_id("fixed-id", {"title": "made"}, UpdateOptions(upsert=True))

        doc = _run(mongo_uri, scenario)
        assert doc["_id"] == "fixed-id"
        assert doc["__v"] == 0
        assert doc["isDeleted"] is False

    def test_duplicate_key_propagates(self, mongo_uri: str) -> None:
        async def scenario(db: Any) -> None:
            await db.notes.create_index("slug", unique=True)
            repo = MongoRepository(db.notes)
            await repo.find_or_create({"slug": "a"}, {"slug": "a"})
            existing = await repo.find_or_create({"slug": "a"}, {"slug": "a"})
            assert existing["slug"] == "a"
            await repo.create_one({"slug": "a"})

        with pytest.raises(DuplicateKeyError):
            _run(mongo_uri, scenario)

    def test_transaction_aborts_and_reraises(self, mongo_uri: str) -> None:
        async def scenario(db: Any) -> None:
            repo = MongoRepository(db.notes)

            async def work(session: Any) -> None:
                raise ValueError("boom")

            await repo.with_transaction(work)

        with pytest.raises(ValueError, match="boom"):
            _run(mongo_uri, scenario)


# ---------------------------------------------------------------------------
# get_all_data
# ---------------------------------------------------------------------------


async def _seed(db: Any) -> MongoRepository[Any]:
    await db.records.insert_many(
        [
            {
                "rank": r,
                "title": f"Record {r}",
                "tags": ["even" if r % 2 == 0 else "odd"],
                "isDeleted": False,
                "__v": 0,
                "createdAt": BASE - timedelta(hours=r),
            }
            for r in range(1, 26)
        ]
    )
    return MongoRepository(db.records)


@pytest.mark.integration
class TestGetAllData:
    @pytest.mark.parametrize("use_aggregation", [False, True])
    def test_second_page(self, mongo_uri: str, use_aggregation: bool) -> None:
        async def scenario(db: Any) -> Any:
            repo = await _seed(db)
            return await repo.get_all_data(GetAllParams(page="2", length="10", use_aggregation=use_aggregation))

        result = _run(mongo_uri, scenario)
        assert [d["rank"] for d in result.data] == list(range(11, 21))
        assert result.pagination.to_dict() == {"totalItems": 25, "totalPages": 3, "currentPage": 2, "pageSize": 10}
        assert all("isDeleted" not in d and "__v" not in d for d in result.data)

    @pytest.mark.parametrize(
        ("raw_filter", "expected"),
        [
            ('{"and": {"title__contains": "record 1"}}', 11),
            ('{"and": {"rank__between": ["3", "7"]}}', 5),
            ('{"and": {"tags__hasSome": ["even"]}}', 12),
            ('{"or": [{"rank": 1}, {"rank__gte": 24}]}', 3),
            ('{"not": {"tags__has": "odd"}}', 12),
            ('{"and": {"createdAt__day": "2025-12-31"}}', 24),
        ],
    )
    def test_operators_match_server_semantics(self, mongo_uri: str, raw_filter: str, expected: int) -> None:
        async def scenario(db: Any) -> tuple[int, int]:
            repo = await _seed(db)
            simple = await repo.get_all_data(GetAllParams(filter=raw_filter, use_aggregation=False))
            facet = await repo.get_all_data(GetAllParams(filter=raw_filter, use_aggregation=True))
            return simple.pagination.total_items, facet.pagination.total_items

        assert _run(mongo_uri, scenario) == (expected, expected)
