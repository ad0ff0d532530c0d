"""Testing fakes – in-memory doubles for the motor driver."""
from mp_docstore.testing.fakes.mongo import (
    InMemoryCursor,
    InMemoryMongoClient,
    InMemoryMongoCollection,
    InMemoryMongoDatabase,
    InMemorySession,
)
from mp_docstore.kernel.time import FrozenClock

__all__ = [
    "FrozenClock",
    "InMemoryCursor",
    "InMemoryMongoClient",
    "InMemoryMongoCollection",
    "InMemoryMongoDatabase",
    "InMemorySession",
]
