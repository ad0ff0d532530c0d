"""Testing support – in-memory motor doubles and pytest fixtures.

Import in your ``conftest.py``::

    pytest_plugins = ["mp_docstore.testing.fixtures"]
"""

from mp_docstore.testing.fakes import (
    FrozenClock,
    InMemoryCursor,
    InMemoryMongoClient,
    InMemoryMongoCollection,
    InMemoryMongoDatabase,
    InMemorySession,
)

__all__ = [
    "FrozenClock",
    "InMemoryCursor",
    "InMemoryMongoClient",
    "InMemoryMongoCollection",
    "InMemoryMongoDatabase",
    "InMemorySession",
]
