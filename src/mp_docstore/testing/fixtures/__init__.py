"""Testing fixtures – pytest fixtures for the in-memory driver doubles."""
from mp_docstore.testing.fixtures.mongo import frozen_clock, mongo_client, mongo_collection

__all__ = ["frozen_clock", "mongo_client", "mongo_collection"]
