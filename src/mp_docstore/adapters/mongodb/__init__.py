"""MongoDB adapter — soft-delete aware repository, pagination strategies, transactions.

Requires ``motor``::

    pip install mp-docstore
"""

from mp_docstore.adapters.mongodb.options import (
    AggregateOptions,
    CountOptions,
    CreateOptions,
    DeleteOptions,
    FindByIdParams,
    FindOneParams,
    FindParams,
    GetAllParams,
    Populate,
    QueryOptions,
    UpdateOptions,
)
from mp_docstore.adapters.mongodb.repository import MongoRepository
from mp_docstore.adapters.mongodb.strategies import (
    FacetAggregationStrategy,
    PageQuery,
    PaginationMode,
    PaginationStrategy,
    SimpleQueryStrategy,
)
from mp_docstore.adapters.mongodb.uow import MongoTransaction

__all__ = [
    "AggregateOptions",
    "CountOptions",
    "CreateOptions",
    "DeleteOptions",
    "FacetAggregationStrategy",
    "FindByIdParams",
    "FindOneParams",
    "FindParams",
    "GetAllParams",
    "MongoRepository",
    "MongoTransaction",
    "PageQuery",
    "PaginationMode",
    "PaginationStrategy",
    "Populate",
    "QueryOptions",
    "SimpleQueryStrategy",
    "UpdateOptions",
]
