"""
mp_docstore – soft-delete aware data-access layer for MongoDB.

Import path convention::

    from mp_docstore.adapters.mongodb import MongoRepository, GetAllParams
    from mp_docstore.application.query import parse_filter, decode_sort
    from mp_docstore.kernel.errors import NotFoundError, NonFilterableFieldError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
