"""MongoDB adapter — MongoTransaction."""

from __future__ import annotations

from typing import Any

from mp_docstore.observability.logging import get_logger

_log = get_logger(__name__)


class MongoTransaction:
    """Scoped client session running one multi-document transaction.

    Requires a replica set (or another transaction-capable topology). The
    transaction commits when the block exits normally and aborts on any
    exception; the session is ended on every exit path. Conflicts are not
    retried: a ``TransientTransactionError`` reaches the caller as raised.

    Usage::

        async with MongoTransaction(motor_client) as tx:
            await notes.create_one(data, CreateOptions(session=tx.session))
    """

    def __init__(self, client: Any) -> None:
        self._client = client
        self.session: Any = None

    async def __aenter__(self) -> "MongoTransaction":
        self.session = await self._client.start_session()
        try:
            self.session.start_transaction()
        except BaseException:
            await self.session.end_session()
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                _log.debug("transaction.aborting", error=repr(exc_val))
                await self.rollback()
        finally:
            await self.session.end_session()

    async def commit(self) -> None:
        """Commit the active MongoDB transaction."""
        await self.session.commit_transaction()

    async def rollback(self) -> None:
        """Abort the active MongoDB transaction."""
        await self.session.abort_transaction()


__all__ = ["MongoTransaction"]
