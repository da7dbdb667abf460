"""Transaction management.

Runs several statements on one pooled connection: commit when the block
exits normally, rollback when it raises. The connection returns to the pool
either way.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from garden_store.core.exceptions import TransactionStateError
from garden_store.core.params import prepare
from garden_store.core.registry import SQLRegistry
from garden_store.core.rows import rows_to_dicts, rows_to_dicts_async

logger = logging.getLogger(__name__)


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class _TransactionBase:
    def __init__(self, adapter: Any, registry: SQLRegistry, connection_manager: Any) -> None:
        self._adapter = adapter
        self._registry = registry
        self._connection_manager = connection_manager
        self._connection: Any = None
        self._state = _TxState.IDLE

    def _prepare(self, query: str, params: Any) -> tuple[str, tuple[Any, ...]]:
        # Statements only run inside the with-block
        if self._state != _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "execute")
        sql, bound, label = prepare(query, params, self._registry, self._adapter.paramstyle)
        logger.debug("Executing %s with %d parameter(s) in transaction", label, len(bound))
        return sql, bound

    def _finished(self, exc_type: type[BaseException] | None) -> None:
        if exc_type is None:
            self._state = _TxState.COMMITTED
            logger.debug("Transaction committed")
        else:
            self._state = _TxState.ROLLED_BACK
            logger.debug("Transaction rolled back after %s", exc_type.__name__)


class TransactionManager(_TransactionBase):
    """Synchronous transaction context manager.

    The connection is taken from the pool in ``__enter__`` and returned in
    ``__exit__``.
    """

    def __enter__(self) -> TransactionManager:
        self._connection = self._connection_manager.acquire()
        self._state = _TxState.ACTIVE
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if exc_type is None:
                self._connection.commit()
            else:
                self._connection.rollback()
            self._finished(exc_type)
        finally:
            self._connection_manager.release(self._connection)
            self._connection = None

    def execute(self, query: str, params: Any = None) -> int:
        """Run a write statement; returns the affected row count."""
        sql, bound = self._prepare(query, params)
        return int(self._adapter.execute(self._connection, sql, bound).rowcount)

    def fetch_one(self, query: str, params: Any = None) -> dict[str, Any] | None:
        """First row of the result (e.g. ``INSERT ... RETURNING``), or None."""
        sql, bound = self._prepare(query, params)
        rows = rows_to_dicts(self._adapter.execute(self._connection, sql, bound))
        return rows[0] if rows else None


class AsyncTransactionManager(_TransactionBase):
    """Asynchronous transaction context manager."""

    async def __aenter__(self) -> AsyncTransactionManager:
        self._connection = await self._connection_manager.acquire()
        self._state = _TxState.ACTIVE
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if exc_type is None:
                await self._connection.commit()
            else:
                await self._connection.rollback()
            self._finished(exc_type)
        finally:
            await self._connection_manager.release(self._connection)
            self._connection = None

    async def execute(self, query: str, params: Any = None) -> int:
        sql, bound = self._prepare(query, params)
        cursor = await self._adapter.execute_async(self._connection, sql, bound)
        return int(cursor.rowcount)

    async def fetch_one(self, query: str, params: Any = None) -> dict[str, Any] | None:
        sql, bound = self._prepare(query, params)
        cursor = await self._adapter.execute_async(self._connection, sql, bound)
        rows = await rows_to_dicts_async(cursor)
        return rows[0] if rows else None
