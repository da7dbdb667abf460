"""Query execution engine.

The Engine resolves a query (registry key or inline SQL), translates its
``$n`` placeholders for the adapter, executes it on a pooled connection,
and optionally applies a mapper to the resulting rows.

Every top-level call is its own unit of work: the connection is committed
before it goes back to the pool. Driver errors propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

from garden_store.core.connection import AsyncConnectionManager, ConnectionManager
from garden_store.core.exceptions import MultipleRowsError
from garden_store.core.params import prepare
from garden_store.core.registry import SQLRegistry
from garden_store.core.rows import rows_to_dicts, rows_to_dicts_async
from garden_store.core.transaction import AsyncTransactionManager, TransactionManager

logger = logging.getLogger(__name__)


def _single(label: str, rows: list[dict[str, Any]], mapper: Any | None) -> Any:
    """Apply fetch_one semantics to an already-drained result set."""
    if len(rows) == 0:
        return None
    if len(rows) > 1:
        raise MultipleRowsError(label, len(rows))

    row = rows[0]
    if mapper is not None:
        return mapper.map_one(row)
    return row


def _first_value(rows: list[dict[str, Any]]) -> Any:
    if not rows:
        return None
    return next(iter(rows[0].values()))


class Engine:
    """Synchronous query execution engine."""

    def __init__(
        self,
        connection_manager: ConnectionManager,
        registry: SQLRegistry | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._registry = registry if registry is not None else SQLRegistry()
        self._paramstyle = connection_manager.adapter.paramstyle

    @classmethod
    def from_config(
        cls,
        config: Any,
        registry: SQLRegistry | None = None,
    ) -> Engine:
        """Create an Engine from a ConnectionConfig and optional SQLRegistry."""
        return cls(ConnectionManager(config), registry)

    @property
    def registry(self) -> SQLRegistry:
        return self._registry

    def _run(self, query: str, params: Any) -> tuple[str, list[dict[str, Any]], int]:
        """Execute *query* and commit. Returns ``(label, rows, rowcount)``."""
        sql, bound, label = prepare(query, params, self._registry, self._paramstyle)
        logger.debug("Executing %s with %d parameter(s)", label, len(bound))

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = self._connection_manager.adapter.execute(conn, sql, bound)
                rows = rows_to_dicts(cursor)
                rowcount = int(cursor.rowcount)
            except BaseException:
                conn.rollback()
                raise
            conn.commit()

        return label, rows, rowcount

    def fetch_one(
        self,
        query: str,
        params: Any = None,
        *,
        mapper: Any | None = None,
    ) -> Any:
        """Fetch a single row.

        Returns None if zero rows match.
        Raises MultipleRowsError if more than one row matches.
        """
        label, rows, _ = self._run(query, params)
        return _single(label, rows, mapper)

    def fetch_all(
        self,
        query: str,
        params: Any = None,
        *,
        mapper: Any | None = None,
    ) -> Any:
        """Fetch all matching rows."""
        _, rows, _ = self._run(query, params)
        if mapper is not None:
            return mapper.map_many(rows)
        return rows

    def fetch_scalar(self, query: str, params: Any = None) -> Any:
        """Fetch a single scalar value (first column of first row)."""
        _, rows, _ = self._run(query, params)
        return _first_value(rows)

    def execute(self, query: str, params: Any = None) -> int:
        """Execute a write query. Returns affected row count."""
        _, _, rowcount = self._run(query, params)
        return rowcount

    def transaction(self) -> TransactionManager:
        """Create a new transaction context manager."""
        return TransactionManager(
            adapter=self._connection_manager.adapter,
            registry=self._registry,
            connection_manager=self._connection_manager,
        )


class AsyncEngine:
    """Asynchronous query execution engine."""

    def __init__(
        self,
        connection_manager: AsyncConnectionManager,
        registry: SQLRegistry | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._registry = registry if registry is not None else SQLRegistry()
        self._paramstyle = connection_manager.adapter.paramstyle

    @classmethod
    def from_config(
        cls,
        config: Any,
        registry: SQLRegistry | None = None,
    ) -> AsyncEngine:
        """Create an AsyncEngine from a ConnectionConfig and optional SQLRegistry."""
        return cls(AsyncConnectionManager(config), registry)

    @property
    def registry(self) -> SQLRegistry:
        return self._registry

    async def _run(self, query: str, params: Any) -> tuple[str, list[dict[str, Any]], int]:
        sql, bound, label = prepare(query, params, self._registry, self._paramstyle)
        logger.debug("Executing %s with %d parameter(s) (async)", label, len(bound))

        async with self._connection_manager.get_connection() as conn:
            try:
                cursor = await self._connection_manager.adapter.execute_async(conn, sql, bound)
                rows = await rows_to_dicts_async(cursor)
                rowcount = int(cursor.rowcount)
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

        return label, rows, rowcount

    async def fetch_one(
        self,
        query: str,
        params: Any = None,
        *,
        mapper: Any | None = None,
    ) -> Any:
        """Fetch a single row asynchronously."""
        label, rows, _ = await self._run(query, params)
        return _single(label, rows, mapper)

    async def fetch_all(
        self,
        query: str,
        params: Any = None,
        *,
        mapper: Any | None = None,
    ) -> Any:
        """Fetch all matching rows asynchronously."""
        _, rows, _ = await self._run(query, params)
        if mapper is not None:
            return mapper.map_many(rows)
        return rows

    async def fetch_scalar(self, query: str, params: Any = None) -> Any:
        """Fetch a single scalar value asynchronously."""
        _, rows, _ = await self._run(query, params)
        return _first_value(rows)

    async def execute(self, query: str, params: Any = None) -> int:
        """Execute a write query asynchronously."""
        _, _, rowcount = await self._run(query, params)
        return rowcount

    def transaction(self) -> AsyncTransactionManager:
        """Create a new async transaction context manager.

        The connection is acquired in ``__aenter__``, allowing usage as:
        ``async with engine.transaction() as tx:``
        """
        return AsyncTransactionManager(
            adapter=self._connection_manager.adapter,
            registry=self._registry,
            connection_manager=self._connection_manager,
        )
