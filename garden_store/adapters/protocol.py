"""Database adapter protocols.

Every adapter module MUST implement these protocols so engines and
transactions can stay backend-agnostic.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from garden_store.core.connection import ConnectionConfig


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Placeholder style: 'qmark' (?1), 'format' (%s) or 'numeric' ($1)."""
        ...

    def create_pool(self, config: ConnectionConfig) -> Any:
        """Create a connection pool."""
        ...

    def acquire_connection(self, pool: Any) -> Any:
        """Take an idle connection, waiting up to ``pool_timeout`` for one."""
        ...

    def release_connection(self, connection: Any, pool: Any) -> None:
        """Release a connection back to the pool."""
        ...

    def close_pool(self, pool: Any) -> None:
        """Close the pool and release all connections."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: Sequence[Any] = (),
    ) -> Any:
        """Execute SQL and return a cursor-like object."""
        ...


@runtime_checkable
class AsyncAdapter(Protocol):
    """Asynchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Placeholder style: 'qmark' (?1), 'format' (%s) or 'numeric' ($1)."""
        ...

    async def create_pool_async(self, config: ConnectionConfig) -> Any:
        """Create an async connection pool."""
        ...

    async def acquire_connection_async(self, pool: Any) -> Any:
        """Take an idle connection, waiting up to ``pool_timeout`` for one."""
        ...

    async def release_connection_async(self, connection: Any, pool: Any) -> None:
        """Release a connection back to the async pool."""
        ...

    async def close_pool_async(self, pool: Any) -> None:
        """Close the async pool."""
        ...

    async def execute_async(
        self,
        connection: Any,
        sql: str,
        params: Sequence[Any] = (),
    ) -> Any:
        """Execute SQL asynchronously and return a cursor-like object."""
        ...
