"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager and AsyncConnectionManager use adapter protocols for
pool-based connection lifecycle.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
import threading
from contextlib import asynccontextmanager, contextmanager
from typing import Any

from pydantic import BaseModel

from garden_store.core.enums import DatabaseBackend
from garden_store.core.exceptions import AdapterError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = 5
    pool_timeout: int = 30
    pool_recycle: int = 1800
    extra: dict[str, Any] = {}


# Adapter module mapping: backend -> (module_path, sync_class, async_class)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str, str]] = {
    DatabaseBackend.SQLITE: (
        "garden_store.adapters.sqlite",
        "SqliteSyncAdapter",
        "SqliteAsyncAdapter",
    ),
    DatabaseBackend.POSTGRESQL: (
        "garden_store.adapters.postgresql",
        "PostgresqlSyncAdapter",
        "PostgresqlAsyncAdapter",
    ),
}


def _load_adapter(driver: str, kind: str) -> Any:
    """Load a sync or async adapter by driver name."""
    try:
        backend = DatabaseBackend(driver.lower())
    except ValueError:
        raise AdapterError(f"Unsupported database driver: {driver}") from None

    module_path, sync_cls_name, async_cls_name = _ADAPTER_MAP[backend]
    cls_name = sync_cls_name if kind == "sync" else async_cls_name

    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load {kind} adapter for '{driver}': {e}") from e


class ConnectionManager:
    """Synchronous connection manager using SyncAdapter protocol."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.driver, "sync")
        self._pool: Any = None
        self._pool_lock = threading.Lock()

    @property
    def adapter(self) -> Any:
        return self._adapter

    def initialize_pool(self) -> Any:
        """Open the pool on first use; concurrent first callers share one pool."""
        with self._pool_lock:
            if self._pool is None:
                logger.debug(
                    "Opening %s pool (size=%d)", self.config.driver, self.config.pool_size
                )
                self._pool = self._adapter.create_pool(self.config)
        return self._pool

    def acquire(self) -> Any:
        """Take a connection out of the pool; the caller must release() it."""
        return self._adapter.acquire_connection(self.initialize_pool())

    def release(self, connection: Any) -> None:
        self._adapter.release_connection(connection, self._pool)

    @contextmanager
    def get_connection(self):  # type: ignore[no-untyped-def]
        """Get a connection from the pool as a context manager."""
        connection = self.acquire()
        try:
            yield connection
        finally:
            self.release(connection)

    def close_pool(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            self._adapter.close_pool(self._pool)
            self._pool = None


class AsyncConnectionManager:
    """Asynchronous connection manager using AsyncAdapter protocol."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.driver, "async")
        self._pool: Any = None
        self._pool_lock = asyncio.Lock()

    @property
    def adapter(self) -> Any:
        return self._adapter

    async def initialize_pool(self) -> Any:
        """Open the pool on first use; concurrent first callers share one pool."""
        async with self._pool_lock:
            if self._pool is None:
                logger.debug(
                    "Opening async %s pool (size=%d)", self.config.driver, self.config.pool_size
                )
                self._pool = await self._adapter.create_pool_async(self.config)
        return self._pool

    async def acquire(self) -> Any:
        """Take a connection out of the pool; the caller must release() it."""
        return await self._adapter.acquire_connection_async(await self.initialize_pool())

    async def release(self, connection: Any) -> None:
        await self._adapter.release_connection_async(connection, self._pool)

    @asynccontextmanager
    async def get_connection(self):  # type: ignore[no-untyped-def]
        """Get an async connection from the pool as an async context manager."""
        connection = await self.acquire()
        try:
            yield connection
        finally:
            await self.release(connection)

    async def close_pool(self) -> None:
        """Close the async connection pool."""
        if self._pool is not None:
            await self._adapter.close_pool_async(self._pool)
            self._pool = None
