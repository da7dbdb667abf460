"""PostgreSQL adapters over psycopg 3.

Rows come back as dicts (``dict_row``); ``$n`` placeholders are rewritten
to ``%s`` with values reordered to match.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from garden_store.adapters.pool import AsyncConnectionPool, ConnectionPool
from garden_store.core.connection import ConnectionConfig


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    parts.append(f"connect_timeout={config.pool_timeout}")
    parts.extend(f"{key}={value}" for key, value in config.extra.items())
    return " ".join(parts)


class PostgresqlSyncAdapter:
    """Blocking adapter over ``psycopg.Connection``."""

    @property
    def paramstyle(self) -> str:
        return "format"

    def create_pool(self, config: ConnectionConfig) -> ConnectionPool:
        import psycopg
        import psycopg.rows

        conninfo = _build_conninfo(config)
        opened: list[Any] = []
        try:
            for _ in range(config.pool_size):
                opened.append(psycopg.connect(conninfo, row_factory=psycopg.rows.dict_row))
        except BaseException:
            for conn in opened:
                conn.close()
            raise
        return ConnectionPool(opened, "postgresql", config.pool_timeout)

    def acquire_connection(self, pool: ConnectionPool) -> Any:
        return pool.take()

    def release_connection(self, connection: Any, pool: ConnectionPool) -> None:
        pool.give_back(connection)

    def close_pool(self, pool: ConnectionPool) -> None:
        for conn in pool.drain():
            conn.close()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: Sequence[Any] = (),
    ) -> Any:
        return connection.execute(sql, tuple(params))


class PostgresqlAsyncAdapter:
    """Non-blocking adapter over ``psycopg.AsyncConnection``."""

    @property
    def paramstyle(self) -> str:
        return "format"

    async def create_pool_async(self, config: ConnectionConfig) -> AsyncConnectionPool:
        import psycopg
        import psycopg.rows

        conninfo = _build_conninfo(config)
        opened: list[Any] = []
        try:
            for _ in range(config.pool_size):
                conn = await psycopg.AsyncConnection.connect(
                    conninfo, row_factory=psycopg.rows.dict_row
                )
                opened.append(conn)
        except BaseException:
            for conn in opened:
                await conn.close()
            raise
        return AsyncConnectionPool(opened, "postgresql", config.pool_timeout)

    async def acquire_connection_async(self, pool: AsyncConnectionPool) -> Any:
        return await pool.take()

    async def release_connection_async(self, connection: Any, pool: AsyncConnectionPool) -> None:
        pool.give_back(connection)

    async def close_pool_async(self, pool: AsyncConnectionPool) -> None:
        for conn in pool.drain():
            await conn.close()

    async def execute_async(
        self,
        connection: Any,
        sql: str,
        params: Sequence[Any] = (),
    ) -> Any:
        return await connection.execute(sql, tuple(params))
