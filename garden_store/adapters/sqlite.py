"""SQLite adapters: stdlib ``sqlite3`` and ``aiosqlite``.

Placeholders are translated to numbered ``?n`` so ``$n`` queries keep their
binding order.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from typing import Any

from garden_store.adapters.pool import AsyncConnectionPool, ConnectionPool
from garden_store.core.connection import ConnectionConfig

# Referential actions (ON DELETE CASCADE) are off by default in SQLite
_CONNECTION_PRAGMAS = ("PRAGMA foreign_keys = ON",)

# Persistent in the database file; set once, before the other connections open
_DATABASE_PRAGMAS = ("PRAGMA journal_mode = WAL",)


def _pragmas(first: bool) -> tuple[str, ...]:
    return _DATABASE_PRAGMAS + _CONNECTION_PRAGMAS if first else _CONNECTION_PRAGMAS


def _connect(config: ConnectionConfig, first: bool) -> sqlite3.Connection:
    # Pooled connections move between threads, one holder at a time
    conn = sqlite3.connect(config.database, timeout=config.pool_timeout, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        for pragma in _pragmas(first):
            conn.execute(pragma).fetchall()
    except BaseException:
        conn.close()
        raise
    return conn


class SqliteSyncAdapter:
    """Blocking adapter over ``sqlite3``."""

    @property
    def paramstyle(self) -> str:
        return "qmark"

    def create_pool(self, config: ConnectionConfig) -> ConnectionPool:
        """Open ``pool_size`` connections up front.

        Each ``:memory:`` connection is its own database, so tests use
        ``pool_size=1``.
        """
        opened: list[sqlite3.Connection] = []
        try:
            for index in range(config.pool_size):
                opened.append(_connect(config, first=index == 0))
        except BaseException:
            for conn in opened:
                conn.close()
            raise
        return ConnectionPool(opened, "sqlite", config.pool_timeout)

    def acquire_connection(self, pool: ConnectionPool) -> sqlite3.Connection:
        return pool.take()

    def release_connection(self, connection: sqlite3.Connection, pool: ConnectionPool) -> None:
        pool.give_back(connection)

    def close_pool(self, pool: ConnectionPool) -> None:
        for conn in pool.drain():
            conn.close()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: Sequence[Any] = (),
    ) -> sqlite3.Cursor:
        return connection.execute(sql, tuple(params))


async def _connect_async(config: ConnectionConfig, first: bool) -> Any:
    import aiosqlite

    conn = await aiosqlite.connect(config.database, timeout=config.pool_timeout)
    conn.row_factory = aiosqlite.Row
    try:
        for pragma in _pragmas(first):
            # Finish each statement so it holds no lock on the file
            async with conn.execute(pragma) as cursor:
                await cursor.fetchall()
    except BaseException:
        await conn.close()
        raise
    return conn


class SqliteAsyncAdapter:
    """Non-blocking adapter over ``aiosqlite``."""

    @property
    def paramstyle(self) -> str:
        return "qmark"

    async def create_pool_async(self, config: ConnectionConfig) -> AsyncConnectionPool:
        opened: list[Any] = []
        try:
            for index in range(config.pool_size):
                opened.append(await _connect_async(config, first=index == 0))
        except BaseException:
            for conn in opened:
                await conn.close()
            raise
        return AsyncConnectionPool(opened, "sqlite", config.pool_timeout)

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
