"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from garden_store.core.connection import (
    AsyncConnectionManager,
    ConnectionConfig,
    ConnectionManager,
)
from garden_store.core.engine import AsyncEngine, Engine
from garden_store.repository.garden import AsyncGardenRepository, GardenRepository

# Mirrors the production schema; cascades decide what happens on garden removal
SCHEMA = """
CREATE TABLE users (
    username TEXT PRIMARY KEY
);

CREATE TABLE gardens (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT NOT NULL,
    description TEXT
);

CREATE TABLE users_gardens (
    username  TEXT NOT NULL REFERENCES users (username) ON DELETE CASCADE,
    garden_id INTEGER NOT NULL REFERENCES gardens (id) ON DELETE CASCADE,
    PRIMARY KEY (username, garden_id)
);

CREATE TABLE beds (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    name      TEXT NOT NULL,
    garden_id INTEGER NOT NULL REFERENCES gardens (id) ON DELETE CASCADE
);

INSERT INTO users (username) VALUES ('alice'), ('bob'), ('carol');
"""


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config (one connection, one database)."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def tmp_sql_dir(tmp_path: Path) -> Path:
    """Temporary directory for SQL files."""
    return tmp_path / "sql"


@pytest.fixture
def write_sql(tmp_sql_dir: Path):
    """Helper to write SQL files into the temp directory.

    Usage:
        write_sql("garden/get.sql", "SELECT * FROM gardens WHERE id = $1")
    """

    def _write(relative_path: str, content: str) -> Path:
        file_path = tmp_sql_dir / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def garden_engine(sqlite_config: ConnectionConfig) -> Engine:
    """Engine over the bundled queries with the garden schema loaded."""
    manager = ConnectionManager(sqlite_config)
    with manager.get_connection() as conn:
        conn.executescript(SCHEMA)
        conn.commit()

    yield Engine(manager)
    manager.close_pool()


@pytest.fixture
def gardens(garden_engine: Engine) -> GardenRepository:
    return GardenRepository(garden_engine)


@pytest.fixture
def add_bed(garden_engine: Engine):
    """Insert a bed directly; beds have no write API in this package."""

    def _add(garden_id: int, name: str) -> int:
        return garden_engine.fetch_scalar(
            "INSERT INTO beds (name, garden_id) VALUES ($1, $2) RETURNING id",
            (name, garden_id),
        )

    return _add


@pytest.fixture
async def async_gardens(sqlite_config: ConnectionConfig):
    """AsyncGardenRepository over aiosqlite with the garden schema loaded."""
    manager = AsyncConnectionManager(sqlite_config)
    async with manager.get_connection() as conn:
        await conn.executescript(SCHEMA)
        await conn.commit()

    yield AsyncGardenRepository(AsyncEngine(manager))
    await manager.close_pool()


@pytest.fixture
def garden_db_file(tmp_path: Path) -> Path:
    """SQLite database file with the garden schema loaded."""
    path = tmp_path / "gardens.db"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
async def file_async_gardens(garden_db_file: Path):
    """AsyncGardenRepository on a database file with the default pool size."""
    manager = AsyncConnectionManager(ConnectionConfig(driver="sqlite", database=str(garden_db_file)))
    yield AsyncGardenRepository(AsyncEngine(manager))
    await manager.close_pool()
