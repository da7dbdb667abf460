"""Unit tests for Engine."""

from __future__ import annotations

from pathlib import Path

import pytest

from garden_store.core.connection import ConnectionConfig, ConnectionManager
from garden_store.core.engine import Engine
from garden_store.core.exceptions import (
    MultipleRowsError,
    ParameterBindingError,
    QueryNotFoundError,
)
from garden_store.core.registry import SQLRegistry
from garden_store.mapping.model import ModelMapper
from garden_store.models import Bed


@pytest.fixture
def engine(tmp_sql_dir: Path, write_sql) -> Engine:
    """Create an engine with test SQL files and SQLite in-memory DB."""
    write_sql("bed/get.sql", "SELECT id, name FROM beds WHERE id = $1")
    write_sql("bed/list.sql", "SELECT id, name FROM beds ORDER BY name")
    write_sql("bed/insert.sql", "INSERT INTO beds (name) VALUES ($1)")
    write_sql("bed/count.sql", "SELECT COUNT(*) AS cnt FROM beds")

    config = ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)
    manager = ConnectionManager(config)
    eng = Engine(manager, SQLRegistry(tmp_sql_dir))

    with manager.get_connection() as conn:
        conn.execute("CREATE TABLE beds (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT)")
        conn.execute("INSERT INTO beds (name) VALUES ('Tomatoes')")
        conn.execute("INSERT INTO beds (name) VALUES ('Herbs')")
        conn.commit()

    return eng


class TestEngine:
    def test_fetch_one_returns_dict(self, engine: Engine) -> None:
        assert engine.fetch_one("bed.get", (1,)) == {"id": 1, "name": "Tomatoes"}

    def test_fetch_one_scalar_param(self, engine: Engine) -> None:
        assert engine.fetch_one("bed.get", 2)["name"] == "Herbs"

    def test_fetch_one_returns_none_on_zero_rows(self, engine: Engine) -> None:
        assert engine.fetch_one("bed.get", (999,)) is None

    def test_fetch_one_raises_multiple_rows(self, engine: Engine) -> None:
        with pytest.raises(MultipleRowsError, match="bed.list"):
            engine.fetch_one("bed.list")

    def test_fetch_all_returns_list_of_dicts(self, engine: Engine) -> None:
        names = [r["name"] for r in engine.fetch_all("bed.list")]
        assert names == ["Herbs", "Tomatoes"]

    def test_fetch_all_with_mapper(self, engine: Engine) -> None:
        beds = engine.fetch_all("bed.list", mapper=ModelMapper(Bed))
        assert beds == [Bed(2, "Herbs"), Bed(1, "Tomatoes")]

    def test_fetch_scalar(self, engine: Engine) -> None:
        assert engine.fetch_scalar("bed.count") == 2

    def test_fetch_scalar_empty(self, engine: Engine) -> None:
        assert engine.fetch_scalar("SELECT id FROM beds WHERE id = $1", (999,)) is None

    def test_execute_returns_row_count(self, engine: Engine) -> None:
        assert engine.execute("bed.insert", ("Squash",)) == 1

    def test_inline_sql(self, engine: Engine) -> None:
        row = engine.fetch_one("SELECT name FROM beds WHERE id = $1", [1])
        assert row == {"name": "Tomatoes"}

    def test_writes_are_committed(self, engine: Engine) -> None:
        row = engine.fetch_one("INSERT INTO beds (name) VALUES ($1) RETURNING id", ("Kale",))
        assert row == {"id": 3}
        assert engine.fetch_scalar("bed.count") == 3

    def test_query_not_found_error(self, engine: Engine) -> None:
        with pytest.raises(QueryNotFoundError, match="nonexistent.query"):
            engine.fetch_all("nonexistent.query")

    def test_missing_parameter(self, engine: Engine) -> None:
        with pytest.raises(ParameterBindingError, match="bed.get"):
            engine.fetch_one("bed.get")

    def test_driver_errors_propagate_unchanged(self, engine: Engine) -> None:
        import sqlite3

        with pytest.raises(sqlite3.OperationalError):
            engine.fetch_all("SELECT * FROM no_such_table")

    def test_connection_usable_after_driver_error(self, engine: Engine) -> None:
        import sqlite3

        with pytest.raises(sqlite3.OperationalError):
            engine.execute("INSERT INTO no_such_table VALUES ($1)", (1,))
        assert engine.fetch_scalar("bed.count") == 2

    def test_default_registry_is_bundled(self, sqlite_config: ConnectionConfig) -> None:
        eng = Engine.from_config(sqlite_config)
        assert eng.registry.has("garden.get")
