"""Unit tests for the repository base classes and GardenRepository."""

from __future__ import annotations

from dataclasses import dataclass, field
from unittest.mock import AsyncMock, MagicMock

import pytest

from garden_store.core.exceptions import BadRequestError, NotFoundError
from garden_store.mapping.aggregate import AggregateMapper
from garden_store.mapping.builder import aggregate
from garden_store.models import (
    Bed,
    CreatedGarden,
    Garden,
    GardenRecord,
    GardenRef,
    GardenSummary,
)
from garden_store.repository.base import AsyncRepository, Repository
from garden_store.repository.garden import AsyncGardenRepository, GardenRepository


@dataclass
class Plot:
    id: int
    name: str
    beds: list = field(default_factory=list)


class TestRepository:
    def test_engine_attribute(self) -> None:
        engine = MagicMock()
        repo = Repository(engine=engine)
        assert repo.engine is engine

    def test_mapper_with_mapping(self) -> None:
        mapping = aggregate(Plot, prefix="plot__").key("id").auto_fields().build()
        repo = Repository(engine=MagicMock(), mapping=mapping)
        assert isinstance(repo.mapper, AggregateMapper)

    def test_mapper_none_without_mapping(self) -> None:
        assert Repository(engine=MagicMock()).mapper is None

    def test_async_mapper_with_mapping(self) -> None:
        mapping = aggregate(Plot, prefix="plot__").key("id").auto_fields().build()
        repo = AsyncRepository(engine=AsyncMock(), mapping=mapping)
        assert isinstance(repo.mapper, AggregateMapper)


@pytest.fixture
def engine() -> MagicMock:
    return MagicMock()


@pytest.fixture
def repo(engine: MagicMock) -> GardenRepository:
    return GardenRepository(engine)


class TestGardenUpdate:
    def test_empty_data_rejected_before_io(self, repo: GardenRepository, engine: MagicMock) -> None:
        with pytest.raises(BadRequestError, match="No data"):
            repo.update(1, {})
        engine.fetch_one.assert_not_called()

    def test_unknown_field_rejected(self, repo: GardenRepository, engine: MagicMock) -> None:
        with pytest.raises(BadRequestError, match="id"):
            repo.update(1, {"id": 99})
        engine.fetch_one.assert_not_called()

    def test_id_bound_after_values(self, repo: GardenRepository, engine: MagicMock) -> None:
        engine.fetch_one.return_value = GardenRecord(7, "Front", "old")

        result = repo.update(7, {"name": "Front"})

        sql, params = engine.fetch_one.call_args.args
        assert sql == "UPDATE gardens SET name = $1 WHERE id = $2 RETURNING id, name, description"
        assert params == ["Front", 7]
        assert result == GardenRecord(7, "Front", "old")

    def test_both_fields(self, repo: GardenRepository, engine: MagicMock) -> None:
        engine.fetch_one.return_value = GardenRecord(3, "A", "B")

        repo.update(3, {"name": "A", "description": "B"})

        sql, params = engine.fetch_one.call_args.args
        assert "SET name = $1, description = $2 WHERE id = $3" in sql
        assert params == ["A", "B", 3]

    def test_missing_garden(self, repo: GardenRepository, engine: MagicMock) -> None:
        engine.fetch_one.return_value = None
        with pytest.raises(NotFoundError, match="42") as exc_info:
            repo.update(42, {"description": None})
        assert exc_info.value.status_code == 404


class TestGardenRepository:
    def test_create_writes_in_one_transaction(self, repo: GardenRepository, engine: MagicMock) -> None:
        tx = engine.transaction.return_value.__enter__.return_value
        tx.fetch_one.return_value = {"id": 5}

        garden = repo.create("alice", "Backyard", "veg")

        tx.fetch_one.assert_called_once_with("garden.insert", ("Backyard", "veg"))
        tx.execute.assert_called_once_with("users_gardens.insert", ("alice", 5))
        assert garden == CreatedGarden(
            GardenSummary(id=5, name="Backyard", description="veg", users=["alice"])
        )

    def test_get_assembles_aggregate(self, repo: GardenRepository, engine: MagicMock) -> None:
        engine.fetch_all.side_effect = [
            [GardenSummary(1, "Backyard", None, ["alice"])],
            [Bed(2, "Herbs")],
        ]

        garden = repo.get(1)

        assert garden == Garden(1, "Backyard", None, ["alice"], [Bed(2, "Herbs")])
        queries = [c.args[0] for c in engine.fetch_all.call_args_list]
        assert queries == ["garden.get", "bed.list_by_garden"]

    def test_get_missing_skips_beds(self, repo: GardenRepository, engine: MagicMock) -> None:
        engine.fetch_all.return_value = []
        with pytest.raises(NotFoundError, match="No garden: 9"):
            repo.get(9)
        assert engine.fetch_all.call_count == 1

    def test_find_all_uses_summary_mapper(self, repo: GardenRepository, engine: MagicMock) -> None:
        engine.fetch_all.return_value = []
        assert repo.find_all("bob") == []
        engine.fetch_all.assert_called_once_with(
            "garden.find_all_by_user", ("bob",), mapper=repo.mapper
        )

    def test_remove(self, repo: GardenRepository, engine: MagicMock) -> None:
        engine.fetch_one.return_value = GardenRef(4, "Old")
        assert repo.remove(4) == GardenRef(4, "Old")

    def test_remove_missing(self, repo: GardenRepository, engine: MagicMock) -> None:
        engine.fetch_one.return_value = None
        with pytest.raises(NotFoundError):
            repo.remove(4)


class TestAsyncGardenRepository:
    async def test_create(self) -> None:
        engine = AsyncMock()
        tx = AsyncMock()
        tx.fetch_one.return_value = {"id": 8}
        cm = MagicMock()
        cm.__aenter__.return_value = tx
        cm.__aexit__.return_value = False
        engine.transaction = MagicMock(return_value=cm)

        garden = await AsyncGardenRepository(engine).create("bob", "Roof")

        tx.execute.assert_awaited_once_with("users_gardens.insert", ("bob", 8))
        assert isinstance(garden, CreatedGarden)
        assert garden.garden.users == ["bob"]
        assert garden.garden.description is None

    async def test_update_empty_rejected(self) -> None:
        engine = AsyncMock()
        with pytest.raises(BadRequestError):
            await AsyncGardenRepository(engine).update(1, {})
        engine.fetch_one.assert_not_awaited()

    async def test_get_missing(self) -> None:
        engine = AsyncMock()
        engine.fetch_all.return_value = []
        with pytest.raises(NotFoundError):
            await AsyncGardenRepository(engine).get(1)
