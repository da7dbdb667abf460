"""Garden aggregate repository.

A garden is owned by one or more users (``users_gardens``) and holds beds.
``get`` returns the full aggregate, ``find_all`` the cheaper per-user
summaries without beds.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from garden_store.core.exceptions import NotFoundError
from garden_store.core.partial_update import sql_for_partial_update
from garden_store.mapping.builder import aggregate
from garden_store.mapping.model import ModelMapper
from garden_store.models import (
    Bed,
    CreatedGarden,
    Garden,
    GardenField,
    GardenRecord,
    GardenRef,
    GardenSummary,
)
from garden_store.repository.base import (
    AsyncQueryExecutor,
    AsyncRepository,
    QueryExecutor,
    Repository,
)

logger = logging.getLogger(__name__)

# Rows from garden.get / garden.find_all_by_user: one per (garden, owner)
GARDEN_SUMMARY_PLAN = (
    aggregate(GardenSummary, prefix="garden__")
    .key("id")
    .auto_fields()
    .values("users", column="username", prefix="owner__")
    .strict()
    .build()
)

# Field names equal column names for gardens
GARDEN_COLUMNS: dict[str, str] = {}

_BED_MAPPER = ModelMapper(Bed)
_RECORD_MAPPER = ModelMapper(GardenRecord)
_REF_MAPPER = ModelMapper(GardenRef)


def _update_query(garden_id: int, data: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Build the UPDATE for *data*; raises BadRequestError before any I/O."""
    update = sql_for_partial_update(data, GARDEN_COLUMNS, allowed=GardenField)
    sql = (
        f"UPDATE gardens "
        f"SET {update.set_clause} "
        f"WHERE id = ${update.next_index} "
        f"RETURNING id, name, description"
    )
    return sql, [*update.values, garden_id]


def _created(
    garden_id: int, name: str, description: str | None, username: str
) -> CreatedGarden:
    return CreatedGarden(
        GardenSummary(id=garden_id, name=name, description=description, users=[username])
    )


def _with_beds(summary: GardenSummary, beds: list[Bed]) -> Garden:
    return Garden(
        id=summary.id,
        name=summary.name,
        description=summary.description,
        users=summary.users,
        beds=beds,
    )


class GardenRepository(Repository[GardenSummary]):
    """Data access for the Garden aggregate."""

    def __init__(self, engine: QueryExecutor) -> None:
        super().__init__(engine, mapping=GARDEN_SUMMARY_PLAN)

    def create(self, username: str, name: str, description: str | None = None) -> CreatedGarden:
        """Create a garden owned by *username*.

        The garden row and its ownership link are written in one
        transaction. The result is assembled from the inputs, not re-read,
        and wrapped as ``CreatedGarden(garden=...)``.
        """
        with self.engine.transaction() as tx:
            row = tx.fetch_one("garden.insert", (name, description))
            garden_id = row["id"]
            tx.execute("users_gardens.insert", (username, garden_id))

        logger.info("Created garden %s", garden_id)
        return _created(garden_id, name, description, username)

    def get(self, garden_id: int) -> Garden:
        """Return the garden with its owners and its beds ordered by name.

        Owners come through a LEFT JOIN, so a garden whose ownership links
        are all gone still resolves, with ``users == []``.

        Raises:
            NotFoundError: If no garden has this id.
        """
        summaries = self.engine.fetch_all("garden.get", (garden_id,), mapper=self.mapper)
        if not summaries:
            raise NotFoundError("garden", garden_id)

        beds = self.engine.fetch_all("bed.list_by_garden", (garden_id,), mapper=_BED_MAPPER)
        return _with_beds(summaries[0], beds)

    def find_all(self, username: str) -> list[GardenSummary]:
        """Every garden *username* co-owns, each with all of its owners."""
        return self.engine.fetch_all("garden.find_all_by_user", (username,), mapper=self.mapper)

    def update(self, garden_id: int, data: Mapping[str, Any]) -> GardenRecord:
        """Partially update name and/or description.

        Raises:
            BadRequestError: If *data* is empty or names another field.
            NotFoundError: If no garden has this id.
        """
        sql, params = _update_query(garden_id, data)
        garden = self.engine.fetch_one(sql, params, mapper=_RECORD_MAPPER)
        if garden is None:
            raise NotFoundError("garden", garden_id)
        return garden

    def remove(self, garden_id: int) -> GardenRef:
        """Delete the garden row; beds and ownership links follow the schema's FK rules."""
        garden = self.engine.fetch_one("garden.delete", (garden_id,), mapper=_REF_MAPPER)
        if garden is None:
            raise NotFoundError("garden", garden_id)

        logger.info("Removed garden %s", garden_id)
        return garden


class AsyncGardenRepository(AsyncRepository[GardenSummary]):
    """Async variant of GardenRepository."""

    def __init__(self, engine: AsyncQueryExecutor) -> None:
        super().__init__(engine, mapping=GARDEN_SUMMARY_PLAN)

    async def create(
        self, username: str, name: str, description: str | None = None
    ) -> CreatedGarden:
        async with self.engine.transaction() as tx:
            row = await tx.fetch_one("garden.insert", (name, description))
            garden_id = row["id"]
            await tx.execute("users_gardens.insert", (username, garden_id))

        logger.info("Created garden %s", garden_id)
        return _created(garden_id, name, description, username)

    async def get(self, garden_id: int) -> Garden:
        summaries = await self.engine.fetch_all("garden.get", (garden_id,), mapper=self.mapper)
        if not summaries:
            raise NotFoundError("garden", garden_id)

        beds = await self.engine.fetch_all(
            "bed.list_by_garden", (garden_id,), mapper=_BED_MAPPER
        )
        return _with_beds(summaries[0], beds)

    async def find_all(self, username: str) -> list[GardenSummary]:
        return await self.engine.fetch_all(
            "garden.find_all_by_user", (username,), mapper=self.mapper
        )

    async def update(self, garden_id: int, data: Mapping[str, Any]) -> GardenRecord:
        sql, params = _update_query(garden_id, data)
        garden = await self.engine.fetch_one(sql, params, mapper=_RECORD_MAPPER)
        if garden is None:
            raise NotFoundError("garden", garden_id)
        return garden

    async def remove(self, garden_id: int) -> GardenRef:
        garden = await self.engine.fetch_one("garden.delete", (garden_id,), mapper=_REF_MAPPER)
        if garden is None:
            raise NotFoundError("garden", garden_id)

        logger.info("Removed garden %s", garden_id)
        return garden
