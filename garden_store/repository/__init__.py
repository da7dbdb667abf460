"""Repository layer - aggregate-oriented data access."""

from __future__ import annotations

from garden_store.repository.base import (
    AsyncQueryExecutor,
    AsyncRepository,
    QueryExecutor,
    Repository,
)
from garden_store.repository.garden import AsyncGardenRepository, GardenRepository

__all__ = [
    "Repository",
    "AsyncRepository",
    "QueryExecutor",
    "AsyncQueryExecutor",
    "GardenRepository",
    "AsyncGardenRepository",
]
