"""garden_store - data access for the shared-garden aggregate."""

from __future__ import annotations

from garden_store.core.connection import (
    AsyncConnectionManager,
    ConnectionConfig,
    ConnectionManager,
)
from garden_store.core.engine import AsyncEngine, Engine
from garden_store.core.enums import DatabaseBackend
from garden_store.core.exceptions import (
    AdapterError,
    BadRequestError,
    ColumnMismatchError,
    DuplicateQueryError,
    ExecutionError,
    GardenStoreError,
    MappingError,
    MultipleRowsError,
    NotFoundError,
    ParameterBindingError,
    PlanCompilationError,
    PoolError,
    QueryNotFoundError,
    RegistryError,
    StrictModeViolation,
    TransactionError,
    TransactionStateError,
)
from garden_store.core.partial_update import PartialUpdate, sql_for_partial_update
from garden_store.core.registry import DEFAULT_SQL_DIR, SQLRegistry
from garden_store.core.transaction import AsyncTransactionManager, TransactionManager
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
from garden_store.repository.garden import AsyncGardenRepository, GardenRepository

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    "AsyncConnectionManager",
    # Engine
    "Engine",
    "AsyncEngine",
    # Registry
    "SQLRegistry",
    "DEFAULT_SQL_DIR",
    # Transaction
    "TransactionManager",
    "AsyncTransactionManager",
    # Partial updates
    "PartialUpdate",
    "sql_for_partial_update",
    # Mapping
    "ModelMapper",
    # Garden aggregate
    "GardenRepository",
    "AsyncGardenRepository",
    "CreatedGarden",
    "Garden",
    "GardenSummary",
    "GardenRecord",
    "GardenRef",
    "GardenField",
    "Bed",
    # Enums
    "DatabaseBackend",
    # Exceptions
    "GardenStoreError",
    "NotFoundError",
    "BadRequestError",
    "RegistryError",
    "QueryNotFoundError",
    "DuplicateQueryError",
    "ExecutionError",
    "MultipleRowsError",
    "ParameterBindingError",
    "MappingError",
    "ColumnMismatchError",
    "StrictModeViolation",
    "PlanCompilationError",
    "TransactionError",
    "TransactionStateError",
    "AdapterError",
    "PoolError",
]
