"""garden_store exception hierarchy.

Only errors synthesized by this package live here. Driver exceptions
(connectivity, constraint violations) are never wrapped and reach the
caller unchanged.
"""

from __future__ import annotations

from typing import Any


class GardenStoreError(Exception):
    """Base exception for all garden_store errors."""


# --- Domain ---


class NotFoundError(GardenStoreError):
    """Raised when a lookup, update or delete targets a missing row."""

    status_code = 404

    def __init__(self, entity: str, identifier: Any) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"No {entity}: {identifier}")


class BadRequestError(GardenStoreError):
    """Raised when a caller-supplied payload cannot be turned into a query."""

    status_code = 400

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


# --- Registry ---


class RegistryError(GardenStoreError):
    """Base for SQL registry errors."""


class QueryNotFoundError(RegistryError):
    """Raised when a named query cannot be found in the registry."""

    def __init__(self, query_name: str) -> None:
        self.query_name = query_name
        super().__init__(f"Query not found: '{query_name}'")


class DuplicateQueryError(RegistryError):
    """Raised when two SQL files resolve to the same namespace key."""

    def __init__(self, query_name: str, path_a: str, path_b: str) -> None:
        self.query_name = query_name
        super().__init__(f"Duplicate query name '{query_name}': {path_a} and {path_b}")


# --- Execution ---


class ExecutionError(GardenStoreError):
    """Base for query execution errors."""


class MultipleRowsError(ExecutionError):
    """Raised when fetch_one encounters more than one row."""

    def __init__(self, query_name: str, row_count: int) -> None:
        self.query_name = query_name
        self.row_count = row_count
        super().__init__(
            f"fetch_one for '{query_name}' returned {row_count} rows (expected 0 or 1)"
        )


class ParameterBindingError(ExecutionError):
    """Raised when placeholders and supplied values do not line up."""

    def __init__(self, query_name: str, detail: str) -> None:
        self.query_name = query_name
        super().__init__(f"Parameter binding error for '{query_name}': {detail}")


# --- Mapping ---


class MappingError(GardenStoreError):
    """Base for mapping errors."""


class ColumnMismatchError(MappingError):
    """Raised when a row's columns do not fit the target's constructor."""

    def __init__(self, target_class: str, detail: str) -> None:
        self.target_class = target_class
        self.detail = detail
        super().__init__(f"Cannot map row to {target_class}: {detail}")


class StrictModeViolation(MappingError):
    """Raised in strict mode for mapping integrity violations."""


class PlanCompilationError(MappingError):
    """Raised when an AggregatePlan fails validation during build()."""


# --- Transaction ---


class TransactionError(GardenStoreError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction in state '{current_state}'")


# --- Adapter ---


class AdapterError(GardenStoreError):
    """Base for adapter errors."""


class PoolError(AdapterError):
    """Raised when no pooled connection is available."""
