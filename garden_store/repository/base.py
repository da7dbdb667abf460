"""Repository base classes.

Thin wrappers over an executor + aggregate mapper for aggregate-oriented usage.
Any object with the executor methods below can back a repository; the
bundled ``Engine`` / ``AsyncEngine`` are the usual choice.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager, AbstractContextManager
from typing import Any, Generic, Protocol, TypeVar

from garden_store.mapping.aggregate import AggregateMapper
from garden_store.mapping.plan import AggregatePlan

T = TypeVar("T")


class QueryExecutor(Protocol):
    """Synchronous executor consumed by repositories.

    ``query`` is a registry key or inline SQL with ``$n`` placeholders;
    ``params`` binds them positionally.
    """

    def fetch_one(self, query: str, params: Any = None, *, mapper: Any | None = None) -> Any: ...

    def fetch_all(self, query: str, params: Any = None, *, mapper: Any | None = None) -> Any: ...

    def transaction(self) -> AbstractContextManager[Any]: ...


class AsyncQueryExecutor(Protocol):
    """Asynchronous counterpart of :class:`QueryExecutor`."""

    async def fetch_one(
        self, query: str, params: Any = None, *, mapper: Any | None = None
    ) -> Any: ...

    async def fetch_all(
        self, query: str, params: Any = None, *, mapper: Any | None = None
    ) -> Any: ...

    def transaction(self) -> AbstractAsyncContextManager[Any]: ...


class Repository(Generic[T]):
    """Base repository class.

    Subclasses define concrete data access methods that delegate to
    the executor.
    """

    def __init__(
        self,
        engine: QueryExecutor,
        mapping: AggregatePlan | None = None,
    ) -> None:
        self.engine = engine
        self.mapper: AggregateMapper[T] | None = (
            AggregateMapper(mapping) if mapping is not None else None
        )


class AsyncRepository(Generic[T]):
    """Async variant of Repository."""

    def __init__(
        self,
        engine: AsyncQueryExecutor,
        mapping: AggregatePlan | None = None,
    ) -> None:
        self.engine = engine
        self.mapper: AggregateMapper[T] | None = (
            AggregateMapper(mapping) if mapping is not None else None
        )
