"""Flat row-to-object mapper."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from garden_store.core.exceptions import ColumnMismatchError

T = TypeVar("T")


class ModelMapper(Generic[T]):
    """Build one ``target_class`` instance per row, columns as keyword arguments.

    Column names must match the constructor's parameters exactly.
    """

    def __init__(self, target_class: type[T]) -> None:
        self._target_class = target_class

    def map_one(self, row: dict[str, Any]) -> T:
        try:
            return self._target_class(**row)
        except TypeError as e:
            raise ColumnMismatchError(self._target_class.__name__, str(e)) from e

    def map_many(self, rows: list[dict[str, Any]]) -> list[T]:
        return [self.map_one(row) for row in rows]
