"""Cursor-to-dict conversion shared by engines and transactions."""

from __future__ import annotations

from typing import Any


def _to_dicts(columns: list[str], rows: list[Any]) -> list[dict[str, Any]]:
    if not rows:
        return []

    # Already dict-like (e.g. psycopg dict_row)
    if isinstance(rows[0], dict):
        return [dict(row) for row in rows]

    # Tuple-like rows (sqlite3.Row included), zip with columns
    return [dict(zip(columns, row, strict=True)) for row in rows]


def rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Drain a sync cursor into a list of dicts.

    Statements without a result set (plain INSERT/UPDATE/DELETE) yield ``[]``.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    return _to_dicts(columns, cursor.fetchall())


async def rows_to_dicts_async(cursor: Any) -> list[dict[str, Any]]:
    """Async counterpart of :func:`rows_to_dicts`."""
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    return _to_dicts(columns, await cursor.fetchall())
