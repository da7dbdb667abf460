"""Partial-update SQL compilation.

Turns a subset of an entity's mutable fields into the ``SET`` part of an
``UPDATE`` statement. Only column identifiers end up in the SQL text;
every value is bound through a ``$n`` placeholder.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from enum import Enum
from typing import Any, NamedTuple

from garden_store.core.exceptions import BadRequestError


class PartialUpdate(NamedTuple):
    """Compiled ``SET`` clause and the values bound to its placeholders."""

    set_clause: str
    values: list[Any]

    @property
    def next_index(self) -> int:
        """First placeholder index not used by the ``SET`` clause."""
        return len(self.values) + 1


def _allowed_names(allowed: Collection[str] | type[Enum]) -> frozenset[str]:
    if isinstance(allowed, type) and issubclass(allowed, Enum):
        return frozenset(str(member.value) for member in allowed)
    return frozenset(allowed)


def sql_for_partial_update(
    data: Mapping[str, Any],
    column_map: Mapping[str, str],
    *,
    allowed: Collection[str] | type[Enum] | None = None,
) -> PartialUpdate:
    """Compile *data* into a parameterized ``SET`` clause.

    Keys are resolved through *column_map*; unmapped keys are used as the
    column name verbatim. Fragments and values keep the iteration order of
    *data*.

    Example::

        >>> sql_for_partial_update({"firstName": "Aliya", "age": 32},
        ...                        {"firstName": "first_name"})
        PartialUpdate(set_clause='first_name = $1, age = $2', values=['Aliya', 32])

    Args:
        data: Field name -> new value. Must not be empty.
        column_map: Field name -> column name overrides.
        allowed: Optional whitelist of field names, given as a collection
            or a ``str``-valued Enum class.

    Raises:
        BadRequestError: If *data* is empty or holds a field outside
            *allowed*.
    """
    if not data:
        raise BadRequestError("No data")

    if allowed is not None:
        names = _allowed_names(allowed)
        for key in data:
            if key not in names:
                raise BadRequestError(f"Unknown field: {key}")

    fragments = []
    for index, key in enumerate(data, start=1):
        name = key.value if isinstance(key, Enum) else key
        fragments.append(f"{column_map.get(name, name)} = ${index}")
    return PartialUpdate(", ".join(fragments), list(data.values()))
