"""SQL parameter normalization.

Queries are written with PostgreSQL-style positional placeholders
(``$1``, ``$2``, ...). They are translated to the adapter's parameter style
just before execution, skipping anything inside single-quoted literals.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from garden_store.core.exceptions import ParameterBindingError

if TYPE_CHECKING:
    from garden_store.core.registry import SQLRegistry

# Matches $1, $2, ... but not $$ quoting or identifiers containing $
_PARAM_PATTERN = re.compile(r"(?<![\w$])\$(\d+)\b")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")


def normalize_params(
    sql: str,
    params: Sequence[Any],
    paramstyle: str,
    label: str = "<inline>",
) -> tuple[str, tuple[Any, ...]]:
    """Convert ``$n`` placeholders to the target param style.

    Args:
        sql: SQL string with ``$n`` placeholders.
        params: Positional values; ``params[0]`` binds ``$1``.
        paramstyle: Target style - 'numeric' (no conversion), 'qmark'
            (``?n``) or 'format' (``%s``, values in occurrence order).
        label: Query label used in error messages.

    Returns:
        ``(sql, params)`` ready for the driver.

    Raises:
        ParameterBindingError: If a placeholder has no supplied value.
    """
    converted, order = _convert(sql, paramstyle)
    if order and max(order) > len(params):
        raise ParameterBindingError(
            label, f"placeholder ${max(order)} used but only {len(params)} value(s) given"
        )
    if paramstyle == "format":
        return converted, tuple(params[index - 1] for index in order)
    return converted, tuple(params)


@lru_cache(maxsize=256)
def _convert(sql: str, paramstyle: str) -> tuple[str, tuple[int, ...]]:
    """Translate placeholders outside string literals.

    Returns the converted text and the placeholder indices in the order
    they occur.
    """
    order: list[int] = []

    def _replace(match: re.Match[str]) -> str:
        index = int(match.group(1))
        order.append(index)
        if paramstyle == "qmark":
            return f"?{index}"
        if paramstyle == "format":
            return "%s"
        return match.group()

    def _code(segment: str) -> str:
        if paramstyle == "format":
            segment = segment.replace("%", "%%")
        return _PARAM_PATTERN.sub(_replace, segment)

    parts: list[str] = []
    last_end = 0
    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_code(sql[last_end:start]))
        literal = match.group()
        parts.append(literal.replace("%", "%%") if paramstyle == "format" else literal)
        last_end = end

    if last_end < len(sql):
        parts.append(_code(sql[last_end:]))

    return "".join(parts), tuple(order)


def is_raw_sql(query: str) -> bool:
    """Return True if query is an inline SQL string rather than a registry key.

    Registry keys use dot-notation (e.g. ``garden.get``) and never
    contain whitespace.  Any SQL statement will contain at least one space.
    """
    return any(c.isspace() for c in query)


def coerce_params(params: Sequence[Any] | Any | None) -> tuple[Any, ...]:
    """Normalize *params* to a positional tuple.

    * ``None`` -> empty tuple.
    * ``tuple`` / ``list`` -> ``tuple``.
    * Any other scalar (including ``str``) -> single-element tuple.
    """
    if params is None:
        return ()
    if isinstance(params, (tuple, list)):
        return tuple(params)
    return (params,)


def resolve_sql(query: str, registry: SQLRegistry) -> tuple[str, str]:
    """Return ``(sql_text, label)`` for *query*.

    Inline SQL (contains whitespace) is returned as-is with the label
    ``"<inline>"``; anything else is looked up in *registry* by name and
    labelled with that name.
    """
    if is_raw_sql(query):
        return query, "<inline>"
    return registry.get(query), query


def prepare(
    query: str,
    params: Sequence[Any] | Any | None,
    registry: SQLRegistry,
    paramstyle: str,
) -> tuple[str, tuple[Any, ...], str]:
    """Resolve, bind-check and translate *query* in one step.

    Returns ``(sql, params, label)``.
    """
    sql, label = resolve_sql(query, registry)
    sql, bound = normalize_params(sql, coerce_params(params), paramstyle, label)
    return sql, bound, label
