"""Aggregate reconstruction mapper.

Single-pass O(n) reconstruction using identity maps: joined rows are
grouped client-side by the root key instead of relying on store-specific
aggregate functions such as ``json_agg``.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from garden_store.core.exceptions import StrictModeViolation
from garden_store.mapping.plan import AggregatePlan

T = TypeVar("T")


class AggregateMapper(Generic[T]):
    """Rebuild aggregates from the rows of one joined query.

    Roots keep the order in which their key first appears; each value list
    keeps first-seen order with duplicates and NULLs dropped.
    """

    def __init__(self, plan: AggregatePlan) -> None:
        self._plan = plan

    def map_many(self, rows: list[dict[str, Any]]) -> list[T]:
        if not rows:
            return []

        plan = self._plan
        root_plan = plan.root_plan
        if plan.strict:
            self._validate_strict(rows[0])

        key_column = root_plan.prefix + root_plan.key_field
        roots: dict[Any, Any] = {}
        # root key -> attribute name -> values already attached
        seen: dict[Any, dict[str, set[Any]]] = {}

        for row in rows:
            root_key = row.get(key_column)
            if root_key is None:
                continue

            root = roots.get(root_key)
            if root is None:
                fields = {
                    attr: row.get(root_plan.prefix + column)
                    for attr, column in root_plan.field_map.items()
                }
                fields.update((vl.attribute_name, []) for vl in plan.value_list_plans)
                root = roots[root_key] = root_plan.target_class(**fields)
                seen[root_key] = {vl.attribute_name: set() for vl in plan.value_list_plans}

            for vl in plan.value_list_plans:
                value = row.get(vl.full_column)
                attached = seen[root_key][vl.attribute_name]
                if value is None or value in attached:
                    continue
                getattr(root, vl.attribute_name).append(value)
                attached.add(value)

        # dicts keep insertion order, i.e. first appearance
        return list(roots.values())

    def _validate_strict(self, sample_row: dict[str, Any]) -> None:
        """Check the first row against the plan's columns and prefixes."""
        row_columns = set(sample_row)
        plan = self._plan
        root_plan = plan.root_plan

        for attr_name, col_name in root_plan.field_map.items():
            full_col = root_plan.prefix + col_name
            if full_col not in row_columns:
                raise StrictModeViolation(
                    f"Missing mapped column '{full_col}' for root "
                    f"field '{attr_name}' in {root_plan.target_class.__name__}"
                )

        for vl in plan.value_list_plans:
            if vl.full_column not in row_columns:
                raise StrictModeViolation(
                    f"Missing mapped column '{vl.full_column}' for value list "
                    f"'{vl.attribute_name}'"
                )

        known_prefixes = {root_plan.prefix, *(vl.prefix for vl in plan.value_list_plans)}
        for col in row_columns:
            if "__" in col:
                prefix = col[: col.index("__") + 2]
                if prefix not in known_prefixes:
                    raise StrictModeViolation(
                        f"Unknown prefix group '{prefix}' in column '{col}'. "
                        f"Known prefixes: {sorted(known_prefixes)}"
                    )
