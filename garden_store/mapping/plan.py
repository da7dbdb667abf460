"""Aggregate mapping plan data classes.

Frozen dataclasses produced by the builder and read by AggregateMapper.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EntityPlan:
    """Where one entity's fields live in a joined row."""

    target_class: type
    prefix: str
    key_field: str
    field_map: dict[str, str]  # attribute_name -> column_name (without prefix)


@dataclass(frozen=True)
class ValueListPlan:
    """Mapping plan for a list of scalars drawn from one joined column.

    Typical use is the far side of a join table, e.g. the usernames that
    co-own a garden.
    """

    attribute_name: str
    prefix: str
    column: str

    @property
    def full_column(self) -> str:
        return self.prefix + self.column


@dataclass(frozen=True)
class AggregatePlan:
    """Compiled, validated aggregate mapping plan."""

    root_plan: EntityPlan
    value_list_plans: list[ValueListPlan] = field(default_factory=list)
    strict: bool = False
