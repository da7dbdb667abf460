"""Fluent builder for aggregate mapping plans.

    plan = (
        aggregate(GardenSummary, prefix="garden__")
        .key("id")
        .auto_fields()
        .values("users", column="username", prefix="owner__")
        .build()
    )
"""

from __future__ import annotations

import dataclasses

from garden_store.core.exceptions import PlanCompilationError
from garden_store.mapping.plan import AggregatePlan, EntityPlan, ValueListPlan


def aggregate(root_class: type, prefix: str | None = None) -> AggregateMappingBuilder:
    """Start a plan for the dataclass ``root_class``.

    ``prefix`` defaults to the lowercased class name plus ``"__"``.
    """
    return AggregateMappingBuilder(root_class, prefix or f"{root_class.__name__.lower()}__")


class AggregateMappingBuilder:
    """Collects mapping declarations; ``build()`` validates and freezes them."""

    def __init__(self, root_class: type, prefix: str) -> None:
        self._root_class = root_class
        self._prefix = prefix
        self._key: str | None = None
        self._explicit: dict[str, str] = {}
        self._auto = False
        self._value_lists: list[ValueListPlan] = []
        self._strict = False

    def key(self, field_name: str) -> AggregateMappingBuilder:
        self._key = field_name
        return self

    def auto_fields(self) -> AggregateMappingBuilder:
        """Map every root field to a column of the same name."""
        self._auto = True
        return self

    def field(self, attr_name: str, column_name: str | None = None) -> AggregateMappingBuilder:
        self._explicit[attr_name] = column_name or attr_name
        return self

    def values(self, name: str, column: str, prefix: str) -> AggregateMappingBuilder:
        """Attach a list of scalars read from ``prefix + column``.

        Values are deduplicated per root in first-seen order; NULLs
        (e.g. from a LEFT JOIN with no match) are skipped.
        """
        self._value_lists.append(ValueListPlan(attribute_name=name, prefix=prefix, column=column))
        return self

    def strict(self, enabled: bool = True) -> AggregateMappingBuilder:
        self._strict = enabled
        return self

    def _root_field_map(self) -> dict[str, str]:
        field_map = dict(self._explicit)
        if not self._auto:
            return field_map
        if not dataclasses.is_dataclass(self._root_class):
            raise PlanCompilationError(
                f"auto_fields() needs a dataclass, got {self._root_class.__name__}"
            )

        # List attributes are filled by value lists, not columns
        filled = {v.attribute_name for v in self._value_lists}
        for f in dataclasses.fields(self._root_class):
            if f.name not in filled:
                field_map.setdefault(f.name, f.name)
        return field_map

    def _check_prefixes(self) -> None:
        claimed = {self._prefix}
        for plan in self._value_lists:
            if plan.prefix in claimed:
                raise PlanCompilationError(
                    f"Duplicate prefix '{plan.prefix}': each group must have a unique prefix"
                )
            claimed.add(plan.prefix)

    def build(self) -> AggregatePlan:
        """Validate the declarations and return an immutable AggregatePlan.

        Raises:
            PlanCompilationError: No key set, key not mapped, or two groups
                sharing a prefix.
        """
        if self._key is None:
            raise PlanCompilationError("Root entity must have a key field set via .key()")

        field_map = self._root_field_map()
        if self._key not in field_map:
            raise PlanCompilationError(
                f"Key field '{self._key}' is not mapped on {self._root_class.__name__}"
            )
        self._check_prefixes()

        return AggregatePlan(
            root_plan=EntityPlan(
                target_class=self._root_class,
                prefix=self._prefix,
                key_field=self._key,
                field_map=field_map,
            ),
            value_list_plans=list(self._value_lists),
            strict=self._strict,
        )
