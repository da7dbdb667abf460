"""Mapping layer - transform row dicts into typed objects."""

from __future__ import annotations

from garden_store.mapping.aggregate import AggregateMapper
from garden_store.mapping.builder import AggregateMappingBuilder, aggregate
from garden_store.mapping.model import ModelMapper
from garden_store.mapping.plan import AggregatePlan, EntityPlan, ValueListPlan

__all__ = [
    "ModelMapper",
    "AggregateMapper",
    "AggregateMappingBuilder",
    "aggregate",
    "AggregatePlan",
    "EntityPlan",
    "ValueListPlan",
]
