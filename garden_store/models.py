"""Garden aggregate view types.

Plain dataclasses; ``dataclasses.asdict`` gives the dict shape handed to a
transport layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class GardenField(str, Enum):
    """Garden columns a partial update may touch."""

    NAME = "name"
    DESCRIPTION = "description"


@dataclass
class Bed:
    id: int
    name: str


@dataclass
class GardenRef:
    """Identity of a removed garden."""

    id: int
    name: str


@dataclass
class GardenRecord:
    """A bare ``gardens`` row."""

    id: int
    name: str
    description: str | None


@dataclass
class GardenSummary(GardenRecord):
    """A garden with its owners, as listed per user."""

    users: list[str] = field(default_factory=list)


@dataclass
class Garden(GardenSummary):
    """The full aggregate: owners plus beds ordered by name."""

    beds: list[Bed] = field(default_factory=list)


@dataclass
class CreatedGarden:
    """Result of creating a garden; ``asdict`` gives ``{"garden": {...}}``."""

    garden: GardenSummary
