"""Domain types for the Continuous Delivery practice catalog.

Raw catalog data arrives as untyped JSON mappings. The validators in
``practice_graph.validators`` are the only path from those mappings to the
frozen dataclasses defined here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Unvalidated input as handed over by the dataset loader.
RawCatalog = Mapping[str, Any]

# practice_id -> ordered list of depends_on_id
AdjacencyMap = dict[str, list[str]]


class PracticeType(str, Enum):
    """Role of a practice in the dependency DAG."""

    PRACTICE = "practice"
    ROOT = "root"


class PracticeCategory(str, Enum):
    """Category of a practice based on the 2015 CD dependency model."""

    AUTOMATION = "automation"
    BEHAVIOR = "behavior"
    BEHAVIOR_ENABLED_AUTOMATION = "behavior-enabled-automation"
    CORE = "core"


VALID_TYPES: tuple[str, ...] = tuple(t.value for t in PracticeType)
VALID_CATEGORIES: tuple[str, ...] = tuple(c.value for c in PracticeCategory)


@dataclass(frozen=True)
class Practice:
    """A validated catalog entry.

    Attributes:
        id: Unique practice identifier, used as the graph node key.
        name: Display name.
        type: Either ``practice`` or ``root``.
        category: One of the four practice categories.
        description: Free-text description.
        requirements: Non-empty ordered requirements.
        benefits: Non-empty ordered benefits.
    """

    id: str
    name: str
    type: PracticeType
    category: PracticeCategory
    description: str
    requirements: tuple[str, ...]
    benefits: tuple[str, ...]

    @property
    def is_root(self) -> bool:
        return self.type is PracticeType.ROOT

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the dataset's JSON shape."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "category": self.category.value,
            "description": self.description,
            "requirements": list(self.requirements),
            "benefits": list(self.benefits),
        }


@dataclass(frozen=True)
class Dependency:
    """A validated ``practice_id -> depends_on_id`` edge."""

    practice_id: str
    depends_on_id: str

    def to_dict(self) -> dict[str, str]:
        return {"practice_id": self.practice_id, "depends_on_id": self.depends_on_id}


@dataclass(frozen=True)
class SemanticVersion:
    """Parsed ``major.minor.patch[-prerelease][+build]`` version."""

    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None


@dataclass(frozen=True)
class Metadata:
    """Catalog provenance information."""

    version: str
    last_updated: str
    changelog: str | None = None
    source: str | None = None
    description: str | None = None
