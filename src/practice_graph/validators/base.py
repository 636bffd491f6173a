"""Result models shared by the catalog validators.

Every validator returns one of these dataclasses instead of raising, so a
caller can render all problems with a dataset at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from practice_graph.models import Practice

RootPolicy = Literal["error", "warning"]

# Report categories, used verbatim as keys of ValidationReport.errors.
CATEGORY_SCHEMA = "schema"
CATEGORY_PRACTICES = "practices"
CATEGORY_DUPLICATE_PRACTICES = "duplicatePractices"
CATEGORY_DEPENDENCIES = "dependencies"
CATEGORY_DUPLICATE_DEPENDENCIES = "duplicateDependencies"
CATEGORY_CIRCULAR_DEPENDENCIES = "circularDependencies"
CATEGORY_METADATA = "metadata"
CATEGORY_ROOT_PRACTICE = "rootPractice"


@dataclass
class FieldValidationResult:
    """Outcome of validating a single object field by field.

    Attributes:
        is_valid: True when ``errors`` is empty.
        errors: Mapping of field name (or rule name such as ``selfReference``)
            to a human-readable message.
    """

    is_valid: bool
    errors: dict[str, str] = field(default_factory=dict)


@dataclass
class PracticeValidationResult(FieldValidationResult):
    """Field validation outcome that also carries the parsed practice.

    Attributes:
        practice: The validated Practice, or None when validation failed.
    """

    practice: Practice | None = None


@dataclass
class ReferenceValidationResult:
    """Outcome of a catalog-wide check that yields a list of messages."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class ValidationSummary:
    """Counts derived from a (possibly invalid) catalog."""

    total_practices: int
    total_dependencies: int
    practices_by_type: dict[str, int]
    practices_by_category: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalPractices": self.total_practices,
            "totalDependencies": self.total_dependencies,
            "practicesByType": dict(self.practices_by_type),
            "practicesByCategory": dict(self.practices_by_category),
        }


@dataclass
class ValidationReport:
    """Result of validating a whole catalog.

    Attributes:
        is_valid: Logical AND of every validation step.
        errors: Messages grouped by report category.
        warnings: Non-fatal findings.
        summary: Catalog counts, present on full validation only.
    """

    is_valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    summary: ValidationSummary | None = None

    @property
    def error_categories(self) -> list[str]:
        """Sorted names of the categories that have errors."""
        return sorted(self.errors)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape consumed by the UI."""
        result: dict[str, Any] = {
            "isValid": self.is_valid,
            "errors": {category: list(msgs) for category, msgs in self.errors.items()},
            "warnings": list(self.warnings),
            "errorCategories": self.error_categories,
        }
        if self.summary is not None:
            result["summary"] = self.summary.to_dict()
        return result


def is_non_empty_string(value: object) -> bool:
    """Return True for a string that is not empty after stripping whitespace."""
    return isinstance(value, str) and value.strip() != ""


def is_non_empty_string_list(value: object) -> bool:
    """Return True for a non-empty list whose elements are all non-empty strings."""
    if not isinstance(value, (list, tuple)) or len(value) == 0:
        return False
    return all(is_non_empty_string(item) for item in value)
