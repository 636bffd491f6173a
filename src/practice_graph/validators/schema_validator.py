"""Whole-catalog validation.

Runs every check against a raw ``{practices, dependencies, metadata}``
document and merges the results into one ValidationReport. No check is
skipped because an earlier one failed; each only inspects the parts of the
document it can safely read.

Order of checks:
1. Top-level structure
2. Per-practice fields
3. Duplicate practice ids
4. Per-dependency fields
5. Dependency references to existing practices
6. Duplicate dependency edges
7. Circular dependencies
8. Metadata
9. At least one root practice
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from practice_graph.graph import find_circular_dependencies
from practice_graph.models import VALID_CATEGORIES, VALID_TYPES
from practice_graph.validators.base import (
    CATEGORY_CIRCULAR_DEPENDENCIES,
    CATEGORY_DEPENDENCIES,
    CATEGORY_DUPLICATE_DEPENDENCIES,
    CATEGORY_DUPLICATE_PRACTICES,
    CATEGORY_METADATA,
    CATEGORY_PRACTICES,
    CATEGORY_ROOT_PRACTICE,
    CATEGORY_SCHEMA,
    FieldValidationResult,
    ReferenceValidationResult,
    RootPolicy,
    ValidationReport,
    ValidationSummary,
)
from practice_graph.validators.dependency_validator import (
    find_duplicate_dependencies,
    validate_dependency,
)
from practice_graph.validators.metadata_validator import (
    DEFAULT_MAX_FUTURE_DAYS,
    DEFAULT_MIN_YEAR,
    validate_metadata,
)
from practice_graph.validators.practice_validator import validate_practice

logger = logging.getLogger(__name__)


def _is_array(value: object) -> bool:
    return isinstance(value, (list, tuple))


def _practice_label(practice: object, index: int) -> str:
    if isinstance(practice, Mapping) and isinstance(practice.get("id"), str) and practice["id"]:
        return f"Practice '{practice['id']}' (index {index})"
    return f"Practice at index {index}"


def _format_field_errors(label: str, errors: Mapping[str, str]) -> list[str]:
    return [f"{label}: {message}" for message in errors.values()]


def validate_schema_structure(schema: object) -> FieldValidationResult:
    """Check the top-level shape of a catalog document.

    ``practices`` must be a non-empty array, ``dependencies`` an array
    (possibly empty) and ``metadata`` an object. All three are checked.
    """
    if not isinstance(schema, Mapping):
        return FieldValidationResult(
            is_valid=False,
            errors={CATEGORY_SCHEMA: "Schema must be an object"},
        )

    errors: dict[str, str] = {}

    practices = schema.get("practices")
    if practices is None:
        errors["practices"] = "practices field is required"
    elif not _is_array(practices):
        errors["practices"] = "practices must be an array"
    elif len(practices) == 0:
        errors["practices"] = "practices must contain at least one practice"

    dependencies = schema.get("dependencies")
    if dependencies is None:
        errors["dependencies"] = "dependencies field is required"
    elif not _is_array(dependencies):
        errors["dependencies"] = "dependencies must be an array"

    metadata = schema.get("metadata")
    if metadata is None:
        errors["metadata"] = "metadata field is required"
    elif not isinstance(metadata, Mapping):
        errors["metadata"] = "metadata must be an object"

    return FieldValidationResult(is_valid=not errors, errors=errors)


def find_duplicate_practice_ids(practices: Sequence[Any]) -> list[str]:
    """Return every practice id that occurs more than once, each listed once."""
    counts = Counter(
        practice["id"]
        for practice in practices
        if isinstance(practice, Mapping) and isinstance(practice.get("id"), str)
    )
    return [practice_id for practice_id, count in counts.items() if count > 1]


def validate_practice_ids(practices: Sequence[Any]) -> ReferenceValidationResult:
    """Report duplicate practice ids as error messages."""
    errors = [
        f"Duplicate practice ID: '{practice_id}'"
        for practice_id in find_duplicate_practice_ids(practices)
    ]
    return ReferenceValidationResult(is_valid=not errors, errors=errors)


def validate_dependencies_against_practices(
    dependencies: Sequence[Any], practices: Sequence[Any]
) -> ReferenceValidationResult:
    """Check that every edge names practices present in the catalog.

    Each unknown id is reported with the edge it appears in; all problems
    are collected.
    """
    known_ids = {
        practice["id"]
        for practice in practices
        if isinstance(practice, Mapping) and isinstance(practice.get("id"), str)
    }
    errors: list[str] = []

    for index, dependency in enumerate(dependencies):
        if not isinstance(dependency, Mapping):
            continue
        for key in ("practice_id", "depends_on_id"):
            value = dependency.get(key)
            if isinstance(value, str) and value.strip() and value not in known_ids:
                errors.append(
                    f"Dependency at index {index}: {key} '{value}' references "
                    f"non-existent practice"
                )

    return ReferenceValidationResult(is_valid=not errors, errors=errors)


def find_root_practices(practices: Sequence[Any]) -> list[str]:
    """Ids of the entries whose type is ``root``."""
    return [
        practice.get("id")
        for practice in practices
        if isinstance(practice, Mapping) and practice.get("type") == "root"
    ]


def validate_schema(
    schema: object,
    *,
    root_policy: RootPolicy = "error",
    today: date | None = None,
    min_year: int = DEFAULT_MIN_YEAR,
    max_future_days: int = DEFAULT_MAX_FUTURE_DAYS,
) -> ValidationReport:
    """Validate a complete catalog document.

    Args:
        schema: Raw catalog, usually parsed from JSON.
        root_policy: "error" to fail catalogs without a root practice,
            "warning" to only warn about them.
        today: Reference date for the metadata date range.
        min_year: Earliest accepted metadata year.
        max_future_days: Accepted metadata dates into the future.

    Returns:
        ValidationReport; never raises for malformed input.
    """
    errors: dict[str, list[str]] = {}
    warnings: list[str] = []

    def add(category: str, messages: Sequence[str]) -> None:
        if messages:
            errors.setdefault(category, []).extend(messages)

    structure = validate_schema_structure(schema)
    if not isinstance(schema, Mapping):
        logger.debug("Catalog is not an object; skipping remaining checks")
        return ValidationReport(
            is_valid=False,
            errors={CATEGORY_SCHEMA: [structure.errors[CATEGORY_SCHEMA]]},
        )
    for category, message in structure.errors.items():
        add(category, [message])

    practices = schema.get("practices")
    practices = practices if _is_array(practices) else []
    dependencies = schema.get("dependencies")
    dependencies = dependencies if _is_array(dependencies) else []

    logger.debug("Validating %d practices", len(practices))
    for index, practice in enumerate(practices):
        result = validate_practice(practice)
        if not result.is_valid:
            label = _practice_label(practice, index)
            add(CATEGORY_PRACTICES, _format_field_errors(label, result.errors))

    add(CATEGORY_DUPLICATE_PRACTICES, validate_practice_ids(practices).errors)

    logger.debug("Validating %d dependencies", len(dependencies))
    for index, dependency in enumerate(dependencies):
        result = validate_dependency(dependency)
        if not result.is_valid:
            add(
                CATEGORY_DEPENDENCIES,
                _format_field_errors(f"Dependency at index {index}", result.errors),
            )

    references = validate_dependencies_against_practices(dependencies, practices)
    add(CATEGORY_DEPENDENCIES, references.errors)

    add(
        CATEGORY_DUPLICATE_DEPENDENCIES,
        [
            f"Duplicate dependency: '{dup['practice_id']}' -> '{dup['depends_on_id']}'"
            for dup in find_duplicate_dependencies(dependencies)
        ],
    )

    add(
        CATEGORY_CIRCULAR_DEPENDENCIES,
        [
            f"Circular dependency: {' -> '.join(cycle)}"
            for cycle in find_circular_dependencies(dependencies)
        ],
    )

    metadata = schema.get("metadata")
    if isinstance(metadata, Mapping):
        metadata_result = validate_metadata(
            metadata, today=today, min_year=min_year, max_future_days=max_future_days
        )
        add(CATEGORY_METADATA, _format_field_errors("Metadata", metadata_result.errors))

    if practices and not find_root_practices(practices):
        message = "Catalog must contain at least one practice with type 'root'"
        if root_policy == "error":
            add(CATEGORY_ROOT_PRACTICE, [message])
        else:
            warnings.append(message)

    report = ValidationReport(is_valid=not errors, errors=errors, warnings=warnings)
    if not report.is_valid:
        logger.debug("Catalog invalid; error categories: %s", ", ".join(report.error_categories))
    return report


def build_summary(schema: object) -> ValidationSummary:
    """Count practices and dependencies, tolerating partially invalid data.

    Known types and categories are always present in the histograms; other
    string values are counted under their own name.
    """
    practices: Sequence[Any] = []
    dependencies: Sequence[Any] = []
    if isinstance(schema, Mapping):
        if _is_array(schema.get("practices")):
            practices = schema["practices"]
        if _is_array(schema.get("dependencies")):
            dependencies = schema["dependencies"]

    by_type: dict[str, int] = {name: 0 for name in VALID_TYPES}
    by_category: dict[str, int] = {name: 0 for name in VALID_CATEGORIES}
    for practice in practices:
        if not isinstance(practice, Mapping):
            continue
        practice_type = practice.get("type")
        if isinstance(practice_type, str):
            by_type[practice_type] = by_type.get(practice_type, 0) + 1
        category = practice.get("category")
        if isinstance(category, str):
            by_category[category] = by_category.get(category, 0) + 1

    return ValidationSummary(
        total_practices=len(practices),
        total_dependencies=len(dependencies),
        practices_by_type=by_type,
        practices_by_category=by_category,
    )


def validate_full_schema(
    schema: object,
    *,
    root_policy: RootPolicy = "error",
    today: date | None = None,
    min_year: int = DEFAULT_MIN_YEAR,
    max_future_days: int = DEFAULT_MAX_FUTURE_DAYS,
) -> ValidationReport:
    """Run validate_schema and attach a summary, even for invalid catalogs."""
    report = validate_schema(
        schema,
        root_policy=root_policy,
        today=today,
        min_year=min_year,
        max_future_days=max_future_days,
    )
    report.summary = build_summary(schema)
    return report
