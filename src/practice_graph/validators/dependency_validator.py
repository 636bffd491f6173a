"""Validation for dependency edges between practices."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from practice_graph.models import Dependency
from practice_graph.validators.base import FieldValidationResult, is_non_empty_string


def is_valid_dependency_ids(dependency: object) -> bool:
    """Return True when both edge endpoints are non-empty strings."""
    if not isinstance(dependency, Mapping):
        return False
    return is_non_empty_string(dependency.get("practice_id")) and is_non_empty_string(
        dependency.get("depends_on_id")
    )


def has_self_reference(dependency: Mapping[str, Any]) -> bool:
    """Return True when an edge points back at its own practice (case-sensitive)."""
    return dependency.get("practice_id") == dependency.get("depends_on_id")


def validate_dependency(candidate: object) -> FieldValidationResult:
    """Validate a single raw dependency edge.

    Presence and type problems are reported under the offending field name.
    A well-formed edge whose endpoints are equal is reported under
    ``selfReference`` so callers can tell malformed data apart from a broken
    business rule.
    """
    if not isinstance(candidate, Mapping):
        return FieldValidationResult(
            is_valid=False,
            errors={"dependency": "Dependency must be an object"},
        )

    errors: dict[str, str] = {}

    if not is_non_empty_string(candidate.get("practice_id")):
        errors["practice_id"] = "practice_id is required and must be a non-empty string"

    if not is_non_empty_string(candidate.get("depends_on_id")):
        errors["depends_on_id"] = "depends_on_id is required and must be a non-empty string"

    if not errors and has_self_reference(candidate):
        errors["selfReference"] = (
            f"Practice '{candidate['practice_id']}' cannot depend on itself"
        )

    return FieldValidationResult(is_valid=not errors, errors=errors)


def find_duplicate_dependencies(dependencies: Sequence[Any]) -> list[dict[str, str]]:
    """Find edges that occur more than once.

    Each duplicated ``(practice_id, depends_on_id)`` pair is returned once,
    in the order its second occurrence was seen. Malformed edges are skipped.
    """
    seen: set[tuple[str, str]] = set()
    reported: set[tuple[str, str]] = set()
    duplicates: list[dict[str, str]] = []

    for dependency in dependencies:
        if not is_valid_dependency_ids(dependency):
            continue
        pair = (dependency["practice_id"], dependency["depends_on_id"])
        if pair in seen and pair not in reported:
            reported.add(pair)
            duplicates.append({"practice_id": pair[0], "depends_on_id": pair[1]})
        seen.add(pair)

    return duplicates


def get_all_dependencies_for_practice(
    practice_id: str, dependencies: Sequence[Any]
) -> list[str]:
    """Return the unique direct dependencies of a practice in edge order."""
    result: list[str] = []
    for dependency in dependencies:
        if not is_valid_dependency_ids(dependency):
            continue
        if dependency["practice_id"] == practice_id and dependency["depends_on_id"] not in result:
            result.append(dependency["depends_on_id"])
    return result


def parse_dependencies(candidates: Sequence[Any]) -> list[Dependency]:
    """Return the valid edges of a raw dependencies array as Dependency objects."""
    parsed: list[Dependency] = []
    for candidate in candidates:
        if validate_dependency(candidate).is_valid:
            parsed.append(
                Dependency(
                    practice_id=candidate["practice_id"],
                    depends_on_id=candidate["depends_on_id"],
                )
            )
    return parsed
