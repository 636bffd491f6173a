"""Field-level validation for a single practice entry."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from practice_graph.models import (
    VALID_CATEGORIES,
    VALID_TYPES,
    Practice,
    PracticeCategory,
    PracticeType,
)
from practice_graph.validators.base import (
    FieldValidationResult,
    PracticeValidationResult,
    is_non_empty_string,
    is_non_empty_string_list,
)


def is_valid_practice_id(value: object) -> bool:
    return is_non_empty_string(value)


def is_valid_practice_name(value: object) -> bool:
    return is_non_empty_string(value)


def is_valid_practice_type(value: object) -> bool:
    """Case-sensitive membership check against the known practice types."""
    return isinstance(value, str) and value in VALID_TYPES


def is_valid_practice_category(value: object) -> bool:
    """Case-sensitive membership check against the known categories."""
    return isinstance(value, str) and value in VALID_CATEGORIES


def is_valid_practice_description(value: object) -> bool:
    return is_non_empty_string(value)


def is_valid_requirements(value: object) -> bool:
    return is_non_empty_string_list(value)


def is_valid_benefits(value: object) -> bool:
    return is_non_empty_string_list(value)


def validate_practice_fields(practice: Mapping[str, Any]) -> FieldValidationResult:
    """Check every practice field and report all violations together.

    Args:
        practice: Raw practice mapping.

    Returns:
        FieldValidationResult keyed by field name.
    """
    errors: dict[str, str] = {}

    if not is_valid_practice_id(practice.get("id")):
        errors["id"] = "Practice ID is required and must be a non-empty string"

    if not is_valid_practice_name(practice.get("name")):
        errors["name"] = "Practice name is required and must be a non-empty string"

    if not is_valid_practice_type(practice.get("type")):
        errors["type"] = f"Practice type is required and must be one of: {', '.join(VALID_TYPES)}"

    if not is_valid_practice_category(practice.get("category")):
        errors["category"] = (
            f"Practice category is required and must be one of: {', '.join(VALID_CATEGORIES)}"
        )

    if not is_valid_practice_description(practice.get("description")):
        errors["description"] = "Practice description is required and must be a non-empty string"

    if not is_valid_requirements(practice.get("requirements")):
        errors["requirements"] = (
            "Practice requirements are required and must be a non-empty array of non-empty strings"
        )

    if not is_valid_benefits(practice.get("benefits")):
        errors["benefits"] = (
            "Practice benefits are required and must be a non-empty array of non-empty strings"
        )

    return FieldValidationResult(is_valid=not errors, errors=errors)


def validate_practice(candidate: object) -> PracticeValidationResult:
    """Validate a raw practice and convert it to a Practice.

    The input is never modified. Lists are copied into tuples on the
    returned Practice, so later changes to the caller's data do not leak in.

    Args:
        candidate: Anything; typically one element of the ``practices`` array.

    Returns:
        PracticeValidationResult with ``practice`` set only when valid.
    """
    if not isinstance(candidate, Mapping):
        return PracticeValidationResult(
            is_valid=False,
            errors={"practice": "Practice must be an object"},
        )

    fields_result = validate_practice_fields(candidate)
    if not fields_result.is_valid:
        return PracticeValidationResult(is_valid=False, errors=fields_result.errors)

    practice = Practice(
        id=candidate["id"],
        name=candidate["name"],
        type=PracticeType(candidate["type"]),
        category=PracticeCategory(candidate["category"]),
        description=candidate["description"],
        requirements=tuple(candidate["requirements"]),
        benefits=tuple(candidate["benefits"]),
    )
    return PracticeValidationResult(is_valid=True, errors={}, practice=practice)


def parse_practices(candidates: Sequence[Any]) -> list[Practice]:
    """Return the valid entries of a raw practices array as Practice objects."""
    parsed: list[Practice] = []
    for candidate in candidates:
        result = validate_practice(candidate)
        if result.practice is not None:
            parsed.append(result.practice)
    return parsed
