"""Validation for catalog metadata (version, last update date, provenance)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, timedelta

from practice_graph.models import Metadata, SemanticVersion
from practice_graph.validators.base import FieldValidationResult, is_non_empty_string

# Semantic Versioning 2.0.0: numeric identifiers without leading zeros.
SEMVER_PATTERN = re.compile(
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?",
    re.ASCII,
)

DATE_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)

DEFAULT_MIN_YEAR = 2000
DEFAULT_MAX_FUTURE_DAYS = 365

OPTIONAL_FIELDS = ("changelog", "source", "description")


def is_valid_version(value: object) -> bool:
    return isinstance(value, str) and SEMVER_PATTERN.fullmatch(value) is not None


def parse_semantic_version(value: object) -> SemanticVersion | None:
    """Parse a semantic version string.

    Returns:
        SemanticVersion, or None if ``value`` is not a valid version.
    """
    if not isinstance(value, str):
        return None
    match = SEMVER_PATTERN.fullmatch(value)
    if match is None:
        return None
    major, minor, patch, prerelease, build = match.groups()
    return SemanticVersion(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        prerelease=prerelease,
        build=build,
    )


def compare_versions(left: object, right: object) -> int | None:
    """Compare two semantic versions.

    Build metadata is ignored. A pre-release sorts before the matching
    release; two pre-releases are compared as plain strings.

    Returns:
        -1, 0 or 1, or None if either version is invalid.
    """
    a = parse_semantic_version(left)
    b = parse_semantic_version(right)
    if a is None or b is None:
        return None

    for x, y in ((a.major, b.major), (a.minor, b.minor), (a.patch, b.patch)):
        if x != y:
            return 1 if x > y else -1

    if a.prerelease == b.prerelease:
        return 0
    if a.prerelease is None:
        return 1
    if b.prerelease is None:
        return -1
    return 1 if a.prerelease > b.prerelease else -1


def _parse_date(value: object) -> date | None:
    if not isinstance(value, str):
        return None
    match = DATE_PATTERN.fullmatch(value)
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def is_valid_date_format(value: object) -> bool:
    """Return True for a calendar-valid ``YYYY-MM-DD`` string."""
    return _parse_date(value) is not None


def is_valid_date(
    value: object,
    *,
    today: date | None = None,
    min_year: int = DEFAULT_MIN_YEAR,
    max_future_days: int = DEFAULT_MAX_FUTURE_DAYS,
) -> bool:
    """Return True for a valid date inside the accepted range.

    Args:
        value: Candidate ``YYYY-MM-DD`` string.
        today: Reference date for the upper bound. Defaults to date.today().
        min_year: Earliest accepted year.
        max_future_days: How far past ``today`` a date may lie.
    """
    parsed = _parse_date(value)
    if parsed is None:
        return False
    reference = today or date.today()
    return date(min_year, 1, 1) <= parsed <= reference + timedelta(days=max_future_days)


def validate_metadata(
    candidate: object,
    *,
    today: date | None = None,
    min_year: int = DEFAULT_MIN_YEAR,
    max_future_days: int = DEFAULT_MAX_FUTURE_DAYS,
) -> FieldValidationResult:
    """Validate catalog metadata.

    ``version`` and ``lastUpdated`` are required. ``changelog``, ``source``
    and ``description`` may be absent but must not be blank when present.
    """
    if not isinstance(candidate, Mapping):
        return FieldValidationResult(
            is_valid=False,
            errors={"metadata": "Metadata must be an object"},
        )

    errors: dict[str, str] = {}

    version = candidate.get("version")
    if version is None or version == "":
        errors["version"] = "version is required"
    elif not is_valid_version(version):
        errors["version"] = "version must be a valid semantic version (e.g., 1.0.0)"

    last_updated = candidate.get("lastUpdated")
    if last_updated is None or last_updated == "":
        errors["lastUpdated"] = "lastUpdated is required"
    elif not is_valid_date_format(last_updated):
        errors["lastUpdated"] = "lastUpdated must be a valid date in YYYY-MM-DD format"
    elif not is_valid_date(
        last_updated, today=today, min_year=min_year, max_future_days=max_future_days
    ):
        errors["lastUpdated"] = (
            f"lastUpdated must be a date between {min_year}-01-01 "
            f"and {max_future_days} days from today"
        )

    for name in OPTIONAL_FIELDS:
        value = candidate.get(name)
        if value is not None and not is_non_empty_string(value):
            errors[name] = f"{name} must be a non-empty string when provided"

    return FieldValidationResult(is_valid=not errors, errors=errors)


def parse_metadata(
    candidate: object,
    *,
    today: date | None = None,
    min_year: int = DEFAULT_MIN_YEAR,
    max_future_days: int = DEFAULT_MAX_FUTURE_DAYS,
) -> Metadata | None:
    """Convert raw metadata to a Metadata object, or None if it is invalid."""
    result = validate_metadata(
        candidate, today=today, min_year=min_year, max_future_days=max_future_days
    )
    if not result.is_valid or not isinstance(candidate, Mapping):
        return None
    return Metadata(
        version=candidate["version"],
        last_updated=candidate["lastUpdated"],
        changelog=candidate.get("changelog"),
        source=candidate.get("source"),
        description=candidate.get("description"),
    )
