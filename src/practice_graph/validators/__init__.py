"""Validation for Continuous Delivery practice catalogs.

Provides entity validators for practices, dependencies and metadata, and
the schema validator that combines them into a single report.
"""

from __future__ import annotations

from practice_graph.validators.base import (
    FieldValidationResult,
    PracticeValidationResult,
    ReferenceValidationResult,
    RootPolicy,
    ValidationReport,
    ValidationSummary,
)
from practice_graph.validators.dependency_validator import (
    find_duplicate_dependencies,
    get_all_dependencies_for_practice,
    has_self_reference,
    is_valid_dependency_ids,
    parse_dependencies,
    validate_dependency,
)
from practice_graph.validators.metadata_validator import (
    compare_versions,
    is_valid_date,
    is_valid_date_format,
    is_valid_version,
    parse_metadata,
    parse_semantic_version,
    validate_metadata,
)
from practice_graph.validators.practice_validator import (
    is_valid_benefits,
    is_valid_practice_category,
    is_valid_practice_description,
    is_valid_practice_id,
    is_valid_practice_name,
    is_valid_practice_type,
    is_valid_requirements,
    parse_practices,
    validate_practice,
    validate_practice_fields,
)
from practice_graph.validators.schema_validator import (
    build_summary,
    find_duplicate_practice_ids,
    find_root_practices,
    validate_dependencies_against_practices,
    validate_full_schema,
    validate_practice_ids,
    validate_schema,
    validate_schema_structure,
)

__all__ = [
    # Result types
    "FieldValidationResult",
    "PracticeValidationResult",
    "ReferenceValidationResult",
    "RootPolicy",
    "ValidationReport",
    "ValidationSummary",
    # Practice
    "is_valid_benefits",
    "is_valid_practice_category",
    "is_valid_practice_description",
    "is_valid_practice_id",
    "is_valid_practice_name",
    "is_valid_practice_type",
    "is_valid_requirements",
    "parse_practices",
    "validate_practice",
    "validate_practice_fields",
    # Dependency
    "find_duplicate_dependencies",
    "get_all_dependencies_for_practice",
    "has_self_reference",
    "is_valid_dependency_ids",
    "parse_dependencies",
    "validate_dependency",
    # Metadata
    "compare_versions",
    "is_valid_date",
    "is_valid_date_format",
    "is_valid_version",
    "parse_metadata",
    "parse_semantic_version",
    "validate_metadata",
    # Schema
    "build_summary",
    "find_duplicate_practice_ids",
    "find_root_practices",
    "validate_dependencies_against_practices",
    "validate_full_schema",
    "validate_practice_ids",
    "validate_schema",
    "validate_schema_structure",
]
