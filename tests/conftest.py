"""Pytest configuration and fixtures for practice_graph tests."""

from __future__ import annotations

import copy
import os
from collections.abc import Callable
from typing import Any

import pytest

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")


VALID_PRACTICE: dict[str, Any] = {
    "id": "continuous-integration",
    "name": "Continuous Integration",
    "type": "practice",
    "category": "behavior",
    "description": "Integrate code changes frequently to detect integration issues early.",
    "requirements": [
        "Use Trunk-based Development",
        "Integrate work to trunk at least daily",
        "Automated testing before merging",
    ],
    "benefits": [
        "Early detection of integration issues",
        "Reduced merge conflicts",
        "Always-releasable codebase",
    ],
}

VALID_ROOT_PRACTICE: dict[str, Any] = {
    "id": "continuous-delivery",
    "name": "Continuous Delivery",
    "type": "root",
    "category": "core",
    "description": "Continuous delivery improves both delivery performance and quality.",
    "requirements": [
        "Use Continuous Integration",
        "Application pipeline is the only path to production",
    ],
    "benefits": ["Improved delivery performance", "Higher quality releases"],
}

VALID_METADATA: dict[str, Any] = {
    "changelog": "Updated categories to match 2015 CD model",
    "source": "MinimumCD.org",
    "description": "Hierarchical data structure for Continuous Delivery practices",
    "version": "1.7.0",
    "lastUpdated": "2025-10-21",
}


def make_practice_dict(
    practice_id: str,
    *,
    practice_type: str = "practice",
    category: str = "automation",
    **overrides: Any,
) -> dict[str, Any]:
    """Build a valid raw practice; keyword overrides replace single fields."""
    practice: dict[str, Any] = {
        "id": practice_id,
        "name": practice_id.replace("-", " ").title(),
        "type": practice_type,
        "category": category,
        "description": f"Description of {practice_id}.",
        "requirements": [f"Requirement of {practice_id}"],
        "benefits": [f"Benefit of {practice_id}"],
    }
    practice.update(overrides)
    return practice


def make_edge(practice_id: str, depends_on_id: str) -> dict[str, str]:
    return {"practice_id": practice_id, "depends_on_id": depends_on_id}


@pytest.fixture
def valid_practice() -> dict[str, Any]:
    """A fully valid non-root practice."""
    return copy.deepcopy(VALID_PRACTICE)


@pytest.fixture
def valid_root_practice() -> dict[str, Any]:
    """A fully valid root practice."""
    return copy.deepcopy(VALID_ROOT_PRACTICE)


@pytest.fixture
def valid_metadata() -> dict[str, Any]:
    """Metadata with every optional field present."""
    return copy.deepcopy(VALID_METADATA)


@pytest.fixture
def valid_schema() -> dict[str, Any]:
    """The smallest complete catalog: a root depending on one practice."""
    return {
        "practices": [copy.deepcopy(VALID_PRACTICE), copy.deepcopy(VALID_ROOT_PRACTICE)],
        "dependencies": [make_edge("continuous-delivery", "continuous-integration")],
        "metadata": copy.deepcopy(VALID_METADATA),
    }


@pytest.fixture
def reference_catalog() -> dict[str, Any]:
    """A small but realistic catalog with a shared dependency.

    Structure:
        continuous-delivery
         ├── continuous-integration
         │    ├── trunk-based-development
         │    └── automated-testing
         └── deployment-pipeline
              ├── automated-testing
              └── version-control
        trunk-based-development -> version-control
    """
    practices = [
        make_practice_dict("continuous-delivery", practice_type="root", category="core"),
        make_practice_dict("continuous-integration", category="behavior"),
        make_practice_dict("deployment-pipeline", category="automation"),
        make_practice_dict("trunk-based-development", category="behavior"),
        make_practice_dict("automated-testing", category="behavior-enabled-automation"),
        make_practice_dict("version-control", category="automation"),
    ]
    dependencies = [
        make_edge("continuous-delivery", "continuous-integration"),
        make_edge("continuous-delivery", "deployment-pipeline"),
        make_edge("continuous-integration", "trunk-based-development"),
        make_edge("continuous-integration", "automated-testing"),
        make_edge("deployment-pipeline", "automated-testing"),
        make_edge("deployment-pipeline", "version-control"),
        make_edge("trunk-based-development", "version-control"),
    ]
    return {
        "practices": practices,
        "dependencies": dependencies,
        "metadata": copy.deepcopy(VALID_METADATA),
    }


@pytest.fixture
def minimum_cd_catalog() -> dict[str, Any]:
    """Continuous Delivery with the six practices it directly requires.

    Continuous Integration additionally builds on Trunk-based Development,
    which builds on Version Control.
    """
    direct = [
        ("continuous-integration", "behavior"),
        ("application-pipeline", "automation"),
        ("immutable-artifact", "automation"),
        ("production-like-test-environment", "automation"),
        ("on-demand-rollback", "behavior-enabled-automation"),
        ("application-configuration", "behavior"),
    ]
    practices = [
        make_practice_dict("continuous-delivery", practice_type="root", category="core"),
        *(make_practice_dict(practice_id, category=category) for practice_id, category in direct),
        make_practice_dict("trunk-based-development", category="behavior"),
        make_practice_dict("version-control", category="automation"),
    ]
    dependencies = [make_edge("continuous-delivery", practice_id) for practice_id, _ in direct]
    dependencies += [
        make_edge("continuous-integration", "trunk-based-development"),
        make_edge("trunk-based-development", "version-control"),
    ]
    return {
        "practices": practices,
        "dependencies": dependencies,
        "metadata": copy.deepcopy(VALID_METADATA),
    }


@pytest.fixture
def make_practice() -> Callable[..., dict[str, Any]]:
    """Factory fixture for raw practices."""
    return make_practice_dict
