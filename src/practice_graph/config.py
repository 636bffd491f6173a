"""Configuration management for the practice graph tools.

Handles configuration loading from multiple sources with precedence:
CLI args > environment variables > .practicegraphrc > pyproject.toml > defaults
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

from practice_graph.validators.base import RootPolicy

RC_FILENAME = ".practicegraphrc"
PYPROJECT_SECTION = "practice-graph"
ROOT_POLICIES: tuple[str, ...] = ("error", "warning")


@dataclass
class PracticeGraphConfig:
    """Configuration for catalog validation and queries.

    Attributes:
        root_id: Practice the full tree starts from (default: "continuous-delivery")
        root_policy: Whether a catalog without a root practice is an
            "error" or only a "warning" (default: "error")
        min_year: Earliest accepted year for metadata.lastUpdated (default: 2000)
        max_future_days: How far in the future lastUpdated may lie (default: 365)
    """

    root_id: str = "continuous-delivery"
    root_policy: RootPolicy = "error"
    min_year: int = 2000
    max_future_days: int = 365

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if not self.root_id or not isinstance(self.root_id, str):
            raise ValueError("root_id must be a non-empty string")

        if self.root_policy not in ROOT_POLICIES:
            raise ValueError(f"root_policy must be one of: {', '.join(ROOT_POLICIES)}")

        # Values from the environment arrive as strings
        self.min_year = _coerce_int(self.min_year, "min_year")
        self.max_future_days = _coerce_int(self.max_future_days, "max_future_days")

        if not 1 <= self.min_year <= 9999:
            raise ValueError("min_year must be between 1 and 9999")
        if self.max_future_days < 0:
            raise ValueError("max_future_days must not be negative")


def _coerce_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer") from None


def _get_config_field_names() -> set[str]:
    """Get the set of valid configuration field names."""
    return {f.name for f in fields(PracticeGraphConfig)}


def find_config_file(filename: str = RC_FILENAME, start_dir: Path | None = None) -> Path | None:
    """Find a configuration file by traversing up the directory tree.

    Args:
        filename: Name of the config file to find.
        start_dir: Directory to start searching from. Defaults to current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        config_path = current / filename
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _load_toml_file(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _load_from_rc(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from .practicegraphrc, or {} if not found or unreadable."""
    config_path = find_config_file(RC_FILENAME, start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError):
        return {}
    valid_fields = _get_config_field_names()
    return {k: v for k, v in data.items() if k in valid_fields}


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from the pyproject.toml [tool.practice-graph] section."""
    config_path = find_config_file("pyproject.toml", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError):
        return {}
    section = data.get("tool", {}).get(PYPROJECT_SECTION, {})
    valid_fields = _get_config_field_names()
    normalized = {k.replace("-", "_"): v for k, v in section.items()}
    return {k: v for k, v in normalized.items() if k in valid_fields}


def _load_from_env() -> dict[str, Any]:
    """Load configuration from PRACTICE_GRAPH_* environment variables.

    For example: PRACTICE_GRAPH_ROOT_ID, PRACTICE_GRAPH_ROOT_POLICY
    """
    result: dict[str, Any] = {}
    for name in _get_config_field_names():
        value = os.environ.get(f"PRACTICE_GRAPH_{name.upper()}")
        if value is not None:
            result[name] = value
    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries; later ones take precedence."""
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is not None:
                result[key] = value
    return result


def load_config(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> PracticeGraphConfig:
    """Load configuration with full precedence chain.

    Precedence (highest to lowest):
    1. CLI arguments (cli_overrides)
    2. Environment variables (PRACTICE_GRAPH_*)
    3. .practicegraphrc file
    4. pyproject.toml [tool.practice-graph] section
    5. Default values

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    valid_fields = _get_config_field_names()
    cli_config = {
        k: v for k, v in (cli_overrides or {}).items() if k in valid_fields and v is not None
    }

    merged = _merge_configs(
        _load_from_pyproject(start_dir),
        _load_from_rc(start_dir),
        _load_from_env(),
        cli_config,
    )
    return PracticeGraphConfig(**merged)
