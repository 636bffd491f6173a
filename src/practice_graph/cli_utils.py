"""CLI utility functions for practice-graph.

Provides helper functions for:
- Config wiring: Passing Typer CLI options to load_config
- Catalog loading: Reading a catalog JSON document from disk
- Error formatting: Consistent user-friendly error messages with exit codes
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import typer

from practice_graph.config import PracticeGraphConfig, load_config

# Exit code conventions
EXIT_USER_ERROR = 1  # User error (bad input, missing file, etc.)
EXIT_VALIDATION_FAILED = 2  # Catalog loaded but failed validation

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class CatalogLoadError(Exception):
    """Raised when a catalog file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load catalog '{path}': {reason}")


# -----------------------------------------------------------------------------
# Error Formatting Helpers
# -----------------------------------------------------------------------------


def error(msg: str, *, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print an error message and exit with the given exit code.

    Raises:
        typer.Exit: Always raises to exit the program.
    """
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)
    raise typer.Exit(code=exit_code)


# -----------------------------------------------------------------------------
# Catalog and Config Wiring
# -----------------------------------------------------------------------------


def load_catalog(path: Path) -> Any:
    """Read and parse a catalog JSON document.

    The parsed value is returned as-is; structural checks are left to the
    schema validator.

    Raises:
        CatalogLoadError: If the file is missing, unreadable or not JSON.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise CatalogLoadError(path, "file not found") from None
    except OSError as e:
        raise CatalogLoadError(path, str(e)) from e
    except json.JSONDecodeError as e:
        raise CatalogLoadError(path, f"invalid JSON ({e.msg} at line {e.lineno})") from e


def wire_config(
    root_id: str | None = None,
    root_policy: str | None = None,
    start_dir: Path | None = None,
) -> PracticeGraphConfig:
    """Build configuration from CLI options plus files and environment.

    Raises:
        typer.Exit: If the resulting configuration is invalid.
    """
    overrides: dict[str, Any] = {"root_id": root_id, "root_policy": root_policy}
    try:
        return load_config(cli_overrides=overrides, start_dir=start_dir)
    except ValueError as e:
        error(f"Invalid configuration: {e}")


def configure_logging(verbose: bool) -> None:
    """Send engine debug logs to stderr when ``verbose`` is set.

    Without it, nothing is configured and warnings reach stderr through the
    logging module's last-resort handler.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT, force=True)
