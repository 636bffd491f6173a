"""Tests for practice_graph.cli_utils."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer

from practice_graph.cli_utils import (
    EXIT_USER_ERROR,
    EXIT_VALIDATION_FAILED,
    CatalogLoadError,
    error,
    load_catalog,
    wire_config,
)


class TestExitCodes:
    """Tests for exit code conventions."""

    def test_codes_are_distinct(self) -> None:
        """Test user errors and validation failures are told apart."""
        assert EXIT_USER_ERROR == 1
        assert EXIT_VALIDATION_FAILED == 2


class TestError:
    """Tests for the error helper."""

    def test_raises_exit(self) -> None:
        """Test error always exits with the given code."""
        with pytest.raises(typer.Exit) as exc_info:
            error("boom", exit_code=EXIT_VALIDATION_FAILED)
        assert exc_info.value.exit_code == EXIT_VALIDATION_FAILED

    def test_default_code(self) -> None:
        """Test the default code is the user error code."""
        with pytest.raises(typer.Exit) as exc_info:
            error("boom")
        assert exc_info.value.exit_code == EXIT_USER_ERROR


class TestLoadCatalog:
    """Tests for load_catalog."""

    def test_loads_json(self, tmp_path: Path) -> None:
        """Test the parsed document is returned unchanged."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"practices": [], "dependencies": []}))
        assert load_catalog(path) == {"practices": [], "dependencies": []}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises CatalogLoadError."""
        path = tmp_path / "missing.json"
        with pytest.raises(CatalogLoadError, match="file not found") as exc_info:
            load_catalog(path)
        assert exc_info.value.path == path

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test invalid JSON reports the line."""
        path = tmp_path / "broken.json"
        path.write_text('{\n  "practices": [,]\n}')
        with pytest.raises(CatalogLoadError, match="invalid JSON .* at line 2"):
            load_catalog(path)

    def test_directory(self, tmp_path: Path) -> None:
        """Test reading a directory is reported as a load error."""
        with pytest.raises(CatalogLoadError):
            load_catalog(tmp_path)


class TestWireConfig:
    """Tests for wire_config."""

    def test_cli_values_win(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test CLI options override file settings."""
        monkeypatch.delenv("PRACTICE_GRAPH_ROOT_ID", raising=False)
        (tmp_path / ".practicegraphrc").write_text('root_id = "from-rc"\n')
        config = wire_config(root_id="from-cli", start_dir=tmp_path)
        assert config.root_id == "from-cli"

    def test_invalid_config_exits(self, tmp_path: Path) -> None:
        """Test an invalid configuration becomes a user error exit."""
        with pytest.raises(typer.Exit) as exc_info:
            wire_config(root_policy="sometimes", start_dir=tmp_path)
        assert exc_info.value.exit_code == EXIT_USER_ERROR
