"""Tests for practice_graph configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from practice_graph.config import PracticeGraphConfig, find_config_file, load_config

ENV_VARS = [
    "PRACTICE_GRAPH_ROOT_ID",
    "PRACTICE_GRAPH_ROOT_POLICY",
    "PRACTICE_GRAPH_MIN_YEAR",
    "PRACTICE_GRAPH_MAX_FUTURE_DAYS",
]


@pytest.fixture
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove PRACTICE_GRAPH_* variables for the duration of a test."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestPracticeGraphConfig:
    """Tests for the PracticeGraphConfig dataclass."""

    def test_default_values(self) -> None:
        """Test that default values are set correctly."""
        config = PracticeGraphConfig()
        assert config.root_id == "continuous-delivery"
        assert config.root_policy == "error"
        assert config.min_year == 2000
        assert config.max_future_days == 365

    def test_custom_values(self) -> None:
        """Test that custom values can be set."""
        config = PracticeGraphConfig(
            root_id="deployment-pipeline",
            root_policy="warning",
            min_year=2010,
            max_future_days=30,
        )
        assert config.root_id == "deployment-pipeline"
        assert config.root_policy == "warning"
        assert config.min_year == 2010
        assert config.max_future_days == 30

    def test_validation_empty_root_id(self) -> None:
        """Test that empty root_id raises ValueError."""
        with pytest.raises(ValueError, match="root_id must be a non-empty string"):
            PracticeGraphConfig(root_id="")

    def test_validation_root_policy(self) -> None:
        """Test that root_policy must be a known policy."""
        with pytest.raises(ValueError, match="root_policy must be one of: error, warning"):
            PracticeGraphConfig(root_policy="ignore")  # type: ignore[arg-type]

    def test_validation_min_year_range(self) -> None:
        """Test that min_year must be a usable year."""
        with pytest.raises(ValueError, match="min_year must be between 1 and 9999"):
            PracticeGraphConfig(min_year=0)

    def test_validation_min_year_not_integer(self) -> None:
        """Test that min_year must be an integer."""
        with pytest.raises(ValueError, match="min_year must be an integer"):
            PracticeGraphConfig(min_year="soon")  # type: ignore[arg-type]

    def test_validation_negative_future_days(self) -> None:
        """Test that max_future_days cannot be negative."""
        with pytest.raises(ValueError, match="max_future_days must not be negative"):
            PracticeGraphConfig(max_future_days=-1)

    def test_string_numbers_coerced(self) -> None:
        """Test that numeric strings become integers."""
        config = PracticeGraphConfig(min_year="2015", max_future_days="10")  # type: ignore[arg-type]
        assert config.min_year == 2015
        assert config.max_future_days == 10


class TestFindConfigFile:
    """Tests for find_config_file function."""

    def test_find_in_current_dir(self, tmp_path: Path) -> None:
        """Test finding config file in current directory."""
        config_file = tmp_path / ".practicegraphrc"
        config_file.write_text('root_id = "a"\n')

        assert find_config_file(".practicegraphrc", tmp_path) == config_file

    def test_find_in_grandparent_dir(self, tmp_path: Path) -> None:
        """Test finding config file in grandparent directory."""
        config_file = tmp_path / ".practicegraphrc"
        config_file.write_text('root_id = "a"\n')

        nested_dir = tmp_path / "a" / "b"
        nested_dir.mkdir(parents=True)

        assert find_config_file(".practicegraphrc", nested_dir) == config_file

    def test_not_found(self, tmp_path: Path) -> None:
        """Test returning None when config file not found."""
        assert find_config_file(".practicegraphrc", tmp_path) is None

    def test_prefers_closest_file(self, tmp_path: Path) -> None:
        """Test that closest file is preferred over parent."""
        (tmp_path / ".practicegraphrc").write_text('root_id = "parent"\n')
        child_dir = tmp_path / "subdir"
        child_dir.mkdir()
        child_config = child_dir / ".practicegraphrc"
        child_config.write_text('root_id = "child"\n')

        assert find_config_file(".practicegraphrc", child_dir) == child_config


class TestLoadFromFiles:
    """Tests for loading configuration from .practicegraphrc and pyproject.toml."""

    def test_load_rc(self, tmp_path: Path, _clean_env: None) -> None:
        """Test loading a complete .practicegraphrc file."""
        (tmp_path / ".practicegraphrc").write_text(
            'root_id = "deployment-pipeline"\n'
            'root_policy = "warning"\n'
            "min_year = 2012\n"
            "max_future_days = 7\n"
        )

        config = load_config(start_dir=tmp_path)
        assert config.root_id == "deployment-pipeline"
        assert config.root_policy == "warning"
        assert config.min_year == 2012
        assert config.max_future_days == 7

    def test_ignore_unknown_fields(self, tmp_path: Path, _clean_env: None) -> None:
        """Test that unknown fields in .practicegraphrc are ignored."""
        (tmp_path / ".practicegraphrc").write_text('root_policy = "warning"\ncolour = "blue"\n')

        config = load_config(start_dir=tmp_path)
        assert config.root_policy == "warning"
        assert config.root_id == "continuous-delivery"

    def test_malformed_rc_ignored(self, tmp_path: Path, _clean_env: None) -> None:
        """Test that an unparsable rc file falls back to defaults."""
        (tmp_path / ".practicegraphrc").write_text("root_id = \n")

        assert load_config(start_dir=tmp_path) == PracticeGraphConfig()

    def test_load_from_pyproject(self, tmp_path: Path, _clean_env: None) -> None:
        """Test loading from [tool.practice-graph] with hyphenated keys."""
        (tmp_path / "pyproject.toml").write_text(
            "[project]\n"
            'name = "catalog"\n'
            "\n"
            "[tool.practice-graph]\n"
            'root-policy = "warning"\n'
            "max-future-days = 0\n"
        )

        config = load_config(start_dir=tmp_path)
        assert config.root_policy == "warning"
        assert config.max_future_days == 0

    def test_no_tool_section(self, tmp_path: Path, _clean_env: None) -> None:
        """Test handling pyproject.toml without the tool section."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "catalog"\n')

        assert load_config(start_dir=tmp_path) == PracticeGraphConfig()

    def test_invalid_file_value_raises(self, tmp_path: Path, _clean_env: None) -> None:
        """Test that invalid values from files are rejected."""
        (tmp_path / ".practicegraphrc").write_text('root_policy = "maybe"\n')

        with pytest.raises(ValueError, match="root_policy"):
            load_config(start_dir=tmp_path)


class TestConfigPrecedence:
    """Tests for configuration precedence."""

    @pytest.fixture
    def all_files(self, tmp_path: Path) -> Path:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.practice-graph]\nroot_id = "from-pyproject"\nmin_year = 2001\n'
        )
        (tmp_path / ".practicegraphrc").write_text('root_id = "from-rc"\n')
        return tmp_path

    def test_env_from_strings(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, _clean_env: None
    ) -> None:
        """Test loading every field from environment variables."""
        monkeypatch.setenv("PRACTICE_GRAPH_ROOT_ID", "from-env")
        monkeypatch.setenv("PRACTICE_GRAPH_ROOT_POLICY", "warning")
        monkeypatch.setenv("PRACTICE_GRAPH_MIN_YEAR", "2005")
        monkeypatch.setenv("PRACTICE_GRAPH_MAX_FUTURE_DAYS", "3")

        config = load_config(start_dir=tmp_path)
        assert config.root_id == "from-env"
        assert config.root_policy == "warning"
        assert config.min_year == 2005
        assert config.max_future_days == 3

    def test_cli_overrides_all(
        self, all_files: Path, monkeypatch: pytest.MonkeyPatch, _clean_env: None
    ) -> None:
        """Test that CLI arguments override all other sources."""
        monkeypatch.setenv("PRACTICE_GRAPH_ROOT_ID", "from-env")

        config = load_config(cli_overrides={"root_id": "from-cli"}, start_dir=all_files)
        assert config.root_id == "from-cli"

    def test_none_overrides_ignored(self, all_files: Path, _clean_env: None) -> None:
        """Test that unset CLI options do not mask other sources."""
        config = load_config(
            cli_overrides={"root_id": None, "root_policy": None}, start_dir=all_files
        )
        assert config.root_id == "from-rc"

    def test_env_overrides_files(
        self, all_files: Path, monkeypatch: pytest.MonkeyPatch, _clean_env: None
    ) -> None:
        """Test that environment variables override file configs."""
        monkeypatch.setenv("PRACTICE_GRAPH_ROOT_ID", "from-env")

        assert load_config(start_dir=all_files).root_id == "from-env"

    def test_rc_overrides_pyproject(self, all_files: Path, _clean_env: None) -> None:
        """Test that .practicegraphrc overrides pyproject.toml per field."""
        config = load_config(start_dir=all_files)
        assert config.root_id == "from-rc"
        assert config.min_year == 2001
