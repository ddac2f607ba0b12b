"""Tests for configuration loading.

Tests cover:
- Defaults
- YAML config file values
- Environment variables
- Precedence: override > environment > file > default
- Invalid files and values
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest
import yaml

from cmdseq.core.config import CmdseqConfig, load_config
from cmdseq.core.errors import ConfigError


class TestDefaults:
    """Tests for built-in defaults."""

    def test_defaults(self):
        """With nothing configured, state lives in the temp directory."""
        config = load_config(environ={})

        assert config.state_dir == Path(tempfile.gettempdir())
        assert config.shell == "sh"
        assert config.log_level == "WARNING"
        assert config.log_level_value == logging.WARNING


class TestConfigFile:
    """Tests for YAML config files."""

    def test_file_values(self, sample_config_file, state_dir):
        """Values are read from the file."""
        config = load_config(sample_config_file, environ={})

        assert config.state_dir == state_dir
        assert config.log_level == "INFO"

    def test_file_from_environment(self, sample_config_file, state_dir):
        """$CMDSEQ_CONFIG names the file when no path is given."""
        config = load_config(environ={"CMDSEQ_CONFIG": str(sample_config_file)})

        assert config.state_dir == state_dir

    def test_empty_file(self, tmp_path):
        """An empty file means defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path, environ={}) == CmdseqConfig()

    def test_missing_file(self, tmp_path):
        """An unreadable file is a config error."""
        with pytest.raises(ConfigError, match="Unable to read"):
            load_config(tmp_path / "missing.yaml", environ={})

    def test_invalid_yaml(self, tmp_path):
        """Malformed YAML is a config error."""
        path = tmp_path / "bad.yaml"
        path.write_text("state_dir: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path, environ={})

    def test_not_a_mapping(self, tmp_path):
        """Top-level YAML must be a mapping."""
        path = tmp_path / "list.yaml"
        path.write_text(yaml.safe_dump(["a", "b"]))

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path, environ={})

    def test_unknown_key(self, tmp_path):
        """Unknown keys are rejected."""
        path = tmp_path / "extra.yaml"
        path.write_text(yaml.safe_dump({"state_directory": "/tmp"}))

        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path, environ={})

    def test_invalid_log_level(self, tmp_path):
        """Unknown log levels are rejected."""
        path = tmp_path / "level.yaml"
        path.write_text(yaml.safe_dump({"log_level": "loud"}))

        with pytest.raises(ConfigError):
            load_config(path, environ={})

    def test_empty_shell(self, tmp_path):
        """An empty shell is rejected."""
        path = tmp_path / "shell.yaml"
        path.write_text(yaml.safe_dump({"shell": " "}))

        with pytest.raises(ConfigError):
            load_config(path, environ={})


class TestPrecedence:
    """Tests for the override > environment > file > default order."""

    def test_environment_beats_file(self, sample_config_file, tmp_path):
        """Environment variables override file values."""
        config = load_config(
            sample_config_file,
            environ={"CMDSEQ_DIR": str(tmp_path), "CMDSEQ_SHELL": "bash"},
        )

        assert config.state_dir == tmp_path
        assert config.shell == "bash"

    def test_override_beats_environment(self, sample_config_file, tmp_path):
        """Command-line overrides win over everything."""
        override_dir = tmp_path / "cli"
        config = load_config(
            sample_config_file,
            overrides={"state_dir": override_dir, "log_level": "DEBUG"},
            environ={"CMDSEQ_DIR": str(tmp_path), "CMDSEQ_LOG_LEVEL": "ERROR"},
        )

        assert config.state_dir == override_dir
        assert config.log_level == "DEBUG"

    def test_none_override_ignored(self, sample_config_file, state_dir):
        """Unset command-line options do not clobber lower layers."""
        config = load_config(
            sample_config_file, overrides={"state_dir": None, "log_level": None}, environ={}
        )

        assert config.state_dir == state_dir
        assert config.log_level == "INFO"

    def test_reads_os_environ_by_default(self, monkeypatch, tmp_path):
        """Without an explicit mapping, os.environ is used."""
        monkeypatch.setenv("CMDSEQ_DIR", str(tmp_path))

        assert load_config().state_dir == tmp_path
