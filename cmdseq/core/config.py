"""Configuration loading.

Settings resolve in order: explicit override (CLI flag), environment
variable, YAML config file, built-in default.

Example config file:

    state_dir: /var/lib/cmdseq
    shell: /bin/bash
    log_level: INFO
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from cmdseq.core.errors import ConfigError
from cmdseq.core.executor import DEFAULT_SHELL

ENV_CONFIG = "CMDSEQ_CONFIG"
ENV_STATE_DIR = "CMDSEQ_DIR"
ENV_SHELL = "CMDSEQ_SHELL"
ENV_LOG_LEVEL = "CMDSEQ_LOG_LEVEL"

_ENV_KEYS = {
    "state_dir": ENV_STATE_DIR,
    "shell": ENV_SHELL,
    "log_level": ENV_LOG_LEVEL,
}

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class CmdseqConfig(BaseModel):
    """Effective settings for one invocation."""

    model_config = ConfigDict(extra="forbid")

    state_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    shell: str = DEFAULT_SHELL
    log_level: str = "WARNING"

    @field_validator("shell")
    @classmethod
    def _shell_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("shell must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return raw


def load_config(
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> CmdseqConfig:
    """Build the effective configuration.

    Args:
        config_path: YAML file to read; falls back to $CMDSEQ_CONFIG
        overrides: Values from the command line; None entries are ignored
        environ: Environment mapping (defaults to os.environ)

    Raises:
        ConfigError: If the file is unreadable or any value is invalid
    """
    env = os.environ if environ is None else environ

    if config_path is None and env.get(ENV_CONFIG):
        config_path = Path(env[ENV_CONFIG])

    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(_read_config_file(Path(config_path)))

    for key, env_name in _ENV_KEYS.items():
        if env.get(env_name):
            values[key] = env[env_name]

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    try:
        return CmdseqConfig.model_validate(values)
    except pydantic.ValidationError as e:
        source = f" ({config_path})" if config_path is not None else ""
        raise ConfigError(f"Invalid configuration{source}: {e}") from e
