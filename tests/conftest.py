# conftest.py - Shared pytest fixtures for all tests
"""Shared pytest fixtures for the cmdseq test suite.

This module provides fixtures used across test modules:
- Isolated state directories
- Sample schedules
- Mock executors standing in for the shell
- A clean environment free of CMDSEQ_* variables

Usage:
    Import fixtures implicitly via pytest's fixture discovery.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest
import yaml

from cmdseq.core.executor import ExecutionResult, ShellExecutor
from cmdseq.core.models import Schedule

# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove CMDSEQ_* variables so the host environment cannot leak in."""
    for name in ("CMDSEQ_CONFIG", "CMDSEQ_DIR", "CMDSEQ_SHELL", "CMDSEQ_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    """Create an empty directory for state files.

    Returns:
        Path to the state directory.
    """
    directory = tmp_path / "state"
    directory.mkdir()
    return directory


# =============================================================================
# Schedule Fixtures
# =============================================================================


@pytest.fixture
def sample_schedule() -> Schedule:
    """Three commands repeated 3, 2 and 1 times (cycle length 6)."""
    return Schedule(
        repetitions=[3, 2, 1],
        commands=["echo first", "echo second", "echo third"],
    )


@pytest.fixture
def sample_config_file(tmp_path: Path, state_dir: Path) -> Path:
    """Create a sample YAML config file pointing at the state directory.

    Returns:
        Path to the config file.
    """
    config_path = tmp_path / "cmdseq.yaml"
    config_path.write_text(
        yaml.safe_dump({"state_dir": str(state_dir), "shell": "sh", "log_level": "info"})
    )
    return config_path


# =============================================================================
# Mock Fixtures for External Dependencies
# =============================================================================


@pytest.fixture
def mock_executor() -> Mock:
    """Create a mock ShellExecutor that reports success.

    Example:
        def test_failure(mock_executor):
            mock_executor.run.return_value = ExecutionResult(command="x", returncode=3)
    """
    executor = Mock(spec=ShellExecutor)
    executor.run.side_effect = lambda command: ExecutionResult(command=command, returncode=0)
    return executor


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "shell: marks tests that spawn a real /bin/sh")
