"""Core modules for cmdseq."""

from cmdseq.core.cycle import cycle_length, resolve
from cmdseq.core.driver import InvocationDriver
from cmdseq.core.errors import (
    CmdseqError,
    ConfigError,
    ExecutionError,
    ScheduleError,
    StateCorruptionError,
    StateIOError,
)
from cmdseq.core.models import RunOutcome, Schedule
from cmdseq.core.store import PositionStore, fingerprint, state_path

__all__ = [
    "CmdseqError",
    "ConfigError",
    "ExecutionError",
    "InvocationDriver",
    "PositionStore",
    "RunOutcome",
    "Schedule",
    "ScheduleError",
    "StateCorruptionError",
    "StateIOError",
    "cycle_length",
    "fingerprint",
    "resolve",
    "state_path",
]
