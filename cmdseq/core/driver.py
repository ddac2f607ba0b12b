"""Invocation driver: load, resolve, run, save.

Each process invocation advances the stored position exactly once. The
position is advanced whenever the shell ran, whatever the command's exit
status, so a persistently failing command is skipped on the next
invocation rather than retried. Only a failure to spawn the shell leaves
the position untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from cmdseq.core.cycle import resolve
from cmdseq.core.errors import StateCorruptionError
from cmdseq.core.executor import ShellExecutor
from cmdseq.core.models import RunOutcome, Schedule
from cmdseq.core.store import PositionStore, state_path

logger = logging.getLogger(__name__)


class InvocationDriver:
    """Runs one step of a schedule for one argument identity."""

    def __init__(
        self,
        schedule: Schedule,
        argv: Sequence[str],
        state_dir: Path,
        executor: ShellExecutor | None = None,
    ):
        self.schedule = schedule
        self.store = PositionStore(state_path(state_dir, argv))
        self.executor = executor or ShellExecutor()

    def _resolve_current(self) -> RunOutcome:
        position = self.store.load()
        try:
            index, next_position = resolve(self.schedule.repetitions, position)
        except StateCorruptionError as e:
            raise StateCorruptionError(f"{e} (state file {self.store.path})") from e

        logger.debug(
            f"Position {position} -> command {index}, next position {next_position}"
        )
        return RunOutcome(
            position=position,
            command_index=index,
            command=self.schedule.commands[index],
            next_position=next_position,
        )

    def peek(self) -> RunOutcome:
        """Resolve the command the next run would execute without running it."""
        return self._resolve_current()

    def run(self) -> RunOutcome:
        """Execute the current command and persist the next position.

        Raises:
            StateCorruptionError: If the stored position is invalid
            StateIOError: If the state file cannot be read or written
            ExecutionError: If the shell cannot be spawned (state unchanged)
        """
        outcome = self._resolve_current()
        result = self.executor.run(outcome.command)

        if not result.succeeded:
            logger.warning(
                f"Command {outcome.command_index} exited with status {result.returncode}; "
                "advancing anyway"
            )
        else:
            logger.debug(f"Command {outcome.command_index} exited with status 0")

        self.store.save(outcome.next_position)
        return outcome.model_copy(update={"returncode": result.returncode, "executed": True})
