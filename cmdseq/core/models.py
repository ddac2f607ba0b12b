"""Data models for cmdseq.

Uses Pydantic so that a schedule cannot exist in an invalid shape.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field, model_validator

from cmdseq.core.errors import ScheduleError


class Schedule(BaseModel):
    """Repetition counts paired positionally with shell commands."""

    repetitions: list[int] = Field(min_length=1)
    commands: list[str] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_shape(self) -> Schedule:
        if len(self.repetitions) != len(self.commands):
            raise ValueError(
                f"{len(self.repetitions)} repetition counts for {len(self.commands)} commands"
            )
        if any(count < 0 for count in self.repetitions):
            raise ValueError("Repetition counts must be non-negative")
        if sum(self.repetitions) < 1:
            raise ValueError("At least one command must have a non-zero repetition count")
        return self

    @classmethod
    def from_pairs(cls, args: Sequence[str]) -> Schedule:
        """Build a schedule from a flat ``count cmd [count cmd ...]`` list.

        Raises:
            ScheduleError: On an odd argument count, a non-numeric count or
                a schedule that would never select any command
        """
        if not args:
            raise ScheduleError("At least one <count> <command> pair is required")
        if len(args) % 2 != 0:
            raise ScheduleError(
                f"Arguments must come in <count> <command> pairs, got {len(args)} arguments"
            )

        repetitions: list[int] = []
        commands: list[str] = []
        for count_str, command in zip(args[::2], args[1::2]):
            # int() accepts "+3" and " 3"; repetition counts are plain digits
            if not (count_str.isascii() and count_str.isdigit()):
                raise ScheduleError(f"Could not parse repetition count {count_str!r}")
            repetitions.append(int(count_str))
            commands.append(command)

        if sum(repetitions) < 1:
            raise ScheduleError("At least one command must have a non-zero repetition count")

        return cls(repetitions=repetitions, commands=commands)

    @property
    def length(self) -> int:
        """Number of positions in one full cycle."""
        return sum(self.repetitions)


class RunOutcome(BaseModel):
    """What a single invocation did."""

    position: int
    command_index: int
    command: str
    next_position: int
    returncode: int | None = None
    executed: bool = False
