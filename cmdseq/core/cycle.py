"""Cycle resolution: map a position in the repetition cycle to a command.

The schedule is treated as consecutive runs, run ``i`` being
``repetitions[i]`` positions wide. A position selects the run that contains
it; the next position wraps to 0 after the last slot of the last run.

    resolve([3, 2, 1], 0) -> (0, 1)
    resolve([3, 2, 1], 3) -> (1, 4)
    resolve([3, 2, 1], 5) -> (2, 0)
"""

from __future__ import annotations

from collections.abc import Sequence

from cmdseq.core.errors import StateCorruptionError


def cycle_length(repetitions: Sequence[int]) -> int:
    """Total number of positions in one full cycle."""
    return sum(repetitions)


def resolve(repetitions: Sequence[int], position: int) -> tuple[int, int]:
    """Resolve a position to ``(command_index, next_position)``.

    Zero-width runs are never selected but still occupy their index, so
    later commands keep their original positions in the command list.

    Args:
        repetitions: Non-negative repetition count per command
        position: Current position, ``0 <= position < sum(repetitions)``

    Returns:
        Index of the command to run and the position to persist afterwards

    Raises:
        StateCorruptionError: If position lies outside the cycle
    """
    total = cycle_length(repetitions)
    if position < 0 or position >= total:
        raise StateCorruptionError(
            f"Position {position} is out of range for a cycle of length {total}"
        )

    boundary = 0
    for index, width in enumerate(repetitions):
        boundary += width
        if position < boundary:
            next_position = position + 1
            # Last slot of the whole cycle
            if next_position == total:
                next_position = 0
            return index, next_position

    # Unreachable: position < total guarantees a run was found
    raise StateCorruptionError(f"Position {position} did not resolve to a command")
