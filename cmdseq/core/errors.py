"""Exception taxonomy for cmdseq.

Every failure is terminal for the current invocation. The CLI maps each
class to an exit code; nothing in the core retries.
"""


class CmdseqError(Exception):
    """Base class for all cmdseq errors."""

    pass


class ScheduleError(CmdseqError):
    """Schedule arguments are malformed (usage error)."""

    pass


class StateCorruptionError(CmdseqError):
    """State file content is unparsable or out of range for the schedule."""

    pass


class StateIOError(CmdseqError):
    """State file could not be created, read or written."""

    pass


class ExecutionError(CmdseqError):
    """Shell process could not be spawned."""

    pass


class ConfigError(CmdseqError):
    """Configuration file is unreadable or invalid."""

    pass
