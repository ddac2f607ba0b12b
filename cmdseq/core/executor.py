"""Shell execution of the selected command.

The child process inherits the caller's stdin, stdout and stderr; nothing
is captured or buffered. The call blocks until the child exits.
"""

from __future__ import annotations

import logging
import subprocess

from pydantic import BaseModel

from cmdseq.core.errors import ExecutionError

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "sh"


class ExecutionResult(BaseModel):
    """Result of a shell execution."""

    command: str
    returncode: int

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class ShellExecutor:
    """Run command strings through ``<shell> -c``."""

    def __init__(self, shell: str = DEFAULT_SHELL):
        self.shell = shell

    def run(self, command: str) -> ExecutionResult:
        """Run command and wait for it to exit.

        A non-zero exit or death by signal is reported in the result, not
        raised. A negative returncode means the child was killed by that
        signal number.

        Raises:
            ExecutionError: If the shell itself could not be started
        """
        logger.debug(f"Executing via {self.shell}: {command}")
        try:
            completed = subprocess.run([self.shell, "-c", command], check=False)
        except OSError as e:
            raise ExecutionError(f"Failed to execute {self.shell!r}: {e}") from e

        return ExecutionResult(command=command, returncode=completed.returncode)
