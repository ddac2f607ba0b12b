"""Durable storage of the cycle position.

One plain-text file per schedule identity holds the decimal position:

    <state_dir>/cmdseq.<first 16 hex chars of sha256("-".join(argv))>

NOTE: There is no locking. Two invocations started at the same time with the
same arguments race on the read-modify-write of the position file and one of
the advances can be lost. Callers that need concurrent invocations must add
their own file lock around load/resolve/run/save.
"""

from __future__ import annotations

import hashlib
import logging
import os
import stat
import tempfile
from collections.abc import Sequence
from pathlib import Path

from cmdseq.core.errors import StateCorruptionError, StateIOError

logger = logging.getLogger(__name__)

STATE_FILE_PREFIX = "cmdseq."
FINGERPRINT_LENGTH = 16


def fingerprint(argv: Sequence[str]) -> str:
    """Fingerprint an argument vector for use as a state file key.

    The arguments are joined with ``-`` before hashing, as typed on the
    command line, so identical invocations always share one file.
    """
    joined = "-".join(argv)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def state_path(state_dir: Path, argv: Sequence[str]) -> Path:
    """Location of the position file for an argument vector."""
    return Path(state_dir) / f"{STATE_FILE_PREFIX}{fingerprint(argv)}"


def _parse_position(text: str, path: Path) -> int:
    value = text.strip()
    # Reject signs, whitespace inside, and non-ASCII digits that int() would accept
    if not (value.isascii() and value.isdigit()):
        raise StateCorruptionError(f"Could not parse a position from state file {path}: {text!r}")
    return int(value)


def _default_file_mode() -> int:
    """Permission bits a plain open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _unlink_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except OSError:
        pass


class PositionStore:
    """Read and overwrite the position file at a single location."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _write_temp(self, value: int, mode: int) -> str:
        """Write value to a temp file beside the state file and return its path."""
        fd, temp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            dir=str(self.path.parent),
        )
        try:
            with os.fdopen(fd, "w", encoding="ascii") as f:
                os.fchmod(f.fileno(), mode)
                f.write(str(value))
        except BaseException:
            _unlink_quietly(temp_path)
            raise
        return temp_path

    def load(self) -> int:
        """Return the stored position, creating the file with ``0`` if absent.

        The new file is written in full under a temporary name and then
        hard-linked into place, so the state file never exists without its
        content and an existing file is read rather than overwritten.

        Raises:
            StateCorruptionError: If the file content is not a non-negative integer
            StateIOError: If the file cannot be created or read
        """
        if not self.path.exists():
            try:
                temp_path = self._write_temp(0, _default_file_mode())
            except OSError as e:
                raise StateIOError(f"Unable to create state file {self.path}: {e}") from e

            try:
                os.link(temp_path, self.path)
                logger.debug(f"Created state file {self.path}")
                return 0
            except FileExistsError:
                pass
            except OSError as e:
                raise StateIOError(f"Unable to create state file {self.path}: {e}") from e
            finally:
                _unlink_quietly(temp_path)

        if not self.path.is_file():
            raise StateIOError(f"State path {self.path} exists but is not a regular file")

        try:
            text = self.path.read_text(encoding="ascii")
        except UnicodeDecodeError as e:
            raise StateCorruptionError(f"State file {self.path} is not ASCII text") from e
        except OSError as e:
            raise StateIOError(f"Unable to read state file {self.path}: {e}") from e

        position = _parse_position(text, self.path)
        logger.debug(f"Loaded position {position} from {self.path}")
        return position

    def save(self, value: int) -> None:
        """Replace the file content with the decimal representation of value.

        The file keeps its existing permission bits.

        Raises:
            ValueError: If value is negative
            StateIOError: If the file cannot be written
        """
        if value < 0:
            raise ValueError(f"Position must be non-negative, got {value}")

        try:
            mode = stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            mode = _default_file_mode()
        except OSError as e:
            raise StateIOError(f"Unable to write state file {self.path}: {e}") from e

        # Atomic write via temp file + replace.
        try:
            temp_path = self._write_temp(value, mode)
        except OSError as e:
            raise StateIOError(f"Unable to write state file {self.path}: {e}") from e

        try:
            os.replace(temp_path, self.path)
        except OSError as e:
            _unlink_quietly(temp_path)
            raise StateIOError(f"Unable to write state file {self.path}: {e}") from e

        logger.debug(f"Saved position {value} to {self.path}")
