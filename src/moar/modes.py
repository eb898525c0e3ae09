"""Startup mode selection from terminal and pipe topology.

``moar`` behaves like ``cat`` whenever stdout is not a terminal, so it can be
used as ``$PAGER`` everywhere. Only with stdout on a terminal does it page.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, IO, Optional

from .exceptions import CopyError, NoInputError

__all__ = ["Mode", "TerminalTopology", "copy_stream", "select_mode"]

logger = logging.getLogger(__name__)

_COPY_CHUNK_SIZE = 64 * 1024


class Mode(Enum):
    COPY_FILE_TO_STDOUT = "copy-file-to-stdout"
    COPY_STDIN_TO_STDOUT = "copy-stdin-to-stdout"
    INTERACTIVE_PAGING = "interactive-paging"


@dataclass(frozen=True)
class TerminalTopology:
    """Which standard streams are redirected, and whether we got a filename."""

    stdin_redirected: bool
    stdout_redirected: bool
    filename_given: bool

    @classmethod
    def capture(
        cls, stdin: IO[bytes], stdout: IO[bytes], filename: Optional[str]
    ) -> "TerminalTopology":
        return cls(
            stdin_redirected=not _is_terminal(stdin),
            stdout_redirected=not _is_terminal(stdout),
            filename_given=filename is not None,
        )


def _is_terminal(stream: IO[bytes]) -> bool:
    try:
        return os.isatty(stream.fileno())
    except (AttributeError, OSError, ValueError):
        # In-memory streams have no descriptor and count as redirected
        return False


def select_mode(topology: TerminalTopology) -> Mode:
    """Pick exactly one startup mode.

    With stdout redirected a filename wins over redirected stdin, which is
    what ``less`` does.

    Raises:
        NoInputError: neither a filename nor piped input is available.
    """
    if not topology.filename_given and not topology.stdin_redirected:
        raise NoInputError()

    if topology.stdout_redirected:
        if topology.filename_given:
            return Mode.COPY_FILE_TO_STDOUT
        return Mode.COPY_STDIN_TO_STDOUT

    return Mode.INTERACTIVE_PAGING


def copy_stream(source: BinaryIO, destination: BinaryIO, name: str = "stdin") -> int:
    """Copy ``source`` to ``destination`` until EOF, returning the byte count.

    Raises:
        CopyError: on any read or write failure. Copies are never retried.
    """
    counter = _CountingWriter(destination)
    try:
        shutil.copyfileobj(source, counter, _COPY_CHUNK_SIZE)
        destination.flush()
    except OSError as exc:
        raise CopyError(f"Failed to copy {name} to stdout: {exc}") from exc
    logger.debug("Copied %d bytes from %s to stdout", counter.count, name)
    return counter.count


class _CountingWriter:
    def __init__(self, destination: BinaryIO) -> None:
        self._destination = destination
        self.count = 0

    def write(self, data: bytes) -> int:
        self._destination.write(data)
        self.count += len(data)
        return len(data)
