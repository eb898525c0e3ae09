"""Exclusive terminal access for a paging session.

A :class:`Screen` talks to ``/dev/tty`` directly, so keyboard input works even
when stdin is the pipe being paged. Opening it switches the terminal to
cbreak mode and the alternate screen; :meth:`Screen.close` undoes both and is
safe to call more than once.
"""

from __future__ import annotations

import io
import logging
import os
import select
import termios
import tty
from typing import List, Optional, Sequence, TextIO, Tuple

from rich.console import Console
from rich.control import Control
from rich.text import Text

from .exceptions import ScreenError

__all__ = ["Screen", "decode_key"]

logger = logging.getLogger(__name__)

_KEY_SEQUENCES = {
    b"\x1b[A": "up",
    b"\x1bOA": "up",
    b"\x1b[B": "down",
    b"\x1bOB": "down",
    b"\x1b[C": "right",
    b"\x1bOC": "right",
    b"\x1b[D": "left",
    b"\x1bOD": "left",
    b"\x1b[5~": "pgup",
    b"\x1b[6~": "pgdn",
    b"\x1b[H": "home",
    b"\x1b[1~": "home",
    b"\x1b[F": "end",
    b"\x1b[4~": "end",
    b"\x1b": "esc",
}


def decode_key(data: bytes) -> Optional[str]:
    """Name a key press read from the terminal, ``None`` if unrecognized."""
    if not data:
        return None
    if data in _KEY_SEQUENCES:
        return _KEY_SEQUENCES[data]
    if data.startswith(b"\x1b"):
        return None
    return data.decode("utf-8", errors="replace")[0]


class Screen:
    """The terminal, owned exclusively while open."""

    def __init__(
        self, tty_file: TextIO, console: Console, saved_attributes: Optional[list]
    ) -> None:
        self._tty = tty_file
        self._fd = tty_file.fileno()
        self._saved_attributes = saved_attributes
        self.console = console
        self.closed = False

    @classmethod
    def open(cls, color_system: str = "256", tty_path: str = "/dev/tty") -> "Screen":
        """Take over the terminal.

        Raises:
            ScreenError: the terminal could not be opened or configured.
        """
        try:
            tty_file = open(tty_path, "r+b", buffering=0)
        except OSError as exc:
            raise ScreenError(f"Failed to open {tty_path}: {exc}") from exc

        fd = tty_file.fileno()
        try:
            saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except termios.error as exc:
            tty_file.close()
            raise ScreenError(f"Failed to configure {tty_path}: {exc}") from exc

        writer = io.TextIOWrapper(
            tty_file, encoding="utf-8", errors="replace", write_through=True
        )
        console = Console(
            file=writer,
            force_terminal=True,
            color_system=color_system,
            highlight=False,
            emoji=False,
            markup=False,
        )
        screen = cls(writer, console, saved)
        console.set_alt_screen(True)
        console.show_cursor(False)
        logger.debug("Screen opened on %s with %s colors", tty_path, color_system)
        return screen

    def size(self) -> Tuple[int, int]:
        try:
            columns, lines = os.get_terminal_size(self._fd)
        except OSError:
            return self.console.size
        return columns, lines

    def show(self, rows: Sequence[Text]) -> None:
        """Draw ``rows`` from the top left corner, one per terminal line."""
        width, height = self.size()
        self.console.size = (width, height)
        frame: List[Text] = []
        for row in list(rows)[:height]:
            line = row.copy()
            line.truncate(width, overflow="crop", pad=True)
            frame.append(line)
        while len(frame) < height:
            frame.append(Text(" " * width))

        self.console.control(Control.home())
        # Rows are already cut to width, so nothing may wrap
        self.console.print(Text("\n").join(frame), end="", soft_wrap=True)

    def read_key(self, timeout: Optional[float] = None) -> Optional[str]:
        """Wait up to ``timeout`` seconds for a key press."""
        ready, _, _ = select.select([self._fd], [], [], timeout)
        if not ready:
            return None
        return decode_key(os.read(self._fd, 32))

    def close(self) -> None:
        """Give the terminal back in the state we found it."""
        if self.closed:
            return
        self.closed = True
        try:
            self.console.show_cursor(True)
            self.console.set_alt_screen(False)
        finally:
            if self._saved_attributes is not None:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attributes)
            self._tty.close()
        logger.debug("Screen closed")
