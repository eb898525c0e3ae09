"""Input readers for the pager.

A reader turns a file or a byte stream into rich :class:`~rich.text.Text`
lines. Compressed input (gzip, bzip2, xz) is decompressed transparently.
Files are syntax highlighted when their name suggests a language; streams are
read on a background thread so the pager can show data as it arrives.
"""

from __future__ import annotations

import bz2
import gzip
import io
import logging
import lzma
import threading
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional

from rich.syntax import Syntax
from rich.text import Text

from .exceptions import ReaderError
from .logging_setup import TRACE
from .types import ColorDepth

__all__ = ["Reader", "decompress", "open_decompressed"]

logger = logging.getLogger(__name__)

_MAGIC_PREFIX_LENGTH = 6
_DECOMPRESSORS: Dict[bytes, Callable[[bytes], bytes]] = {
    b"\x1f\x8b": gzip.decompress,
    b"BZh": bz2.decompress,
    b"\xfd7zXZ\x00": lzma.decompress,
}
_STREAM_OPENERS: Dict[bytes, Callable[[BinaryIO], BinaryIO]] = {
    b"\x1f\x8b": lambda stream: gzip.GzipFile(fileobj=stream),
    b"BZh": lambda stream: bz2.BZ2File(stream),
    b"\xfd7zXZ\x00": lambda stream: lzma.LZMAFile(stream),
}


def _match_magic(prefix: bytes, table: Dict[bytes, Callable]) -> Optional[Callable]:
    for magic, handler in table.items():
        if prefix.startswith(magic):
            return handler
    return None


def decompress(data: bytes) -> bytes:
    """Return ``data`` decompressed if it starts with a known magic number."""
    handler = _match_magic(data[:_MAGIC_PREFIX_LENGTH], _DECOMPRESSORS)
    return data if handler is None else handler(data)


def open_decompressed(stream: BinaryIO) -> BinaryIO:
    """Wrap ``stream`` in a decompressor if its first bytes ask for one."""
    if not hasattr(stream, "peek"):
        stream = io.BufferedReader(stream)  # type: ignore[arg-type]
    prefix = stream.peek(_MAGIC_PREFIX_LENGTH)[:_MAGIC_PREFIX_LENGTH]  # type: ignore[attr-defined]
    opener = _match_magic(prefix, _STREAM_OPENERS)
    return stream if opener is None else opener(stream)


def _split_lines(text: Text) -> List[Text]:
    lines = list(text.split("\n", allow_blank=True))
    if lines and not lines[-1].plain:
        lines.pop()
    return lines


class Reader:
    """Lines of input, possibly still arriving."""

    def __init__(self, name: str, color_system: Optional[str] = None) -> None:
        self.name = name
        self.color_system = color_system
        self.error: Optional[BaseException] = None
        self._lines: List[Text] = []
        self._lock = threading.Lock()
        self._done = threading.Event()

    @classmethod
    def from_stream(cls, stream: BinaryIO, name: str = "") -> "Reader":
        """Start reading ``stream`` in the background."""
        reader = cls(name)
        thread = threading.Thread(
            target=reader._consume, args=(stream,), name="moar-reader", daemon=True
        )
        thread.start()
        return reader

    @classmethod
    def from_filename(
        cls, filename: str, style: str, color_depth: ColorDepth
    ) -> "Reader":
        """Read and highlight ``filename``.

        Raises:
            ReaderError: the file could not be read.
        """
        path = Path(filename)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise ReaderError(f"Failed to open {filename}: {exc}") from exc
        try:
            data = decompress(raw)
        except (OSError, EOFError, lzma.LZMAError) as exc:
            raise ReaderError(f"Failed to decompress {filename}: {exc}") from exc

        reader = cls(filename, color_system=color_depth.color_system)
        reader._append(_highlight(path.name, data.decode("utf-8", "replace"), style))
        reader._done.set()
        logger.debug("Read %d lines from %s", len(reader._lines), filename)
        return reader

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._done.wait(timeout)

    def line_count(self) -> int:
        with self._lock:
            return len(self._lines)

    def get_lines(self, first: int, count: int) -> List[Text]:
        with self._lock:
            return self._lines[max(0, first) : max(0, first) + count]

    def _append(self, lines: List[Text]) -> None:
        with self._lock:
            self._lines.extend(lines)

    def _consume(self, stream: BinaryIO) -> None:
        try:
            for raw_line in open_decompressed(stream):
                line = raw_line.decode("utf-8", "replace").rstrip("\r\n")
                self._append([Text.from_ansi(line, end="")])
                logger.log(TRACE, "Read line %d", self.line_count())
        except (OSError, EOFError, lzma.LZMAError) as exc:
            self.error = exc
            logger.error("Failed reading %s: %s", self.name or "stdin", exc)
        finally:
            self._done.set()


def _highlight(filename: str, code: str, style: str) -> List[Text]:
    lexer = Syntax.guess_lexer(filename, code)
    if lexer in ("default", "text"):
        return [Text.from_ansi(line, end="") for line in code.splitlines()]
    syntax = Syntax(code, lexer, theme=style, background_color="default")
    return _split_lines(syntax.highlight(code))
