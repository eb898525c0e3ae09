from __future__ import annotations

import bz2
import gzip
import io
import lzma
from pathlib import Path

import pytest

from moar.exceptions import ReaderError
from moar.reader import Reader, decompress, open_decompressed
from moar.types import ColorDepth


def _plain(reader: Reader) -> list[str]:
    return [line.plain for line in reader.get_lines(0, reader.line_count())]


def test_plain_file(tmp_path: Path) -> None:
    source = tmp_path / "notes.txt"
    source.write_text("first\nsecond\n", encoding="utf-8")

    reader = Reader.from_filename(str(source), "native", ColorDepth.TWO_FIFTY_SIX)

    assert reader.done
    assert reader.name == str(source)
    assert reader.color_system == "256"
    assert _plain(reader) == ["first", "second"]


def test_compressed_file_is_decompressed(tmp_path: Path) -> None:
    source = tmp_path / "log.txt.gz"
    source.write_bytes(gzip.compress(b"one\ntwo\n"))

    reader = Reader.from_filename(str(source), "native", ColorDepth.EIGHT)

    assert _plain(reader) == ["one", "two"]


def test_source_code_is_highlighted(tmp_path: Path) -> None:
    source = tmp_path / "example.py"
    source.write_text("def answer():\n    return 42\n", encoding="utf-8")

    reader = Reader.from_filename(str(source), "monokai", ColorDepth.TRUE_COLOR)

    assert _plain(reader) == ["def answer():", "    return 42"]
    assert reader.get_lines(0, 1)[0].spans


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ReaderError, match="Failed to open"):
        Reader.from_filename(str(tmp_path / "nope.txt"), "native", ColorDepth.EIGHT)


def test_stream_is_read_in_background() -> None:
    reader = Reader.from_stream(io.BytesIO(b"a\r\nb\n"))
    assert reader.wait(5)
    assert _plain(reader) == ["a", "b"]
    assert reader.error is None


def test_compressed_stream() -> None:
    reader = Reader.from_stream(io.BytesIO(bz2.compress(b"x\ny\n")))
    assert reader.wait(5)
    assert _plain(reader) == ["x", "y"]


def test_ansi_escapes_become_styles() -> None:
    reader = Reader.from_stream(io.BytesIO(b"\x1b[1mbold\x1b[0m plain\n"))
    assert reader.wait(5)
    line = reader.get_lines(0, 1)[0]
    assert line.plain == "bold plain"
    assert line.spans


def test_decompress() -> None:
    assert decompress(b"plain text") == b"plain text"
    assert decompress(gzip.compress(b"zipped")) == b"zipped"
    assert decompress(lzma.compress(b"xz")) == b"xz"


def test_open_decompressed_leaves_plain_streams_alone() -> None:
    stream = open_decompressed(io.BytesIO(b"hello\n"))
    assert stream.read() == b"hello\n"


def test_get_lines_out_of_range() -> None:
    reader = Reader.from_stream(io.BytesIO(b"only\n"))
    assert reader.wait(5)
    assert reader.get_lines(5, 10) == []
