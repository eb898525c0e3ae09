from __future__ import annotations

import pytest

from moar.exceptions import ScreenError
from moar.screen import Screen, decode_key


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"q", "q"),
        (b"\x1b[A", "up"),
        (b"\x1bOB", "down"),
        (b"\x1b[6~", "pgdn"),
        (b"\x1b", "esc"),
        ("é".encode("utf-8"), "é"),
        (b"\x1b[Z", None),
        (b"", None),
    ],
)
def test_decode_key(data: bytes, expected) -> None:
    assert decode_key(data) == expected


def test_open_without_terminal_fails_cleanly(tmp_path) -> None:
    with pytest.raises(ScreenError, match="Failed to"):
        Screen.open(tty_path=str(tmp_path / "no-such-tty"))
