from __future__ import annotations

import io
from typing import List

from rich.text import Text

from moar.pager import Pager, PagerSettings, render_unprintable
from moar.reader import Reader
from moar.types import StatusBarStyle, UnprintableStyle


def _reader(lines: List[str], name: str = "test.txt") -> Reader:
    reader = Reader(name)
    reader._append([Text(line) for line in lines])
    reader._done.set()
    return reader


class _Screen:
    def __init__(self, keys: List[str], width: int = 40, height: int = 10) -> None:
        self.keys = list(keys)
        self.width = width
        self.height = height
        self.frames: List[List[str]] = []

    def size(self):
        return self.width, self.height

    def show(self, rows) -> None:
        self.frames.append([row.plain for row in rows])

    def read_key(self, timeout=None):
        return self.keys.pop(0) if self.keys else "q"


def _plain(rows: List[Text]) -> List[str]:
    return [row.plain for row in rows]


def test_render_with_line_numbers_and_status_bar() -> None:
    pager = Pager(_reader(["first", "second", "third"]))
    rows = pager.render(40, 5)

    assert len(rows) == 5
    assert _plain(rows)[:3] == ["1 first", "2 second", "3 third"]
    assert rows[4].plain.startswith("test.txt: 1-3/3 100%")
    assert len(rows[4].plain) == 40


def test_render_without_line_numbers_or_status_bar() -> None:
    settings = PagerSettings(show_line_numbers=False, show_status_bar=False)
    rows = Pager(_reader(["first", "second"]), settings).render(40, 5)
    assert _plain(rows) == ["first", "second"]


def test_long_line_gets_right_hint() -> None:
    settings = PagerSettings(show_line_numbers=False, show_status_bar=False)
    rows = Pager(_reader(["abcdefghijklmnop"]), settings).render(10, 3)
    assert rows[0].plain == "abcdefghi>"


def test_shifted_line_gets_both_hints() -> None:
    settings = PagerSettings(show_line_numbers=False, show_status_bar=False)
    pager = Pager(_reader(["abcdefghijklmnop"]), settings)
    pager.left_column = 2
    assert pager.render(10, 3)[0].plain == "<defghijk>"


def test_custom_scroll_hints() -> None:
    settings = PagerSettings(
        show_line_numbers=False,
        show_status_bar=False,
        scroll_right_hint=Text("…"),
    )
    rows = Pager(_reader(["abcdefghijklmnop"]), settings).render(10, 3)
    assert rows[0].plain == "abcdefghi…"


def test_wrapping_splits_long_lines() -> None:
    settings = PagerSettings(
        wrap_long_lines=True, show_line_numbers=False, show_status_bar=False
    )
    rows = Pager(_reader(["abcdefghij", "k"]), settings).render(4, 10)
    assert _plain(rows) == ["abcd", "efgh", "ij", "k"]


def test_status_bar_style() -> None:
    settings = PagerSettings(status_bar_style=StatusBarStyle.BOLD)
    rows = Pager(_reader(["x"]), settings).render(20, 3)
    assert any("bold" in str(span.style) for span in rows[-1].spans)


def test_unprintable_highlight() -> None:
    line = render_unprintable(Text("a\x01b"), UnprintableStyle.HIGHLIGHT)
    assert line.plain == "a?b"
    assert any(span.start == 1 and span.end == 2 for span in line.spans)


def test_unprintable_whitespace() -> None:
    line = render_unprintable(Text("a\x01b"), UnprintableStyle.WHITESPACE)
    assert line.plain == "a b"


def test_non_breaking_space_is_kept() -> None:
    line = render_unprintable(Text("a\u00a0b"), UnprintableStyle.HIGHLIGHT)
    assert line.plain == "a\u00a0b"
    assert line.spans == []


def test_tabs_are_expanded() -> None:
    line = render_unprintable(Text("a\tb"), UnprintableStyle.HIGHLIGHT)
    assert line.plain == "a" + " " * 7 + "b"


def test_keys_scroll_and_quit() -> None:
    pager = Pager(_reader([f"line {n}" for n in range(50)]))
    screen = _Screen(["j", "j", "k", " "])

    pager.start_paging(screen)

    # 10 rows tall, 9 of them for content
    assert pager.first_line == 1 + 9
    assert len(screen.frames) == 5


def test_end_and_home_keys() -> None:
    pager = Pager(_reader([f"line {n}" for n in range(50)]))
    pager.start_paging(_Screen(["G"]))
    assert pager.first_line == 50 - 9

    pager = Pager(_reader([f"line {n}" for n in range(50)]))
    pager.start_paging(_Screen(["G", "g"]))
    assert pager.first_line == 0


def test_toggles() -> None:
    pager = Pager(_reader(["x"]))
    pager.start_paging(_Screen(["=", "w"]))
    assert pager.show_status_bar is False
    assert pager.wrap_long_lines is True


def test_left_arrow_at_start_shows_line_numbers() -> None:
    pager = Pager(_reader(["x"]), PagerSettings(show_line_numbers=False))
    pager.start_paging(_Screen(["left"]))
    assert pager.show_line_numbers is True


def test_right_and_left_arrows_shift() -> None:
    pager = Pager(_reader(["x" * 100]), PagerSettings(side_scroll_amount=4))
    pager.start_paging(_Screen(["right", "right", "left"]))
    assert pager.left_column == 4


def test_following_jumps_to_the_end() -> None:
    pager = Pager(_reader([f"line {n}" for n in range(100)]), PagerSettings(following=True))
    pager.start_paging(_Screen([]))
    assert pager.first_line == 100 - 9


def test_scrolling_up_stops_following() -> None:
    pager = Pager(_reader([f"line {n}" for n in range(100)]), PagerSettings(following=True))
    pager.start_paging(_Screen(["k", "k"]))

    assert pager.following is False
    assert pager.first_line == 100 - 9 - 2


def test_quit_if_one_screen_skips_paging_and_reprints() -> None:
    output = io.StringIO()
    pager = Pager(
        _reader(["first", "second"]),
        PagerSettings(quit_if_one_screen=True),
        output=output,
    )
    screen = _Screen([])

    pager.start_paging(screen)
    pager.reprint_after_exit()

    assert screen.frames == []
    assert pager.clear_on_exit is False
    assert output.getvalue() == "first\nsecond\n"


def test_reprint_prints_last_view_without_status_bar() -> None:
    output = io.StringIO()
    pager = Pager(
        _reader(["first", "second"]),
        PagerSettings(show_line_numbers=False, clear_on_exit=False),
        output=output,
    )
    pager.start_paging(_Screen([]))
    pager.reprint_after_exit()
    assert output.getvalue() == "first\nsecond\n"


def test_settings_from_config() -> None:
    from moar.option_parsers import create_option_set

    config = create_option_set({}).resolve(
        "", ["-wrap", "-no-linenumbers", "-no-clear-on-exit", "-shift", "3"]
    )
    settings = PagerSettings.from_config(config)
    assert settings.wrap_long_lines is True
    assert settings.show_line_numbers is False
    assert settings.clear_on_exit is False
    assert settings.show_status_bar is True
    assert settings.side_scroll_amount == 3
