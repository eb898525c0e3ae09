"""A small interactive pager on top of :class:`moar.screen.Screen`.

Rendering is split from input handling: :meth:`Pager.render` turns the
current position into rows of rich text and is usable without a terminal.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, TextIO

from rich.console import Console
from rich.text import Text

from .logging_setup import TRACE
from .option_parsers import DEFAULT_SCROLL_LEFT_HINT, DEFAULT_SCROLL_RIGHT_HINT
from .reader import Reader
from .types import StatusBarStyle, UnprintableStyle

__all__ = ["Pager", "PagerSettings"]

logger = logging.getLogger(__name__)

_POLL_INTERVAL_SECONDS = 0.1
_TAB_SIZE = 8


@dataclass(frozen=True)
class PagerSettings:
    wrap_long_lines: bool = False
    following: bool = False
    show_line_numbers: bool = True
    show_status_bar: bool = True
    clear_on_exit: bool = True
    quit_if_one_screen: bool = False
    status_bar_style: StatusBarStyle = StatusBarStyle.INVERSE
    unprintable_style: UnprintableStyle = UnprintableStyle.HIGHLIGHT
    scroll_left_hint: Text = field(default_factory=DEFAULT_SCROLL_LEFT_HINT.copy)
    scroll_right_hint: Text = field(default_factory=DEFAULT_SCROLL_RIGHT_HINT.copy)
    side_scroll_amount: int = 16

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "PagerSettings":
        return cls(
            wrap_long_lines=bool(config["wrap"]),
            following=bool(config["follow"]),
            show_line_numbers=not config["no-linenumbers"],
            show_status_bar=not config["no-statusbar"],
            clear_on_exit=not config["no-clear-on-exit"],
            quit_if_one_screen=bool(config["quit-if-one-screen"]),
            status_bar_style=config["statusbar"],  # type: ignore[arg-type]
            unprintable_style=config["render-unprintable"],  # type: ignore[arg-type]
            scroll_left_hint=config["scroll-left-hint"],  # type: ignore[arg-type]
            scroll_right_hint=config["scroll-right-hint"],  # type: ignore[arg-type]
            side_scroll_amount=int(config["shift"]),  # type: ignore[call-overload]
        )


def render_unprintable(line: Text, style: UnprintableStyle) -> Text:
    """Replace control characters one for one, keeping all other styling."""
    if "\t" in line.plain:
        line = line.copy()
        line.expand_tabs(_TAB_SIZE)
    plain = line.plain
    positions = [
        i for i, char in enumerate(plain) if unicodedata.category(char).startswith("C")
    ]
    if not positions:
        return line

    replacement = "?" if style is UnprintableStyle.HIGHLIGHT else " "
    chars = list(plain)
    for index in positions:
        chars[index] = replacement
    cleaned = Text("".join(chars), style=line.style, end="")
    cleaned.spans = list(line.spans)
    if style is UnprintableStyle.HIGHLIGHT:
        for index in positions:
            cleaned.stylize("reverse", index, index + 1)
    return cleaned


class Pager:
    """Interactive view over a :class:`Reader`."""

    def __init__(
        self,
        reader: Reader,
        settings: Optional[PagerSettings] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        self.reader = reader
        self.settings = settings or PagerSettings()
        self.output = output

        self.wrap_long_lines = self.settings.wrap_long_lines
        self.show_line_numbers = self.settings.show_line_numbers
        self.show_status_bar = self.settings.show_status_bar
        self.clear_on_exit = self.settings.clear_on_exit
        self.following = self.settings.following

        self.first_line = 0
        self.left_column = 0
        self._quit = False
        self._last_content: List[Text] = []
        self._keys: Dict[str, Callable[[int], None]] = {
            "q": self._quit_key,
            "esc": self._quit_key,
            "j": lambda page: self._scroll(1),
            "down": lambda page: self._scroll(1),
            "\n": lambda page: self._scroll(1),
            "\r": lambda page: self._scroll(1),
            "k": lambda page: self._scroll(-1),
            "up": lambda page: self._scroll(-1),
            " ": lambda page: self._scroll(page),
            "f": lambda page: self._scroll(page),
            "pgdn": lambda page: self._scroll(page),
            "b": lambda page: self._scroll(-page),
            "pgup": lambda page: self._scroll(-page),
            "g": lambda page: self._goto(0),
            "<": lambda page: self._goto(0),
            "home": lambda page: self._goto(0),
            "G": lambda page: self._goto_end(page),
            ">": lambda page: self._goto_end(page),
            "end": lambda page: self._goto_end(page),
            "left": lambda page: self._shift_left(),
            "right": lambda page: self._shift_right(),
            "=": lambda page: self._toggle("show_status_bar"),
            "w": lambda page: self._toggle("wrap_long_lines"),
        }

    def content_height(self, height: int) -> int:
        return max(1, height - 1) if self.show_status_bar else max(1, height)

    def render(self, width: int, height: int) -> List[Text]:
        """Rows for a ``width`` x ``height`` screen, status bar included."""
        rows_wanted = self.content_height(height)
        total = self.reader.line_count()
        number_width = len(str(max(total, 1))) + 1 if self.show_line_numbers else 0
        text_width = max(1, width - number_width)

        content: List[Text] = []
        line_number = self.first_line
        for line in self.reader.get_lines(self.first_line, rows_wanted):
            line_number += 1
            line = render_unprintable(line, self.settings.unprintable_style)
            for index, row in enumerate(self._fit(line, text_width)):
                if len(content) >= rows_wanted:
                    break
                content.append(self._number(line_number if index == 0 else None, number_width) + row)
        self._last_content = content

        rows = list(content)
        if self.show_status_bar:
            rows.extend(Text("") for _ in range(rows_wanted - len(content)))
            rows.append(self._status_bar(width, line_number, total))
        return rows

    def start_paging(self, screen) -> None:
        """Show the input on ``screen`` until the user quits."""
        while not self._quit:
            width, height = screen.size()
            if self._fits_one_screen(width, height):
                logger.debug("Input fits on one screen, not paging")
                self._last_content = [
                    render_unprintable(line, self.settings.unprintable_style)
                    for line in self.reader.get_lines(0, height)
                ]
                self.clear_on_exit = False
                return

            if self.following:
                self._goto_end(self.content_height(height))
            screen.show(self.render(width, height))

            timeout = None if self.reader.done else _POLL_INTERVAL_SECONDS
            key = screen.read_key(timeout)
            if key is None:
                continue
            logger.log(TRACE, "Key pressed: %r", key)
            handler = self._keys.get(key)
            if handler is not None:
                handler(self.content_height(height))

    def reprint_after_exit(self) -> None:
        """Print the last view to ``output`` once the screen is gone."""
        console = Console(
            file=self.output,
            color_system=self.reader.color_system or "auto",
            highlight=False,
            markup=False,
            emoji=False,
        )
        for row in self._last_content:
            console.print(row, soft_wrap=True)

    def _fits_one_screen(self, width: int, height: int) -> bool:
        if not self.settings.quit_if_one_screen or not self.reader.done:
            return False
        lines = self.reader.get_lines(0, height + 1)
        return len(lines) <= height and all(line.cell_len <= width for line in lines)

    def _fit(self, line: Text, width: int) -> List[Text]:
        length = len(line.plain)
        if self.wrap_long_lines:
            if length <= width:
                return [line.copy()]
            return [line[start : start + width] for start in range(0, length, width)]

        if not self.left_column:
            visible = line.copy()
        elif self.left_column < length:
            visible = line[self.left_column :]
        else:
            visible = Text("")
        if self.left_column and visible.plain:
            visible = self.settings.scroll_left_hint.copy() + visible[1:]
        if visible.cell_len > width:
            visible.truncate(width - 1)
            visible.append_text(self.settings.scroll_right_hint.copy())
        return [visible]

    @staticmethod
    def _number(number: Optional[int], width: int) -> Text:
        if not width:
            return Text("")
        label = "" if number is None else str(number)
        return Text(label.rjust(width - 1) + " ", style="dim")

    def _status_bar(self, width: int, last_line: int, total: int) -> Text:
        name = self.reader.name or "stdin"
        if total == 0:
            position = "<empty>"
        else:
            percent = 100 * last_line // total
            position = f"{self.first_line + 1}-{last_line}/{total} {percent}%"
        more = "" if self.reader.done else "  (reading)"
        bar = Text(f"{name}: {position}{more}  Press 'q' to exit")
        bar.truncate(width, pad=True)
        bar.stylize(self.settings.status_bar_style.rich_style)
        return bar

    def _scroll(self, delta: int) -> None:
        if delta < 0:
            self.following = False
        last_start = max(0, self.reader.line_count() - 1)
        self.first_line = min(max(0, self.first_line + delta), last_start)

    def _goto(self, line: int) -> None:
        self.following = False
        self.first_line = line

    def _goto_end(self, page: int) -> None:
        self.first_line = max(0, self.reader.line_count() - page)

    def _shift_left(self) -> None:
        if self.left_column == 0:
            self.show_line_numbers = True
            return
        self.left_column = max(0, self.left_column - self.settings.side_scroll_amount)

    def _shift_right(self) -> None:
        if not self.wrap_long_lines:
            self.left_column += self.settings.side_scroll_amount

    def _toggle(self, attribute: str) -> None:
        setattr(self, attribute, not getattr(self, attribute))

    def _quit_key(self, page: int) -> None:
        self._quit = True
