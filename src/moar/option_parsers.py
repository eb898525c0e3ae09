"""Value parsers for every moar option, and the option registry itself."""

from __future__ import annotations

from typing import Callable, Mapping

from pygments.styles import get_all_styles
from rich.text import Text

from .options import OptionSet
from .types import ColorDepth, StatusBarStyle, UnprintableStyle

__all__ = [
    "DEFAULT_SCROLL_LEFT_HINT",
    "DEFAULT_SCROLL_RIGHT_HINT",
    "STYLE_CATALOG_URL",
    "create_option_set",
    "make_colors_parser",
    "parse_scroll_hint",
    "parse_shift_amount",
    "parse_status_bar_style",
    "parse_style",
    "parse_unprintable_style",
]

STYLE_CATALOG_URL = "https://pygments.org/styles/"
DEFAULT_STYLE = "native"
DEFAULT_SHIFT = 16
DEFAULT_SCROLL_LEFT_HINT = Text("<", style="reverse")
DEFAULT_SCROLL_RIGHT_HINT = Text(">", style="reverse")


def parse_style(value: str) -> str:
    if value not in set(get_all_styles()):
        raise ValueError(f"Pick a style from here: {STYLE_CATALOG_URL}")
    return value


def make_colors_parser(term: str) -> Callable[[str], ColorDepth]:
    """Build the ``-colors`` parser; ``auto`` is decided from ``term``."""

    def parse_colors(value: str) -> ColorDepth:
        if value.lower() == "auto":
            # Covers "xterm-256color" as used by the macOS Terminal
            value = "256" if "256" in term else "16M"
        try:
            return ColorDepth(value.upper())
        except ValueError:
            raise ValueError("Valid counts are 8, 16, 256, 16M or auto.") from None

    return parse_colors


def parse_status_bar_style(value: str) -> StatusBarStyle:
    try:
        return StatusBarStyle(value)
    except ValueError:
        raise ValueError("good ones are inverse, plain and bold") from None


def parse_unprintable_style(value: str) -> UnprintableStyle:
    try:
        return UnprintableStyle(value)
    except ValueError:
        raise ValueError("Good ones are highlight or whitespace") from None


def parse_scroll_hint(value: str) -> Text:
    """Parse one character, optionally wrapped in ANSI styling.

    The literal word ``ESC`` stands for the escape character so hints can be
    written in shell rc files without embedding control characters.
    """
    hint = Text.from_ansi(value.replace("ESC", "\x1b"))
    if len(hint.plain) == 1:
        return hint
    raise ValueError(
        "Expected exactly one (optionally highlighted) character. "
        "For example: 'ESC[2m…'"
    )


def parse_shift_amount(value: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f'parsing "{value}": invalid syntax')
    amount = int(value)
    if amount < 1:
        raise ValueError(f"Shift amount must be at least 1, was {amount}")
    return amount


def create_option_set(environ: Mapping[str, str]) -> OptionSet:
    """Register every option moar understands."""
    options = OptionSet()
    options.flag("version", "Prints the moar version number")
    options.flag("debug", "Print debug logs after exiting")
    options.flag("trace", "Print trace logs after exiting")

    options.flag("wrap", "Wrap long lines")
    options.flag("follow", 'Follow piped input just like "tail -f"')
    options.register(
        "style",
        DEFAULT_STYLE,
        f"Highlighting style from {STYLE_CATALOG_URL}",
        parse_style,
    )
    options.register(
        "colors",
        ColorDepth.TWO_FIFTY_SIX,
        "Highlighting palette size: 8, 16, 256, 16M, auto",
        make_colors_parser(environ.get("TERM", "")),
    )
    options.flag(
        "no-linenumbers", "Hide line numbers on startup, press left arrow key to show"
    )
    options.flag("no-statusbar", "Hide the status bar, toggle with '='")
    options.flag("quit-if-one-screen", "Don't page if contents fits on one screen")
    options.flag("no-clear-on-exit", "Retain screen contents when exiting moar")
    options.register(
        "statusbar",
        StatusBarStyle.INVERSE,
        "Status bar style: inverse, plain or bold",
        parse_status_bar_style,
    )
    options.register(
        "render-unprintable",
        UnprintableStyle.HIGHLIGHT,
        "How unprintable characters are rendered: highlight or whitespace",
        parse_unprintable_style,
    )
    options.register(
        "scroll-left-hint",
        DEFAULT_SCROLL_LEFT_HINT,
        "Shown when view can scroll left. One character with optional ANSI highlighting.",
        parse_scroll_hint,
    )
    options.register(
        "scroll-right-hint",
        DEFAULT_SCROLL_RIGHT_HINT,
        "Shown when view can scroll right. One character with optional ANSI highlighting.",
        parse_scroll_hint,
    )
    options.register(
        "shift",
        DEFAULT_SHIFT,
        "Horizontal scroll amount >=1, defaults to 16",
        parse_shift_amount,
    )
    return options
