"""Typed option values shared by the option parsers and the pager."""

from __future__ import annotations

from enum import Enum

__all__ = ["ColorDepth", "StatusBarStyle", "UnprintableStyle"]


class ColorDepth(str, Enum):
    """Highlighting palette size."""

    EIGHT = "8"
    SIXTEEN = "16"
    TWO_FIFTY_SIX = "256"
    TRUE_COLOR = "16M"

    @property
    def color_system(self) -> str:
        """The rich color system that renders this palette."""
        return _COLOR_SYSTEMS[self]


_COLOR_SYSTEMS = {
    ColorDepth.EIGHT: "standard",
    ColorDepth.SIXTEEN: "standard",
    ColorDepth.TWO_FIFTY_SIX: "256",
    ColorDepth.TRUE_COLOR: "truecolor",
}


class StatusBarStyle(str, Enum):
    INVERSE = "inverse"
    PLAIN = "plain"
    BOLD = "bold"

    @property
    def rich_style(self) -> str:
        return {"inverse": "reverse", "plain": "none", "bold": "bold"}[self.value]


class UnprintableStyle(str, Enum):
    """How control characters in the input are drawn."""

    HIGHLIGHT = "highlight"
    WHITESPACE = "whitespace"
