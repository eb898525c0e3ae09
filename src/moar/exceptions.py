"""moar exception hierarchy."""

from __future__ import annotations

__all__ = [
    "CopyError",
    "HelpRequested",
    "MoarError",
    "NoInputError",
    "OptionError",
    "ReaderError",
    "ScreenError",
    "UsageError",
]


class MoarError(Exception):
    """Base class for moar exceptions."""


class UsageError(MoarError):
    """Raised when the command line cannot be used as given."""


class OptionError(UsageError):
    """Raised when an option is unknown, lacks a value or fails to parse."""


class NoInputError(UsageError):
    """Raised when there is neither a filename nor an input pipe."""

    def __init__(self, message: str = "Filename or input pipe required") -> None:
        super().__init__(message)


class HelpRequested(Exception):
    """Signals that usage should be printed and the run should succeed."""


class CopyError(MoarError):
    """Raised when pumping input to stdout fails."""


class ReaderError(MoarError):
    """Raised when an input file cannot be opened for paging."""


class ScreenError(MoarError):
    """Raised when the terminal cannot be taken over for paging."""
