"""Logging configuration for moar.

Outside of a paging session log records go to stderr. While a session owns
the terminal they are collected by a :class:`LogBuffer` instead and printed
after the screen has been restored.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, TextIO

__all__ = [
    "TRACE",
    "LogBuffer",
    "StampFormatter",
    "configure_logging",
    "determine_level",
    "get_package_logger",
    "redirect_to_buffer",
]

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

PACKAGE_LOGGER = "moar"
_LOG_FORMAT = "time=%(asctime)s level=%(levelname)s msg=%(message)s"


class StampFormatter(logging.Formatter):
    """Formatter with a ``Jan _2 15:04:05.000000`` style timestamp.

    Level names are written in lower case, ``level=warning``.
    """

    def __init__(self) -> None:
        super().__init__(_LOG_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        # Other handlers may see the same record
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = record.levelname.lower()
        return super().format(record)

    def formatTime(
        self, record: logging.LogRecord, datefmt: Optional[str] = None
    ) -> str:  # noqa: N802 - logging API name
        stamp = datetime.fromtimestamp(record.created)
        return f"{stamp:%b} {stamp.day:2d} {stamp:%H:%M:%S.%f}"


class LogBuffer(logging.Handler):
    """In-memory sink keeping every formatted record, in order."""

    def __init__(self, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.lines: List[str] = []
        self.setFormatter(StampFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.lines.append(self.format(record))
        except Exception:  # noqa: BLE001 - logging must never raise
            self.handleError(record)

    def __bool__(self) -> bool:
        return bool(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


def get_package_logger() -> logging.Logger:
    return logging.getLogger(PACKAGE_LOGGER)


def determine_level(*, debug: bool = False, trace: bool = False) -> int:
    if trace:
        return TRACE
    if debug:
        return logging.DEBUG
    return logging.INFO


def configure_logging(level: int, stream: TextIO) -> logging.Logger:
    """Send package log records at ``level`` and above to ``stream``."""
    logger = get_package_logger()
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False

    handler = logging.StreamHandler(stream)
    handler.setFormatter(StampFormatter())
    logger.addHandler(handler)
    return logger


@contextmanager
def redirect_to_buffer(
    logger: logging.Logger, buffer: LogBuffer
) -> Iterator[LogBuffer]:
    """Route ``logger`` into ``buffer`` only, restoring its handlers after."""
    saved = list(logger.handlers)
    for handler in saved:
        logger.removeHandler(handler)
    logger.addHandler(buffer)
    try:
        yield buffer
    finally:
        logger.removeHandler(buffer)
        for handler in saved:
            logger.addHandler(handler)
