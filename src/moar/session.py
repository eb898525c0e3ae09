"""Crash-safe paging session.

A :class:`Session` owns the terminal while the pager runs. However the pager
call ends, the screen is released before anything else happens, so neither
log output nor a traceback is ever written to a terminal in cbreak mode on
the alternate screen.

Anything logged during the session is buffered. A session that buffered log
output ends with exit status 1, after the diagnostic report and the buffered
lines have been printed to stderr.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from .diagnostics import ProblemReporter
from .logging_setup import LogBuffer, get_package_logger, redirect_to_buffer

__all__ = ["PagerEngine", "ScreenResource", "Session", "SessionState"]


class ScreenResource(Protocol):
    def close(self) -> None: ...


class PagerEngine(Protocol):
    clear_on_exit: bool

    def start_paging(self, screen: Any) -> None: ...

    def reprint_after_exit(self) -> None: ...


class SessionState(Enum):
    NOT_STARTED = "not-started"
    SCREEN_ACTIVE = "screen-active"
    TORN_DOWN = "torn-down"


class Session:
    """One run of a pager on an exclusively owned screen."""

    def __init__(
        self,
        screen_factory: Callable[[], ScreenResource],
        reporter: ProblemReporter,
        logger: Optional[logging.Logger] = None,
        log_buffer: Optional[LogBuffer] = None,
    ) -> None:
        self._screen_factory = screen_factory
        self._reporter = reporter
        self._logger = logger or get_package_logger()
        self.log_buffer = log_buffer if log_buffer is not None else LogBuffer()
        self.screen: Optional[ScreenResource] = None
        self.state = SessionState.NOT_STARTED

    def run(self, pager: PagerEngine) -> int:
        """Page until the pager returns; the exit status is the result.

        Exceptions raised by the pager propagate after the screen has been
        restored and the diagnostic report has been printed. An interrupt
        prints the report only when log lines were buffered.
        """
        if self.state is not SessionState.NOT_STARTED:
            raise RuntimeError(f"Session cannot run from state {self.state.value}")

        with redirect_to_buffer(self._logger, self.log_buffer):
            self.screen = self._screen_factory()
            self.state = SessionState.SCREEN_ACTIVE
            try:
                pager.start_paging(self.screen)
            except Exception:
                self._tear_down()
                self._reporter.emit(self.log_buffer.lines)
                raise
            except BaseException:
                # Interrupted, not crashed: only report if something was logged
                self._tear_down()
                if self.log_buffer:
                    self._reporter.emit(self.log_buffer.lines)
                raise
            finally:
                self._tear_down()

            if not pager.clear_on_exit:
                try:
                    pager.reprint_after_exit()
                except Exception as exc:
                    self._logger.error("Failed reprinting pager view after exit: %s", exc)

        if self.log_buffer:
            self._reporter.emit(self.log_buffer.lines)
            return 1
        return 0

    def _tear_down(self) -> None:
        if self.state is not SessionState.SCREEN_ACTIVE:
            return
        self.state = SessionState.TORN_DOWN
        assert self.screen is not None
        self.screen.close()
