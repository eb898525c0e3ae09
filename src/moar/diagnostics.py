"""Bug report header shown whenever something went wrong.

The report is assembled on demand from the environment and the running
platform, and :class:`ProblemReporter` makes sure it reaches stderr at most
once per run no matter how many layers try to report the same failure.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, TextIO

from .version import __version__

__all__ = ["DiagnosticReport", "ProblemReporter"]

ISSUES_URL = "https://github.com/walles/moar/issues"
REPORT_EMAIL = "johan.walles@gmail.com"


@dataclass(frozen=True)
class DiagnosticReport:
    version: str
    lang: str
    term: str
    os_name: str
    arch: str
    runtime: str
    cpu_count: int

    @classmethod
    def collect(cls, environ: Optional[Mapping[str, str]] = None) -> "DiagnosticReport":
        env = os.environ if environ is None else environ
        return cls(
            version=__version__,
            lang=env.get("LANG", ""),
            term=env.get("TERM", ""),
            os_name=platform.system(),
            arch=platform.machine(),
            runtime=f"{platform.python_implementation()} {platform.python_version()}",
            cpu_count=os.cpu_count() or 1,
        )

    def render(self) -> str:
        return "\n".join(
            [
                f"Please post the following report at <{ISSUES_URL}>,",
                f"or e-mail it to {REPORT_EMAIL}.",
                "",
                f"Version: {self.version}",
                f"LANG   : {self.lang}",
                f"TERM   : {self.term}",
                "",
                f"OS     : {self.os_name}",
                f"Arch   : {self.arch}",
                f"Runtime: {self.runtime}",
                f"NumCPU : {self.cpu_count}",
                "",
                "",
            ]
        )


class ProblemReporter:
    """Writes the diagnostic report, plus any log lines, exactly once."""

    def __init__(self, report: DiagnosticReport, stream: TextIO) -> None:
        self._report = report
        self._stream = stream
        self.emitted = False

    def emit(self, log_lines: Iterable[str] = ()) -> bool:
        """Return False if the report had already been written."""
        if self.emitted:
            return False
        self.emitted = True
        self._stream.write(self._report.render())
        for line in log_lines:
            self._stream.write(line if line.endswith("\n") else line + "\n")
        self._stream.flush()
        return True
