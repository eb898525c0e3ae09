"""moar CLI entrypoint.

:func:`run` does all the work and returns an exit status, so every startup
path can be exercised without spawning a process. :func:`main` adds the
outermost fault barrier and turns the status into the process exit code.
"""

from __future__ import annotations

import io
import logging
import os
import sys
from contextlib import contextmanager
from functools import partial
from typing import BinaryIO, Callable, Iterator, Mapping, Optional, Sequence, TextIO

from rich.console import Console
from rich.text import Text

from .diagnostics import DiagnosticReport, ProblemReporter
from .exceptions import (
    CopyError,
    HelpRequested,
    NoInputError,
    OptionError,
    ReaderError,
    ScreenError,
)
from .logging_setup import configure_logging, determine_level
from .modes import Mode, TerminalTopology, copy_stream, select_mode
from .option_parsers import create_option_set
from .options import OptionSet, ResolvedConfiguration
from .pager import Pager, PagerSettings
from .reader import Reader
from .screen import Screen
from .session import ScreenResource, Session
from .usage import UsageContext, format_usage
from .version import __version__

__all__ = ["fault_barrier", "main", "run"]

logger = logging.getLogger(__name__)

ENV_VARIABLE = "MOAR"


@contextmanager
def fault_barrier(reporter: ProblemReporter) -> Iterator[None]:
    """Print the diagnostic report for anything escaping, then re-raise."""
    try:
        yield
    except Exception:
        reporter.emit()
        raise


def _error_console(stderr: TextIO) -> Console:
    return Console(file=stderr, highlight=False, markup=False, emoji=False, soft_wrap=True)


def _write_stdout(stdout: BinaryIO, text: str) -> None:
    stdout.write(text.encode("utf-8"))
    stdout.flush()


def _usage_error(
    console: Console,
    options: OptionSet,
    context: UsageContext,
    message: str,
    bold: bool = False,
) -> int:
    console.print(Text("ERROR: ").append(message, style="bold" if bold else None))
    console.print()
    console.file.write(format_usage(options, context, print_commandline=True))
    return 1


def _copy_file_to_stdout(filename: str, stdout: BinaryIO, console: Console) -> int:
    try:
        source = open(filename, "rb")
    except OSError as exc:
        console.print(f"ERROR: Failed to open {filename}: {exc}")
        return 1
    with source:
        try:
            copy_stream(source, stdout, name=filename)
        except CopyError as exc:
            logger.critical("%s", exc)
            return 1
    return 0


def _copy_stdin_to_stdout(stdin: BinaryIO, stdout: BinaryIO) -> int:
    try:
        copy_stream(stdin, stdout)
    except CopyError as exc:
        logger.critical("%s", exc)
        return 1
    return 0


def _page(
    config: ResolvedConfiguration,
    filename: Optional[str],
    stdin: BinaryIO,
    stdout: BinaryIO,
    console: Console,
    reporter: ProblemReporter,
    screen_factory: Optional[Callable[[], ScreenResource]],
) -> int:
    try:
        if filename is not None:
            reader = Reader.from_filename(filename, config["style"], config["colors"])
        else:
            reader = Reader.from_stream(stdin)
    except ReaderError as exc:
        console.print(f"ERROR: {exc}")
        return 1

    # Text view of stdout for reprinting, detached again so stdout stays open
    output = io.TextIOWrapper(stdout, encoding="utf-8", errors="replace", write_through=True)
    pager = Pager(reader, PagerSettings.from_config(config), output=output)
    factory = screen_factory or partial(
        Screen.open, color_system=config["colors"].color_system
    )
    try:
        return Session(factory, reporter).run(pager)
    except ScreenError as exc:
        console.print(f"ERROR: {exc}")
        return 1
    finally:
        output.flush()
        output.detach()


def run(
    argv: Optional[Sequence[str]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    stderr: Optional[TextIO] = None,
    topology: Optional[TerminalTopology] = None,
    screen_factory: Optional[Callable[[], ScreenResource]] = None,
    reporter: Optional[ProblemReporter] = None,
    program: Optional[str] = None,
) -> int:
    """Run moar once and return the exit status.

    Streams default to the process' standard streams; ``topology`` defaults
    to what those streams are connected to.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    environ = os.environ if environ is None else environ
    stdin = sys.stdin.buffer if stdin is None else stdin
    stdout = sys.stdout.buffer if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr
    reporter = reporter or ProblemReporter(DiagnosticReport.collect(environ), stderr)

    console = _error_console(stderr)
    options = create_option_set(environ)
    context = UsageContext(argv=argv, environ=environ, program=program or sys.argv[0])

    try:
        config = options.resolve(environ.get(ENV_VARIABLE, "").strip(), argv)
    except HelpRequested:
        _write_stdout(stdout, format_usage(options, context, print_commandline=False))
        return 0
    except OptionError as exc:
        return _usage_error(console, options, context, str(exc), bold=True)

    if config["version"]:
        _write_stdout(stdout, __version__ + "\n")
        return 0

    level = determine_level(debug=config["debug"], trace=config["trace"])
    configure_logging(level, stderr)

    if len(config.args) > 1:
        return _usage_error(
            console,
            options,
            context,
            f"Expected exactly one filename, or data piped from stdin, got: {list(config.args)}",
        )
    filename = config.args[0] if config.args else None

    if topology is None:
        topology = TerminalTopology.capture(stdin, stdout, filename)
    try:
        mode = select_mode(topology)
    except NoInputError as exc:
        return _usage_error(console, options, context, str(exc))
    logger.debug("Starting in %s mode, %s", mode.value, topology)

    if mode is Mode.COPY_FILE_TO_STDOUT:
        assert filename is not None
        return _copy_file_to_stdout(filename, stdout, console)
    if mode is Mode.COPY_STDIN_TO_STDOUT:
        return _copy_stdin_to_stdout(stdin, stdout)
    return _page(config, filename, stdin, stdout, console, reporter, screen_factory)


def main() -> None:
    """CLI entrypoint."""
    reporter = ProblemReporter(DiagnosticReport.collect(), sys.stderr)
    try:
        with fault_barrier(reporter):
            rc = run(reporter=reporter)
    except KeyboardInterrupt:
        rc = 130
    sys.exit(rc)


if __name__ == "__main__":
    main()
