from __future__ import annotations

import os
import stat
from pathlib import Path

from moar.option_parsers import create_option_set
from moar.usage import UsageContext, format_option_defaults, format_usage, moar_path


def _fake_binary(tmp_path: Path) -> str:
    binary = tmp_path / "moar"
    binary.write_text("#!/bin/sh\n", encoding="utf-8")
    binary.chmod(binary.stat().st_mode | stat.S_IXUSR)
    return str(binary)


def test_usage_with_commandline() -> None:
    context = UsageContext(
        argv=["-shift", "0"], environ={"MOAR": "-wrap"}, program="/nonexistent/moar"
    )
    text = format_usage(create_option_set({}), context, print_commandline=True)
    assert text.startswith("Commandline: moar -shift 0\n")
    assert 'Environment: MOAR="-wrap"' in text
    assert 'Current setting: MOAR="-wrap"' in text
    assert "Options:" in text


def test_usage_without_moar_variable() -> None:
    context = UsageContext(argv=[], environ={}, program="/nonexistent/moar")
    text = format_usage(create_option_set({}), context, print_commandline=False)
    assert text.startswith("Usage:")
    assert "the MOAR environment variable is not set" in text


def test_default_pager_advice_when_pager_is_something_else(tmp_path: Path) -> None:
    program = _fake_binary(tmp_path)
    context = UsageContext(argv=[], environ={"PAGER": "/nonexistent/less"}, program=program)
    text = format_usage(create_option_set({}), context, print_commandline=False)
    assert f"export PAGER={program}" in text


def test_no_advice_when_already_the_pager(tmp_path: Path) -> None:
    program = _fake_binary(tmp_path)
    context = UsageContext(argv=[], environ={"PAGER": program}, program=program)
    text = format_usage(create_option_set({}), context, print_commandline=False)
    assert "Making moar your default pager" not in text


def test_option_defaults_are_sorted() -> None:
    text = format_option_defaults(create_option_set({}))
    assert "  -shift value\n    \tHorizontal scroll amount >=1, defaults to 16\n" in text
    assert "  -wrap\n" in text
    assert text.index("-colors") < text.index("-wrap")


def test_moar_path() -> None:
    assert moar_path("moar") == "moar"
    assert moar_path("/usr/local/bin/moar") == "/usr/local/bin/moar"
    assert moar_path("./moar") == os.path.abspath("./moar")
