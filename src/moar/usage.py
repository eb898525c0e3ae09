"""Usage text for ``moar -help`` and for usage errors."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

from .options import OptionSet

__all__ = ["UsageContext", "format_option_defaults", "format_usage", "moar_path"]

logger = logging.getLogger(__name__)

README_URL = "https://github.com/walles/moar#readme"


@dataclass(frozen=True)
class UsageContext:
    """What the usage text needs to know about this invocation."""

    argv: Sequence[str]
    environ: Mapping[str, str]
    program: str = "moar"

    @property
    def moar_env(self) -> str:
        return self.environ.get("MOAR", "")


def _abs_look_path(path: str) -> Optional[str]:
    if not path:
        return None
    found = shutil.which(path)
    return os.path.abspath(found) if found else None


def moar_path(program: str) -> str:
    """``moar`` if we're in the ``$PATH``, otherwise an absolute path."""
    if os.path.isabs(program):
        return program
    if os.sep in program:
        return os.path.abspath(program)
    return program


def format_option_defaults(options: OptionSet) -> str:
    lines: List[str] = []
    for spec in options:
        lines.append(f"  -{spec.name}" if spec.is_bool else f"  -{spec.name} value")
        lines.append(f"    \t{spec.usage}")
    return "\n".join(lines) + "\n"


def _default_pager_advice(context: UsageContext) -> List[str]:
    own_path = _abs_look_path(context.program)
    if own_path is None:
        logger.warning("Unable to find moar binary %s", context.program)
        return []

    if _abs_look_path(context.environ.get("PAGER", "")) == own_path:
        return []

    return [
        "",
        "Making moar your default pager:",
        "  Put the following line in your ~/.bashrc, ~/.bash_profile or ~/.zshrc",
        "  and moar will be used as the default pager in all new terminal windows:",
        "",
        f"     export PAGER={moar_path(context.program)}",
    ]


def format_usage(
    options: OptionSet, context: UsageContext, print_commandline: bool
) -> str:
    """Full usage text, optionally prefixed with how we were invoked."""
    lines: List[str] = []
    if print_commandline:
        lines.append(f"Commandline: moar {' '.join(context.argv)}")
        lines.append(f'Environment: MOAR="{context.moar_env}"')
        lines.append("")

    lines += [
        "Usage:",
        "  moar [options] <file>",
        "  ... | moar",
        "  moar < file",
        "",
        "Shows file contents. Compressed files will be transparently decompressed.",
        "Input is expected to be (possibly compressed) UTF-8 encoded text. Invalid /",
        "non-printable characters are by default rendered as '?'.",
        "",
        "More information + source code:",
        f"  <{README_URL}>",
        "",
        "Environment:",
    ]
    if context.moar_env:
        lines.append("  Additional options are read from the MOAR environment variable.")
        lines.append(f'  Current setting: MOAR="{context.moar_env}"')
    else:
        lines.append("  Additional options are read from the MOAR environment variable if set.")
        lines.append("  But currently, the MOAR environment variable is not set.")

    lines += _default_pager_advice(context)
    lines += ["", "Options:"]
    return "\n".join(lines) + "\n" + format_option_defaults(options)
