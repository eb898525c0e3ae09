"""Typed flag registration and layered option resolution.

Flags come from two places: the ``MOAR`` environment variable and the command
line. Environment tokens are placed in front of the command line tokens and
the combined stream is parsed left to right, so the last occurrence of a flag
wins and the command line always overrides the environment.

The grammar is the classic single-dash one: ``-name value``, ``-name=value``,
``--name`` and, for boolean flags, a bare ``-name``. Parsing stops at ``--`` or
at the first token that is not a flag; whatever remains is positional.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

from .exceptions import HelpRequested, OptionError

__all__ = [
    "OptionSet",
    "OptionSpec",
    "ResolvedConfiguration",
    "merge_tokens",
    "parse_bool",
]

T = TypeVar("T")

_HELP_NAMES = frozenset({"h", "help"})
_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(value: str) -> bool:
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    raise ValueError(f'parsing "{value}": invalid syntax')


@dataclass(frozen=True)
class OptionSpec(Generic[T]):
    """One named, typed option with its own validation."""

    name: str
    default: T
    usage: str
    parse: Callable[[str], T]
    is_bool: bool = False

    def convert(self, value: str) -> T:
        try:
            return self.parse(value)
        except ValueError as exc:
            raise OptionError(
                f'invalid value "{value}" for flag -{self.name}: {exc}'
            ) from exc


class ResolvedConfiguration(Mapping[str, Any]):
    """Read-only option values plus the positional arguments left over."""

    __slots__ = ("_values", "_args")

    def __init__(self, values: Mapping[str, Any], args: Sequence[str] = ()) -> None:
        self._values = MappingProxyType(dict(values))
        self._args: Tuple[str, ...] = tuple(args)

    @property
    def args(self) -> Tuple[str, ...]:
        return self._args

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolvedConfiguration):
            return NotImplemented
        return dict(self._values) == dict(other._values) and self._args == other._args

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ResolvedConfiguration({dict(self._values)!r}, args={list(self._args)!r})"


def merge_tokens(env_value: Optional[str], argv: Sequence[str]) -> List[str]:
    """Environment tokens first, then the literal command line."""
    return (env_value or "").split() + list(argv)


class OptionSet:
    """Registry of options keyed by name."""

    def __init__(self) -> None:
        self._specs: Dict[str, OptionSpec[Any]] = {}

    def register(
        self,
        name: str,
        default: T,
        usage: str,
        parse: Callable[[str], T],
        *,
        is_bool: bool = False,
    ) -> OptionSpec[T]:
        if name in self._specs:
            raise ValueError(f"option registered twice: {name}")
        spec = OptionSpec(name, default, usage, parse, is_bool)
        self._specs[name] = spec
        return spec

    def flag(self, name: str, usage: str) -> OptionSpec[bool]:
        """Register a boolean option that defaults to false."""
        return self.register(name, False, usage, parse_bool, is_bool=True)

    def __iter__(self) -> Iterator[OptionSpec[Any]]:
        for name in sorted(self._specs):
            yield self._specs[name]

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def resolve(
        self, env_value: Optional[str], argv: Sequence[str]
    ) -> ResolvedConfiguration:
        """Parse ``env_value`` and ``argv`` into a configuration.

        Raises:
            OptionError: unknown flag, missing value or a parser rejecting its
                value. Nothing partial is returned.
            HelpRequested: ``-h`` or ``-help`` was given.
        """
        tokens = merge_tokens(env_value, argv)
        values: Dict[str, Any] = {name: spec.default for name, spec in self._specs.items()}

        index = 0
        while index < len(tokens):
            token = tokens[index]
            if token == "--":
                index += 1
                break
            if len(token) < 2 or not token.startswith("-"):
                break

            name, value = _split_flag(token)
            spec = self._specs.get(name)
            if spec is None:
                if name in _HELP_NAMES:
                    raise HelpRequested()
                raise OptionError(f"flag provided but not defined: -{name}")

            if value is None:
                if spec.is_bool:
                    value = "true"
                else:
                    index += 1
                    if index >= len(tokens):
                        raise OptionError(f"flag needs an argument: -{name}")
                    value = tokens[index]

            values[name] = spec.convert(value)
            index += 1

        return ResolvedConfiguration(values, tokens[index:])


def _split_flag(token: str) -> Tuple[str, Optional[str]]:
    body = token[2:] if token.startswith("--") else token[1:]
    if not body or body.startswith("-") or body.startswith("="):
        raise OptionError(f"bad flag syntax: {token}")
    name, sep, value = body.partition("=")
    return name, (value if sep else None)
