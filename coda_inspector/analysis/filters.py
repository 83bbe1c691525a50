from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional, Tuple

Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class Exact:
    """Case-insensitive equality with ``value``."""
    value: str

    def __call__(self, actual: str) -> bool:
        return actual.casefold() == self.value.casefold()


@dataclass(frozen=True)
class Substring:
    """Case-insensitive containment of ``value``."""
    value: str

    def __call__(self, actual: str) -> bool:
        return self.value.casefold() in actual.casefold()


@dataclass(frozen=True)
class AnyOf:
    """Case-insensitive equality with any of ``values``."""
    values: Tuple[str, ...]

    def __call__(self, actual: str) -> bool:
        a = actual.casefold()
        return any(a == v.casefold() for v in self.values)


# Short facility designations accepted by --instrument, keyed by lower-case token.
DEFAULT_ALIASES: Dict[str, Tuple[Predicate, ...]] = {
    "tbl": (Substring("test beamline"),),
}


@dataclass(frozen=True)
class InstrumentFilter:
    """
    Matches instrument names against an optional user token.

    A token always matches names equal to it (ignoring case). Tokens present in
    ``aliases`` (keys compared ignoring case) additionally match whatever any of
    their predicates accept.
    """
    aliases: Mapping[str, Tuple[Predicate, ...]] = field(default_factory=lambda: dict(DEFAULT_ALIASES))

    def __post_init__(self) -> None:
        object.__setattr__(self, "aliases", {k.casefold(): tuple(v) for k, v in self.aliases.items()})

    def matches(self, actual: str, token: Optional[str] = None) -> bool:
        if token is None:
            return True
        if Exact(token)(actual):
            return True
        return any(pred(actual) for pred in self.aliases.get(token.casefold(), ()))


_DEFAULT_FILTER = InstrumentFilter()


def matches(actual: str, token: Optional[str] = None) -> bool:
    return _DEFAULT_FILTER.matches(actual, token)
