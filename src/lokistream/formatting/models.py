"""
Data model for Loki batch formatting.

Manifesto:
    Loki groups log lines into *streams*, each identified by a set of
    labels. The types here carry exactly what the formatter needs and
    nothing more:

    - **LogEvent:** one immutable input event
    - **ExceptionInfo:** an explicit, finite exception chain
    - **LabelSet:** a set of (name, value) pairs with set equality
    - **Stream:** a label set plus its time-ordered events

Architecture:
    ::

        LogEvent ──► LabelSet (per event) ──► Stream (per distinct LabelSet)
           │                                     │
           └── ExceptionInfo ─► cause ─► ...     └── events sorted by timestamp

Tags:
    data-model, loki, labels, streams, lokistream
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from lokistream.core.timestamps import ensure_utc

MAX_EXCEPTION_DEPTH = 32

LabelPair = tuple[str, str]


class LogLevel(str, Enum):
    """Event severity levels."""

    VERBOSE = "Verbose"
    DEBUG = "Debug"
    INFORMATION = "Information"
    WARNING = "Warning"
    ERROR = "Error"
    FATAL = "Fatal"

    @classmethod
    def from_name(cls, name: str | LogLevel) -> LogLevel:
        """Resolve a level from its own name or a Python logging level name."""
        if isinstance(name, LogLevel):
            return name
        key = name.strip().lower()
        try:
            return _LEVEL_ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown log level: {name!r}") from None


_LEVEL_ALIASES: dict[str, LogLevel] = {
    **{level.value.lower(): level for level in LogLevel},
    "trace": LogLevel.VERBOSE,
    "notset": LogLevel.VERBOSE,
    "info": LogLevel.INFORMATION,
    "warn": LogLevel.WARNING,
    "critical": LogLevel.FATAL,
}


class DuplicateLabelPolicy(str, Enum):
    """How a stream object renders one label name carrying several values."""

    FIRST = "first"
    LAST = "last"
    REJECT = "reject"


@dataclass(frozen=True)
class ExceptionInfo:
    """One link of an exception chain, outermost first."""

    message: str
    trace: str | None = None
    cause: ExceptionInfo | None = None

    def chain(self) -> Iterator[ExceptionInfo]:
        """Yield this link and every inner cause, stopping on a cycle."""
        seen: set[int] = set()
        current: ExceptionInfo | None = self
        depth = 0
        while current is not None and id(current) not in seen and depth < MAX_EXCEPTION_DEPTH:
            seen.add(id(current))
            yield current
            current = current.cause
            depth += 1


@dataclass(frozen=True)
class LogEvent:
    """
    An immutable structured log event.

    Attributes:
        timestamp: When the event happened; naive values are taken as UTC
        level: Severity
        message: Rendered message (template already substituted)
        properties: Ordered property name → scalar value mapping
        exception: Optional exception chain
    """

    timestamp: datetime
    level: LogLevel = LogLevel.INFORMATION
    message: str = ""
    properties: Mapping[str, Any] = field(default_factory=dict)
    exception: ExceptionInfo | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
        object.__setattr__(self, "level", LogLevel.from_name(self.level))
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))


class LabelSet:
    """
    A set of (name, value) label pairs.

    Two label sets are equal when they hold exactly the same pairs, whatever
    order the pairs were added in, and the hash is computed over the same
    canonical form. Insertion order of distinct pairs is kept for rendering.
    The same name may appear with several values.
    """

    __slots__ = ("_pairs", "_key")

    def __init__(self, pairs: Iterable[LabelPair] = ()):
        self._pairs: tuple[LabelPair, ...] = tuple(dict.fromkeys(pairs))
        self._key = frozenset(self._pairs)

    @property
    def pairs(self) -> tuple[LabelPair, ...]:
        """Distinct pairs in insertion order."""
        return self._pairs

    def canonical(self) -> tuple[LabelPair, ...]:
        """Pairs sorted by (name, value)."""
        return tuple(sorted(self._pairs))

    def names(self) -> list[str]:
        """Distinct label names in first-seen order."""
        return list(dict.fromkeys(name for name, _ in self._pairs))

    def __iter__(self) -> Iterator[LabelPair]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, pair: object) -> bool:
        return pair in self._key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LabelSet):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={value!r}" for name, value in self.canonical())
        return f"LabelSet({inner})"


@dataclass(frozen=True)
class Stream:
    """A label set and its events in non-decreasing timestamp order."""

    labels: LabelSet
    events: tuple[LogEvent, ...]


__all__ = [
    "MAX_EXCEPTION_DEPTH",
    "LabelPair",
    "LogLevel",
    "DuplicateLabelPolicy",
    "ExceptionInfo",
    "LogEvent",
    "LabelSet",
    "Stream",
]
