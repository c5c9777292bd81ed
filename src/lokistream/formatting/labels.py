"""
Label set derivation for a single event.

Only three sources feed a label set: event properties promoted by name,
the severity label (when ``level`` is one of the promoted names) and the
global static labels. The rendered message never becomes a label.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from lokistream.formatting.models import LabelPair, LabelSet, LogEvent, LogLevel
from lokistream.formatting.sanitize import clean_value

LEVEL_LABEL = "level"


def severity_label(level: LogLevel) -> str:
    """Map a level to its label value: ``info`` for Information, else lowercase name."""
    if level is LogLevel.INFORMATION:
        return "info"
    return level.value.lower()


class LabelSetBuilder:
    """Builds the label set of each event from a fixed configuration."""

    def __init__(
        self,
        label_names: Iterable[str] | None = None,
        global_labels: Iterable[LabelPair] | dict[str, Any] | None = None,
    ):
        self.label_names: frozenset[str] = frozenset(label_names or ())
        if isinstance(global_labels, dict):
            global_labels = global_labels.items()
        self.global_labels: tuple[LabelPair, ...] = tuple(
            (str(name), str(value)) for name, value in (global_labels or ())
        )

    def build(self, event: LogEvent) -> LabelSet:
        pairs: list[LabelPair] = [
            (name, clean_value(value))
            for name, value in event.properties.items()
            if name in self.label_names
        ]
        if LEVEL_LABEL in self.label_names:
            pairs.append((LEVEL_LABEL, severity_label(event.level)))
        pairs.extend(self.global_labels)
        return LabelSet(pairs)
