"""
Line encoding for a single event.

Every Loki entry is a ``[timestamp, line]`` pair. The timestamp is integer
nanoseconds since the epoch as a decimal string; the line is a compact JSON
object rendered here:

    {"message": ..., <property>: ..., "timestamp": ..., "exception": ...}

``timestamp`` is only written when original timestamps are not preserved
(the wire timestamp then carries the batch instant instead, so the event's
own time would otherwise be lost). ``exception`` is only written when the
event carries one.

Properties named like one of the synthesized fields are written under
``RESERVED_FIELD_PREFIX + name`` so the synthesized value is never
overwritten. When that name is itself a property of the event, a numeric
suffix is added (``property_message_1``, ``property_message_2``, ...) until
the name is free, so every key of a line object is unique.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Set
from datetime import datetime
from typing import TextIO

from lokistream.core.timestamps import to_iso8601, to_unix_nanos
from lokistream.formatting.models import ExceptionInfo, LogEvent
from lokistream.formatting.sanitize import clean_value

MESSAGE_FIELD = "message"
TIMESTAMP_FIELD = "timestamp"
EXCEPTION_FIELD = "exception"
RESERVED_FIELDS = frozenset({MESSAGE_FIELD, TIMESTAMP_FIELD, EXCEPTION_FIELD})
RESERVED_FIELD_PREFIX = "property_"


def json_string(value: str) -> str:
    """Encode one string as a JSON string literal."""
    return json.dumps(value, ensure_ascii=False)


def render_exception(exception: ExceptionInfo) -> str:
    """Each chain link's message then trace, one per line, outer link first."""
    parts: list[str] = []
    for link in exception.chain():
        parts.append(f"{link.message}\n")
        parts.append(f"{link.trace or ''}\n")
    return "".join(parts)


def field_name(name: str, taken: Set[str] = frozenset()) -> str:
    """Line-object key for property ``name``; renamed keys avoid ``taken``."""
    if name not in RESERVED_FIELDS:
        return name
    candidate = RESERVED_FIELD_PREFIX + name
    suffix = 0
    while candidate in taken:
        suffix += 1
        candidate = f"{RESERVED_FIELD_PREFIX}{name}_{suffix}"
    return candidate


class LineEncoder:
    """Renders events into wire timestamps and line objects."""

    def __init__(self, preserve_timestamps: bool = True):
        self.preserve_timestamps = preserve_timestamps

    def wire_timestamp(self, event: LogEvent, override: datetime | None = None) -> str:
        """Nanoseconds since epoch: the event's own time, or the batch override."""
        if self.preserve_timestamps or override is None:
            return str(to_unix_nanos(event.timestamp))
        return str(to_unix_nanos(override))

    def fields(self, event: LogEvent) -> Iterator[tuple[str, str]]:
        """Yield the line object's (name, value) fields in write order."""
        yield MESSAGE_FIELD, event.message

        taken = set(event.properties) | RESERVED_FIELDS
        for name, value in event.properties.items():
            key = field_name(name, taken)
            taken.add(key)
            yield key, clean_value(value)

        if not self.preserve_timestamps:
            yield TIMESTAMP_FIELD, to_iso8601(event.timestamp)

        if event.exception is not None:
            yield EXCEPTION_FIELD, render_exception(event.exception)

    def encode(self, event: LogEvent, buffer: TextIO) -> None:
        """Write the event's line object as compact JSON into ``buffer``."""
        buffer.write("{")
        for index, (name, value) in enumerate(self.fields(event)):
            if index:
                buffer.write(",")
            buffer.write(json_string(name))
            buffer.write(":")
            buffer.write(json_string(value))
        buffer.write("}")
