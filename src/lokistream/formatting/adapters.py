"""
Adapters from Python-native log data to :class:`LogEvent`.

- ``event_from_record``: a stdlib :class:`logging.LogRecord`
- ``event_from_dict``: a decoded JSON object (one line of NDJSON input)
- ``exception_info_from``: a raised exception and its causes
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from lokistream.core.errors import ValidationError
from lokistream.core.timestamps import from_iso8601
from lokistream.formatting.models import MAX_EXCEPTION_DEPTH, ExceptionInfo, LogEvent, LogLevel

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


def _inner(exc: BaseException) -> BaseException | None:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__context__ is not None and not exc.__suppress_context__:
        return exc.__context__
    return None


def exception_info_from(exc: BaseException) -> ExceptionInfo:
    """Build an :class:`ExceptionInfo` chain, outer exception first."""
    chain: list[BaseException] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen and len(chain) < MAX_EXCEPTION_DEPTH:
        seen.add(id(current))
        chain.append(current)
        current = _inner(current)

    info: ExceptionInfo | None = None
    for link in reversed(chain):
        trace = "".join(traceback.format_tb(link.__traceback__)) if link.__traceback__ else None
        info = ExceptionInfo(message=str(link), trace=trace, cause=info)
    assert info is not None
    return info


def event_from_record(record: logging.LogRecord) -> LogEvent:
    """Convert a stdlib log record; ``extra`` attributes become properties."""
    properties: dict[str, Any] = {"logger": record.name}
    for key, value in vars(record).items():
        if key not in _RECORD_ATTRIBUTES and not key.startswith("_"):
            properties[key] = value

    exception = None
    if record.exc_info and record.exc_info[1] is not None:
        exception = exception_info_from(record.exc_info[1])

    return LogEvent(
        timestamp=datetime.fromtimestamp(record.created, tz=UTC),
        level=LogLevel.from_name(record.levelname),
        message=record.getMessage(),
        properties=properties,
        exception=exception,
    )


def _exception_from_dict(data: Any, field: str = "exception") -> ExceptionInfo | None:
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise ValidationError(f"'{field}' must be a JSON object", field=field, value=data)
    if not data:
        return None
    return ExceptionInfo(
        message=str(data.get("message", "")),
        trace=data.get("trace"),
        cause=_exception_from_dict(data.get("cause"), f"{field}.cause"),
    )


def event_from_dict(data: Mapping[str, Any]) -> LogEvent:
    """
    Build an event from a JSON object.

    Expected keys: ``timestamp`` (ISO-8601, required), ``level``,
    ``message``, ``properties`` (object) and ``exception`` (object with
    ``message``, ``trace`` and a nested ``cause``).
    """
    if not isinstance(data, Mapping):
        raise ValidationError("event must be a JSON object", value=data)
    if "timestamp" not in data:
        raise ValidationError("event is missing 'timestamp'", field="timestamp")

    try:
        timestamp = from_iso8601(str(data["timestamp"]))
        level = LogLevel.from_name(str(data.get("level", LogLevel.INFORMATION.value)))
    except ValueError as e:
        raise ValidationError(str(e), cause=e) from e

    properties = data.get("properties") or {}
    if not isinstance(properties, Mapping):
        raise ValidationError("'properties' must be a JSON object", field="properties")

    return LogEvent(
        timestamp=timestamp,
        level=level,
        message=str(data.get("message", "")),
        properties=properties,
        exception=_exception_from_dict(data.get("exception")),
    )
