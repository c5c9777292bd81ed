"""Loki batch formatting: label sets, streams, line encoding and payload assembly.

Quick start::

    from lokistream.formatting import LokiBatchFormatter, LogEvent

    formatter = LokiBatchFormatter(global_labels={"env": "prod"}, label_names=["app", "level"])
    formatter.format(events, sys.stdout)

Module index::

    models.py      LogEvent, ExceptionInfo, LogLevel, LabelSet, Stream
    sanitize.py    cleanse() / stringify()
    labels.py      LabelSetBuilder + severity_label()
    grouping.py    StreamGrouper
    encoding.py    LineEncoder
    payload.py     PayloadWriter + ScratchBuffer
    formatter.py   LokiBatchFormatter
    adapters.py    LogRecord / dict → LogEvent
"""

from lokistream.formatting.adapters import event_from_dict, event_from_record, exception_info_from
from lokistream.formatting.encoding import LineEncoder, render_exception
from lokistream.formatting.formatter import LokiBatchFormatter
from lokistream.formatting.grouping import StreamGrouper
from lokistream.formatting.labels import LabelSetBuilder, severity_label
from lokistream.formatting.models import (
    DuplicateLabelPolicy,
    ExceptionInfo,
    LabelSet,
    LogEvent,
    LogLevel,
    Stream,
)
from lokistream.formatting.payload import PayloadWriter
from lokistream.formatting.sanitize import cleanse, stringify

__all__ = [
    "LokiBatchFormatter",
    "LogEvent",
    "LogLevel",
    "ExceptionInfo",
    "LabelSet",
    "Stream",
    "DuplicateLabelPolicy",
    "LabelSetBuilder",
    "StreamGrouper",
    "LineEncoder",
    "PayloadWriter",
    "cleanse",
    "stringify",
    "severity_label",
    "render_exception",
    "event_from_dict",
    "event_from_record",
    "exception_info_from",
]
