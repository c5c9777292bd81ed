"""lokistream: format structured log batches into Grafana Loki push payloads."""

from lokistream.core.errors import InvalidArgumentError, LokiStreamError
from lokistream.formatting import (
    DuplicateLabelPolicy,
    ExceptionInfo,
    LabelSet,
    LogEvent,
    LogLevel,
    LokiBatchFormatter,
    cleanse,
)

__version__ = "0.1.0"

__all__ = [
    "LokiBatchFormatter",
    "LogEvent",
    "LogLevel",
    "ExceptionInfo",
    "LabelSet",
    "DuplicateLabelPolicy",
    "cleanse",
    "LokiStreamError",
    "InvalidArgumentError",
    "__version__",
]
