"""
CLI utility helpers: consoles and NDJSON event input.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import TextIO

from rich.console import Console

from lokistream.core.errors import ValidationError
from lokistream.formatting import LogEvent, event_from_dict

console = Console()
err_console = Console(stderr=True)


def read_events(stream: TextIO) -> Iterator[LogEvent]:
    """Yield one event per non-blank NDJSON line of ``stream``."""
    for lineno, raw in enumerate(stream, start=1):
        if not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"invalid JSON: {e.msg}", cause=e).with_context(line=lineno) from e
        try:
            yield event_from_dict(data)
        except ValidationError as e:
            raise e.with_context(line=lineno)
