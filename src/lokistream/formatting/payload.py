"""
Payload assembly for the Loki push API.

Writes the whole document into one in-memory buffer and hands it to the
output sink with a single ``write`` call once it is complete, so a failure
halfway through never leaves a truncated payload behind:

    {"streams":[{"stream":{"<label>":"<value>"},"values":[["<ns>","<line>"]]}]}

Each line object is rendered into a scratch buffer that is reused for every
line of the call and reset after each one.
"""

from __future__ import annotations

import io
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import TextIO

from lokistream.core.errors import DuplicateLabelError
from lokistream.formatting.encoding import LineEncoder, json_string
from lokistream.formatting.models import DuplicateLabelPolicy, LabelPair, LabelSet, Stream


class ScratchBuffer:
    """A reusable text buffer, reset after every :meth:`line` scope."""

    def __init__(self) -> None:
        self._buffer = io.StringIO()

    @contextmanager
    def line(self) -> Iterator[io.StringIO]:
        try:
            yield self._buffer
        finally:
            self._buffer.seek(0)
            self._buffer.truncate(0)

    def close(self) -> None:
        self._buffer.close()

    def __enter__(self) -> ScratchBuffer:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def resolve_labels(labels: LabelSet, policy: DuplicateLabelPolicy) -> list[LabelPair]:
    """Collapse a label set to one value per name, in first-seen name order."""
    values: dict[str, list[str]] = {}
    for name, value in labels:
        values.setdefault(name, []).append(value)

    resolved: list[LabelPair] = []
    for name, candidates in values.items():
        if len(candidates) > 1 and policy is DuplicateLabelPolicy.REJECT:
            raise DuplicateLabelError(name, candidates)
        if policy is DuplicateLabelPolicy.FIRST:
            resolved.append((name, candidates[0]))
        else:
            resolved.append((name, candidates[-1]))
    return resolved


class PayloadWriter:
    """Encodes grouped streams and writes the finished document once."""

    def __init__(
        self,
        encoder: LineEncoder,
        duplicate_label_policy: DuplicateLabelPolicy = DuplicateLabelPolicy.LAST,
    ):
        self.encoder = encoder
        self.duplicate_label_policy = duplicate_label_policy

    def render(self, streams: Sequence[Stream], override: datetime | None = None) -> str:
        """Build the complete payload document."""
        document = io.StringIO()
        document.write('{"streams":[')

        with ScratchBuffer() as scratch:
            for stream_index, stream in enumerate(streams):
                if stream_index:
                    document.write(",")
                self._write_labels(document, stream.labels)

                document.write(',"values":[')
                for event_index, event in enumerate(stream.events):
                    if event_index:
                        document.write(",")
                    document.write("[")
                    document.write(json_string(self.encoder.wire_timestamp(event, override)))
                    document.write(",")
                    with scratch.line() as line:
                        self.encoder.encode(event, line)
                        document.write(json_string(line.getvalue()))
                    document.write("]")
                document.write("]}")

        document.write("]}")
        return document.getvalue()

    def write(
        self,
        streams: Sequence[Stream],
        output: TextIO,
        override: datetime | None = None,
    ) -> int:
        """Render the payload and write it to ``output``; returns its length."""
        payload = self.render(streams, override)
        output.write(payload)
        return len(payload)

    def _write_labels(self, document: io.StringIO, labels: LabelSet) -> None:
        document.write('{"stream":{')
        try:
            resolved = resolve_labels(labels, self.duplicate_label_policy)
        except DuplicateLabelError as e:
            raise e.with_context(stream=repr(labels))
        for index, (name, value) in enumerate(resolved):
            if index:
                document.write(",")
            document.write(json_string(name))
            document.write(":")
            document.write(json_string(value))
        document.write("}")
