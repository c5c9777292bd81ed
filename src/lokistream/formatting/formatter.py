"""
Loki batch formatter.

Turns a batch of log events into one Loki push payload
(https://grafana.com/docs/loki/latest/reference/loki-http-api/#ingest-logs).

Manifesto:
    Delivery, batching and retries belong to whoever owns the HTTP client.
    The formatter is a pure, synchronous transform:

    - **One write:** the sink sees the complete payload or nothing
    - **Call-scoped state:** buffers live for one call, so one formatter
      can be shared between threads
    - **Injectable clock:** the batch instant used when original timestamps
      are not preserved comes from ``clock``, not the wall clock directly

Architecture:
    ::

        events ──► StreamGrouper ──► [Stream, ...] ──► PayloadWriter ──► output.write()
                      │                                     │
                 LabelSetBuilder                       LineEncoder

Examples:
    >>> import io
    >>> from datetime import datetime, UTC
    >>> formatter = LokiBatchFormatter(global_labels={"env": "prod"}, label_names=["level"])
    >>> out = io.StringIO()
    >>> formatter.format([LogEvent(datetime(2024, 1, 1, tzinfo=UTC), message="hi")], out)
    >>> out.getvalue()[:60]
    '{"streams":[{"stream":{"level":"info","env":"prod"},"values"'

Tags:
    loki, formatter, streams, payload, lokistream
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TextIO

from lokistream.core.errors import InvalidArgumentError
from lokistream.core.logging import get_logger
from lokistream.core.timestamps import Clock, utc_now
from lokistream.formatting.encoding import LineEncoder
from lokistream.formatting.grouping import StreamGrouper
from lokistream.formatting.labels import LabelSetBuilder
from lokistream.formatting.models import DuplicateLabelPolicy, LabelPair, LogEvent
from lokistream.formatting.payload import PayloadWriter

logger = get_logger(__name__)


class LokiBatchFormatter:
    """
    Formats batches of :class:`LogEvent` into Loki push payloads.

    Args:
        global_labels: Static labels added to every stream
        label_names: Property names promoted to labels; ``"level"`` adds the
            severity label
        preserve_timestamps: Use each event's own time on the wire. When
            False every entry of a call carries the same batch instant and the
            original time moves into the line's ``timestamp`` field
        duplicate_label_policy: Which value a stream object keeps when one
            label name carries several values
        clock: Source of the batch instant
    """

    def __init__(
        self,
        global_labels: Iterable[LabelPair] | dict[str, Any] | None = None,
        label_names: Iterable[str] | None = None,
        preserve_timestamps: bool = True,
        duplicate_label_policy: DuplicateLabelPolicy = DuplicateLabelPolicy.LAST,
        clock: Clock = utc_now,
    ):
        self.labels = LabelSetBuilder(label_names, global_labels)
        self.grouper = StreamGrouper(self.labels)
        self.encoder = LineEncoder(preserve_timestamps)
        self.writer = PayloadWriter(self.encoder, DuplicateLabelPolicy(duplicate_label_policy))
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Any, clock: Clock = utc_now) -> LokiBatchFormatter:
        """Build a formatter from :class:`~lokistream.core.config.FormatterSettings`."""
        return cls(
            global_labels=settings.global_labels,
            label_names=settings.labels,
            preserve_timestamps=settings.preserve_timestamps,
            duplicate_label_policy=settings.duplicate_label_policy,
            clock=clock,
        )

    @property
    def preserve_timestamps(self) -> bool:
        return self.encoder.preserve_timestamps

    def format(
        self,
        events: Iterable[LogEvent] | None,
        output: TextIO | None,
        clock: Clock | None = None,
    ) -> None:
        """Write the payload for ``events`` to ``output``; an empty batch writes nothing."""
        if events is None:
            raise InvalidArgumentError("events must not be None", field="events")
        if output is None:
            raise InvalidArgumentError("output must not be None", field="output")

        batch = list(events)
        if not batch:
            logger.debug("empty_batch_skipped")
            return

        override = None if self.preserve_timestamps else (clock or self.clock)()
        streams = self.grouper.group(batch)
        size = self.writer.write(streams, output, override)

        logger.debug(
            "payload_formatted",
            events=len(batch),
            streams=len(streams),
            chars=size,
        )
