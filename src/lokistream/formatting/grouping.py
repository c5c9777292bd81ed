"""
Stream grouping.

Partitions a batch into streams keyed by label-set equality. Streams come
out in the order their label set was first seen in the batch; events inside
a stream are stably sorted by timestamp, so ties keep their input order.
"""

from __future__ import annotations

from collections.abc import Iterable

from lokistream.formatting.labels import LabelSetBuilder
from lokistream.formatting.models import LabelSet, LogEvent, Stream


class StreamGrouper:
    def __init__(self, labels: LabelSetBuilder):
        self.labels = labels

    def group(self, events: Iterable[LogEvent]) -> list[Stream]:
        # dicts keep insertion order, which gives first-occurrence stream order
        buckets: dict[LabelSet, list[LogEvent]] = {}
        for event in events:
            buckets.setdefault(self.labels.build(event), []).append(event)

        return [
            Stream(labels=label_set, events=tuple(sorted(bucket, key=lambda e: e.timestamp)))
            for label_set, bucket in buckets.items()
        ]
