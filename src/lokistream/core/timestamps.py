"""
UTC timestamp utilities for the Loki wire format (stdlib-only).

Manifesto:
    Loki wants entry timestamps as integer nanoseconds since the Unix epoch,
    rendered as a decimal string. Python datetimes carry microseconds, so the
    conversion is exact integer arithmetic on the timedelta from the epoch,
    never a float round-trip through ``datetime.timestamp()``.

Features:
    - **utc_now():** Timezone-aware UTC datetime (the default clock)
    - **ensure_utc():** Treat naive datetimes as UTC
    - **to_unix_nanos():** Exact nanoseconds since epoch
    - **to_iso8601():** ISO-8601 UTC string with ``Z`` suffix

Tags:
    timestamps, utc, datetime, lokistream, stdlib-only
"""

from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_NANOS_PER_SECOND = 1_000_000_000
_NANOS_PER_MICROSECOND = 1_000


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime; naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_unix_nanos(dt: datetime) -> int:
    """Convert a datetime to integer nanoseconds since the Unix epoch."""
    delta = ensure_utc(dt) - EPOCH
    return (
        (delta.days * 86_400 + delta.seconds) * _NANOS_PER_SECOND
        + delta.microseconds * _NANOS_PER_MICROSECOND
    )


def to_iso8601(dt: datetime) -> str:
    """Render a datetime as ISO-8601 in UTC with a ``Z`` suffix."""
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def from_iso8601(s: str) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix accepted) into an aware datetime."""
    return ensure_utc(datetime.fromisoformat(s))
