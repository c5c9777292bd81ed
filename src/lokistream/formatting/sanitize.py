"""
Wire-safety cleanup for label and property values.

Some enrichers hand over strings that still carry their own surrounding
quotes, which survive JSON escaping as redundant quotes and get the push
rejected. Loki also rejects CRLF line endings and backslashes in these
values, so all three are rewritten before the encoder escapes the result.
"""

from datetime import datetime
from typing import Any, overload

from lokistream.core.timestamps import to_iso8601


@overload
def cleanse(value: str) -> str: ...


@overload
def cleanse(value: None) -> None: ...


def cleanse(value: str | None) -> str | None:
    """Remove ``"``, turn CRLF into LF and backslashes into forward slashes.

    >>> cleanse('a"b\\r\\nc\\\\d')
    'ab\\nc/d'
    """
    if value is None:
        return None
    return value.replace('"', "").replace("\r\n", "\n").replace("\\", "/")


def stringify(value: Any) -> str:
    """Render a scalar property value as text."""
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        return to_iso8601(value)
    return str(value)


def clean_value(value: Any) -> str:
    """Stringify then cleanse a property value."""
    return cleanse(stringify(value))
