"""
Tests for lokistream.formatting.adapters.

Tests cover:
- LogRecord conversion (extra properties, level, exception chain)
- Exception chains from raised exceptions
- JSON object conversion and its validation errors
"""

import logging
from datetime import UTC, datetime

import pytest

from lokistream.core.errors import ValidationError
from lokistream.formatting.adapters import event_from_dict, event_from_record, exception_info_from
from lokistream.formatting.models import LogLevel


def _record(msg="hello %s", args=("world",), level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord("app.module", level, __file__, 10, msg, args, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _raise_chain():
    try:
        try:
            raise KeyError("inner")
        except KeyError as e:
            raise RuntimeError("outer") from e
    except RuntimeError as e:
        return e


class TestExceptionInfoFrom:
    def test_follows_explicit_cause(self):
        info = exception_info_from(_raise_chain())
        links = list(info.chain())

        assert [link.message for link in links] == ["outer", "'inner'"]
        assert all(link.trace for link in links)

    def test_follows_implicit_context(self):
        try:
            try:
                raise ValueError("first")
            except ValueError:
                raise TypeError("second")
        except TypeError as e:
            info = exception_info_from(e)

        assert [link.message for link in info.chain()] == ["second", "first"]

    def test_suppressed_context_ignored(self):
        try:
            try:
                raise ValueError("first")
            except ValueError:
                raise TypeError("second") from None
        except TypeError as e:
            info = exception_info_from(e)

        assert [link.message for link in info.chain()] == ["second"]

    def test_unraised_exception_has_no_trace(self):
        info = exception_info_from(ValueError("never raised"))
        assert info.trace is None
        assert info.cause is None


class TestEventFromRecord:
    def test_basic_fields(self):
        record = _record()
        event = event_from_record(record)

        assert event.message == "hello world"
        assert event.level is LogLevel.INFORMATION
        assert event.timestamp == datetime.fromtimestamp(record.created, tz=UTC)
        assert event.properties["logger"] == "app.module"

    def test_extra_attributes_become_properties(self):
        event = event_from_record(_record(user="bob", request_id="r-1"))

        assert event.properties["user"] == "bob"
        assert event.properties["request_id"] == "r-1"
        assert "lineno" not in event.properties
        assert "msg" not in event.properties

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (logging.DEBUG, LogLevel.DEBUG),
            (logging.WARNING, LogLevel.WARNING),
            (logging.ERROR, LogLevel.ERROR),
            (logging.CRITICAL, LogLevel.FATAL),
        ],
    )
    def test_levels(self, level, expected):
        assert event_from_record(_record(level=level)).level is expected

    def test_exception_chain(self):
        exc = _raise_chain()
        record = _record(level=logging.ERROR, exc_info=(type(exc), exc, exc.__traceback__))

        event = event_from_record(record)

        assert event.exception is not None
        assert event.exception.message == "outer"
        assert event.exception.cause.message == "'inner'"

    def test_exc_info_without_exception(self):
        record = _record(exc_info=(None, None, None))
        assert event_from_record(record).exception is None


class TestEventFromDict:
    def test_full_object(self):
        event = event_from_dict(
            {
                "timestamp": "2024-01-01T00:00:01Z",
                "level": "Warning",
                "message": "disk low",
                "properties": {"host": "h1", "free": 3},
                "exception": {"message": "A", "trace": "tA", "cause": {"message": "B", "trace": "tB"}},
            }
        )

        assert event.timestamp == datetime(2024, 1, 1, 0, 0, 1, tzinfo=UTC)
        assert event.level is LogLevel.WARNING
        assert event.message == "disk low"
        assert dict(event.properties) == {"host": "h1", "free": 3}
        assert [link.message for link in event.exception.chain()] == ["A", "B"]

    def test_defaults(self):
        event = event_from_dict({"timestamp": "2024-01-01T00:00:00+00:00"})

        assert event.level is LogLevel.INFORMATION
        assert event.message == ""
        assert dict(event.properties) == {}
        assert event.exception is None

    def test_missing_timestamp(self):
        with pytest.raises(ValidationError, match="timestamp"):
            event_from_dict({"message": "x"})

    def test_bad_timestamp(self):
        with pytest.raises(ValidationError):
            event_from_dict({"timestamp": "yesterday"})

    def test_bad_level(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            event_from_dict({"timestamp": "2024-01-01T00:00:00Z", "level": "loud"})

    def test_properties_must_be_object(self):
        with pytest.raises(ValidationError, match="properties"):
            event_from_dict({"timestamp": "2024-01-01T00:00:00Z", "properties": [1, 2]})

    def test_not_an_object(self):
        with pytest.raises(ValidationError):
            event_from_dict(["not", "an", "object"])

    def test_exception_must_be_object(self):
        with pytest.raises(ValidationError, match="'exception' must be a JSON object") as exc_info:
            event_from_dict({"timestamp": "2024-01-01T00:00:00Z", "exception": "boom"})
        assert exc_info.value.field == "exception"

    def test_nested_cause_must_be_object(self):
        data = {
            "timestamp": "2024-01-01T00:00:00Z",
            "exception": {"message": "A", "cause": ["B"]},
        }
        with pytest.raises(ValidationError, match="'exception.cause' must be a JSON object"):
            event_from_dict(data)

    def test_null_exception_allowed(self):
        event = event_from_dict({"timestamp": "2024-01-01T00:00:00Z", "exception": None})
        assert event.exception is None
