"""Tests for lokistream.core.errors module."""

from lokistream.core.errors import (
    ConfigError,
    DuplicateLabelError,
    EncodingError,
    ErrorCategory,
    ErrorContext,
    InvalidArgumentError,
    InvalidConfigError,
    LokiStreamError,
    ValidationError,
    categorize_error,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.stream is None
        assert ctx.metadata == {}
        assert ctx.to_dict() == {}

    def test_to_dict_includes_set_fields(self):
        ctx = ErrorContext(label="env", line=3, metadata={"key": "value"})
        assert ctx.to_dict() == {"label": "env", "line": 3, "key": "value"}


class TestLokiStreamError:
    """Test base error behavior."""

    def test_default_category(self):
        assert LokiStreamError("x").category == ErrorCategory.INTERNAL

    def test_cause_is_chained(self):
        cause = KeyError("k")
        error = EncodingError("failed", cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause

    def test_with_context_known_and_unknown_keys(self):
        error = EncodingError("failed").with_context(label="app", batch="b-1")

        assert error.context.label == "app"
        assert error.context.metadata["batch"] == "b-1"

    def test_to_dict(self):
        error = EncodingError("failed", cause=ValueError("bad")).with_context(line=2)
        d = error.to_dict()

        assert d["error_type"] == "EncodingError"
        assert d["category"] == "ENCODING"
        assert d["context"] == {"line": 2}
        assert d["cause"] == "bad"

    def test_repr(self):
        assert repr(ConfigError("nope")) == "ConfigError('nope', category=CONFIG)"


class TestSubclasses:
    def test_invalid_argument_is_value_error(self):
        error = InvalidArgumentError("events must not be None", field="events")

        assert isinstance(error, ValueError)
        assert isinstance(error, ValidationError)
        assert error.category == ErrorCategory.VALIDATION
        assert error.to_dict()["field"] == "events"

    def test_duplicate_label_error(self):
        error = DuplicateLabelError("env", ["dev", "prod"])

        assert isinstance(error, EncodingError)
        assert error.context.label == "env"
        assert "conflicting" in error.message

    def test_invalid_config_error(self):
        error = InvalidConfigError("global_labels", "oops")

        assert error.category == ErrorCategory.CONFIG
        assert "global_labels" in error.message


class TestCategorizeError:
    def test_categories(self):
        assert categorize_error(ConfigError("x")) == ErrorCategory.CONFIG
        assert categorize_error(ValueError("x")) == ErrorCategory.VALIDATION
        assert categorize_error(UnicodeDecodeError("utf-8", b"\xff", 0, 1, "bad")) == ErrorCategory.ENCODING
        assert categorize_error(FileNotFoundError("x")) == ErrorCategory.IO
        assert categorize_error(RuntimeError("x")) == ErrorCategory.UNKNOWN
