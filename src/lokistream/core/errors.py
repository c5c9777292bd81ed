"""
Structured error types for lokistream.

Provides a small hierarchy of typed errors with metadata for categorization,
logging and root cause analysis through error chaining.

Formatting a batch is a pure transform: nothing is retried, and every failure
surfaces synchronously to the caller. The hierarchy exists so callers (a sink,
a CLI, a delivery loop) can tell a bad argument from a bad configuration from
a payload that could not be encoded.

Manifesto:
    - **Typed Error Hierarchy:** Different error types for different causes
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌───────────────────────────────────────────────────────┐
        │                   LokiStreamError                      │
        │           (category, context, cause)                   │
        ├───────────────────────────────────────────────────────┤
        │                                                        │
        │  ValidationError        EncodingError      ConfigError │
        │  (VALIDATION)           (ENCODING)         (CONFIG)    │
        │       │                      │                  │      │
        │  InvalidArgumentError   DuplicateLabelError            │
        │                                   InvalidConfigError   │
        └───────────────────────────────────────────────────────┘

Examples:
    >>> error = InvalidArgumentError("events must not be None", field="events")
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> isinstance(error, ValueError)
    True

Tags:
    error-handling, exception-hierarchy, error-context, lokistream
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    VALIDATION = "VALIDATION"
    ENCODING = "ENCODING"
    CONFIG = "CONFIG"
    IO = "IO"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        stream: Rendered label set of the stream being encoded
        label: Label name involved in the failure
        line: 1-based input line number (CLI input)
        metadata: Additional key-value pairs
    """

    stream: str | None = None
    label: str | None = None
    line: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["stream", "label", "line"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class LokiStreamError(Exception):
    """
    Base exception for all lokistream errors.

    Subclasses set ``default_category`` to classify their domain.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> LokiStreamError:
        """
        Add context to this error (fluent API).

        Usage:
            raise EncodingError("Bad value").with_context(label="app")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(LokiStreamError):
    """Input validation error."""

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class InvalidArgumentError(ValidationError, ValueError):
    """A required argument was missing or unusable."""

    pass


# =============================================================================
# ENCODING ERRORS
# =============================================================================


class EncodingError(LokiStreamError):
    """The payload could not be encoded."""

    default_category = ErrorCategory.ENCODING


class DuplicateLabelError(EncodingError):
    """A stream carries the same label name with different values."""

    def __init__(self, name: str, values: list[str], message: str | None = None):
        self.name = name
        self.values = values
        super().__init__(
            message or f"Label {name!r} has conflicting values: {values!r}",
            context=ErrorContext(label=name),
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(LokiStreamError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, LokiStreamError):
        return error.category
    if isinstance(error, UnicodeError):
        return ErrorCategory.ENCODING
    if isinstance(error, OSError):
        return ErrorCategory.IO
    if isinstance(error, (TypeError, ValueError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "LokiStreamError",
    "ValidationError",
    "InvalidArgumentError",
    "EncodingError",
    "DuplicateLabelError",
    "ConfigError",
    "InvalidConfigError",
    "categorize_error",
]
