"""Shared primitives: errors, logging, timestamps and configuration."""

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

__all__ = [
    "ConfigError",
    "DuplicateLabelError",
    "EncodingError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidArgumentError",
    "InvalidConfigError",
    "LokiStreamError",
    "ValidationError",
    "categorize_error",
]
