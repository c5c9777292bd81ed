"""
Shared pytest fixtures and configuration for lokistream tests.

This module provides:
- Settings cache cleanup for test isolation
- Deterministic clocks for golden payloads
- Sample events and an event factory
"""

import json
import logging
import os
import sys
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import structlog

# Ensure lokistream package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lokistream.core.config import clear_settings_cache
from lokistream.core.logging import clear_context
from lokistream.formatting import ExceptionInfo, LogEvent, LogLevel

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)
BASE_TIME = datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC)


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        if not any(True for _ in item.iter_markers()):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear cached settings and stray LOKI_* variables around each test."""
    for key in list(os.environ):
        if key.startswith("LOKI_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(Path(__file__).parent)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def reset_logging() -> Generator[None, None, None]:
    """Restore structlog defaults and root logging after configure_logging()."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    clear_context()
    yield
    clear_context()
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


# =============================================================================
# Deterministic Time
# =============================================================================


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def counting_clock() -> Callable[[], datetime]:
    """Clock that advances one second per call; exposes ``calls``."""

    def clock() -> datetime:
        clock.calls += 1
        return FIXED_NOW + timedelta(seconds=clock.calls)

    clock.calls = 0
    return clock


# =============================================================================
# Sample Events
# =============================================================================


@pytest.fixture
def make_event() -> Callable[..., LogEvent]:
    """Factory: ``make_event(seconds=0, level=..., message=..., **properties)``."""

    def factory(
        seconds: float = 0,
        level: LogLevel = LogLevel.INFORMATION,
        message: str = "hello",
        exception: ExceptionInfo | None = None,
        **properties,
    ) -> LogEvent:
        return LogEvent(
            timestamp=BASE_TIME + timedelta(seconds=seconds),
            level=level,
            message=message,
            properties=properties,
            exception=exception,
        )

    return factory


@pytest.fixture
def parse_payload() -> Callable[[str], dict]:
    """Parse a payload and decode every line string into a dict."""

    def parse(payload: str) -> dict:
        doc = json.loads(payload)
        for stream in doc["streams"]:
            stream["lines"] = [json.loads(line) for _, line in stream["values"]]
        return doc

    return parse
