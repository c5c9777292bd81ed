"""
Centralized settings for lokistream.

Manifesto:
    One validated, cached settings object instead of every entry point
    parsing ``LOKI_*`` environment variables its own way.

All fields can be set via ``LOKI_*`` environment variables or a ``.env``
file. List and mapping fields take JSON, e.g.
``LOKI_LABELS='["app","level"]'`` and ``LOKI_GLOBAL_LABELS='{"env":"prod"}'``.

Tags:
    lokistream, configuration, settings, pydantic, caching, validation
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lokistream.core.errors import InvalidConfigError
from lokistream.formatting.models import DuplicateLabelPolicy


class FormatterSettings(BaseSettings):
    """Loki formatter configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOKI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Labels ───────────────────────────────────────────────────
    labels: list[str] = Field(default_factory=list, description="Property names promoted to labels")
    global_labels: dict[str, str] = Field(default_factory=dict, description="Labels added to every stream")
    duplicate_label_policy: DuplicateLabelPolicy = Field(default=DuplicateLabelPolicy.LAST)

    # ── Timestamps ───────────────────────────────────────────────
    preserve_timestamps: bool = Field(default=True)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            raise ValueError(f"unsupported log level: {value}")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in {"json", "console"}:
            raise ValueError(f"unsupported log format: {value}")
        return value


def parse_label_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings into a label mapping."""
    result: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            raise InvalidConfigError("global_labels", pair, f"Expected KEY=VALUE, got {pair!r}")
        result[name] = value
    return result


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, FormatterSettings] = {}


def get_settings(*, _force_reload: bool = False) -> FormatterSettings:
    """Load, validate, and cache a :class:`FormatterSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = FormatterSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings (used by tests)."""
    _settings_cache.clear()
