"""Formatter configuration.

Quick start::

    from lokistream.core.config import get_settings

    settings = get_settings()
    print(settings.labels)   # ["app", "level"] with LOKI_LABELS='["app","level"]'
"""

from .settings import FormatterSettings, clear_settings_cache, get_settings, parse_label_pairs

__all__ = [
    "FormatterSettings",
    "get_settings",
    "clear_settings_cache",
    "parse_label_pairs",
]
