"""Utility helpers shared by the configuration and document loaders."""

from __future__ import annotations

TRUE_STRINGS = frozenset({"true", "yes", "on"})
FALSE_STRINGS = frozenset({"false", "no", "off"})


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_bool(value: object) -> bool | None:
    """Return ``value`` as a bool, or None when it cannot be read as one.

    YAML 1.2 only treats ``true``/``false`` as booleans, so the
    ``yes``/``no``/``on``/``off`` spellings common in older front matter
    arrive as strings and are accepted here case-insensitively.
    """
    match value:
        case bool():
            return value
        case str() as text:
            lowered = text.strip().lower()
            if lowered in TRUE_STRINGS:
                return True
            if lowered in FALSE_STRINGS:
                return False
            return None
        case _:
            return None


def _normalize_base_url(value: object | None) -> str:
    """Return ``value`` without a trailing slash, or an empty string."""
    text = _optional_str(value)
    if not text:
        return ""
    return text.rstrip("/")


__all__ = ["_coerce_bool", "_normalize_base_url", "_optional_str"]
