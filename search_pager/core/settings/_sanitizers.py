"""Helpers to sanitize environment variable values before validation."""

from __future__ import annotations

from typing import Any


def strip_inline_comment(value: str) -> str:
    """Remove inline comments of the form "value  # comment".

    Env files edited by hand often carry values like ``10000  # ES window``.
    Only a ``#`` preceded by whitespace starts a comment, so ``abc#def``
    is kept as-is.
    """

    idx = value.find("#")
    if idx == -1:
        return value.strip()
    if idx == 0:
        return ""
    if not value[idx - 1].isspace():
        return value.strip()
    return value[:idx].strip()


def sanitize_inline_value(value: Any) -> Any:
    """Normalize scalar env vars that may include inline comments."""

    if isinstance(value, str):
        cleaned = strip_inline_comment(value)
        if cleaned:
            return cleaned
    return value
