"""CLI utilities for running async operations and formatting output."""

from search_pager.cli.utils.async_runner import coro
from search_pager.cli.utils.formatters import (
    error,
    header,
    info,
    success,
    warning,
)

__all__ = [
    "coro",
    "error",
    "header",
    "info",
    "success",
    "warning",
]
