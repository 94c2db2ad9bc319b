"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from search_pager.core.settings.loader import get_pagination_settings

    settings = get_pagination_settings()  # First call: loads and validates
    settings = get_pagination_settings()  # Subsequent calls: cached instance

Testing:
    In tests, clear the cache to force reload:
    get_pagination_settings.cache_clear()
"""

from __future__ import annotations

from functools import lru_cache

from .logs import LoggingSettings
from .pagination import PaginationSettings
from .search import SearchSettings


@lru_cache(maxsize=1)
def get_search_settings() -> SearchSettings:
    """Get cached search store connection settings.

    Returns:
        Validated and frozen SearchSettings instance.
    """
    return SearchSettings()


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Get cached pagination settings.

    Returns:
        Validated and frozen PaginationSettings instance.
    """
    return PaginationSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_caches() -> None:
    """Drop every cached settings instance."""
    get_search_settings.cache_clear()
    get_pagination_settings.cache_clear()
    get_logging_settings.cache_clear()
