"""Pydantic Settings v2 configuration.

Settings are split by concern (search store connection, pagination,
logging), each read from environment variables with its own prefix and an
optional .env file, and exposed through LRU-cached loaders:

    from search_pager.core.settings import get_pagination_settings

    page_size = get_pagination_settings().page_size

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .loader import (
    clear_all_caches,
    get_logging_settings,
    get_pagination_settings,
    get_search_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .search import SearchSettings

__all__ = [
    "LoggingSettings",
    "PaginationSettings",
    "SearchSettings",
    "clear_all_caches",
    "get_logging_settings",
    "get_pagination_settings",
    "get_search_settings",
]
