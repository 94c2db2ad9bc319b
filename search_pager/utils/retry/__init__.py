from __future__ import annotations

from search_pager.utils.retry.decorator import retry
from search_pager.utils.retry.exceptions import RetryError, RetryStatistics
from search_pager.utils.retry.strategies import RetryPolicy

__all__ = ["RetryError", "RetryPolicy", "RetryStatistics", "retry"]
