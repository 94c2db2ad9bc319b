"""Helper functions for tracking search and retry metrics."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time
from typing import TYPE_CHECKING

from search_pager.core.exceptions import IndexNotFoundError
from search_pager.infra.metrics import prometheus

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


# ============================================================================
# Store Request Tracking
# ============================================================================


@asynccontextmanager
async def track_search_request(operation: str) -> AsyncIterator[None]:
    """Time a store request and count its outcome.

    A missing index is counted as ``not_found``, separate from ``error``.

    Args:
        operation: Store operation (search, open_pit, close_pit, count)

    Example:
        async with track_search_request("search"):
            response = await client.post("/_search", json=body)
    """
    start = time.perf_counter()
    outcome = "success"
    try:
        yield
    except IndexNotFoundError:
        outcome = "not_found"
        raise
    except BaseException:
        outcome = "error"
        raise
    finally:
        prometheus.search_request_duration_seconds.labels(operation=operation).observe(
            time.perf_counter() - start
        )
        prometheus.search_requests_total.labels(operation=operation, outcome=outcome).inc()


def track_page(index: str, hits: int) -> None:
    """Track one fetched page.

    Args:
        index: Index the paginator traverses
        hits: Hits returned in the page

    Example:
            track_page("compliance_results", 10000)
    """
    prometheus.search_pages_total.labels(index=index).inc()
    prometheus.search_hits_total.labels(index=index).inc(hits)


def track_pit(action: str) -> None:
    """Track a point-in-time open or close.

    Args:
        action: "open" or "close"
    """
    prometheus.search_pit_total.labels(action=action).inc()


# ============================================================================
# Retry Tracking
# ============================================================================


def track_retry_attempt(operation: str, attempt_number: int) -> None:
    """Track a retry attempt.

    Args:
        operation: Name of the operation being retried
        attempt_number: Current attempt number (1-indexed)

    Example:
            track_retry_attempt("search", 2)
    """
    prometheus.retry_attempts_total.labels(
        operation=operation,
        attempt_number=str(attempt_number),
    ).inc()


def track_retry_exhausted(operation: str) -> None:
    """Track when all retry attempts are exhausted."""
    prometheus.retry_exhausted_total.labels(operation=operation).inc()


def track_retry_success(operation: str, attempts_needed: int) -> None:
    """Track successful operation after retries.

    Args:
        operation: Name of the operation
        attempts_needed: Number of attempts needed to succeed
    """
    prometheus.retry_success_after_failure_total.labels(
        operation=operation,
        attempts_needed=str(attempts_needed),
    ).inc()
    logger.debug(
        f"Operation {operation} succeeded after {attempts_needed} attempts",
        extra={"operation": operation, "attempts_needed": attempts_needed},
    )
