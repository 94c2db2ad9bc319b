"""Prometheus metrics for search traffic and pagination."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry so embedding services choose what they expose
REGISTRY = CollectorRegistry()

# Covers store round trips from 5ms to 30s
SEARCH_LATENCY_BUCKETS = (
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    30.0,
)

# ============================================================================
# Store Request Metrics
# ============================================================================

search_requests_total = Counter(
    "search_requests_total",
    "Total requests sent to the search store",
    ["operation", "outcome"],
    registry=REGISTRY,
)

search_request_duration_seconds = Histogram(
    "search_request_duration_seconds",
    "Search store request duration in seconds",
    ["operation"],
    buckets=SEARCH_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# ============================================================================
# Pagination Metrics
# ============================================================================

search_pages_total = Counter(
    "search_pages_total",
    "Pages fetched by paginators",
    ["index"],
    registry=REGISTRY,
)

search_hits_total = Counter(
    "search_hits_total",
    "Hits returned to paginator callers",
    ["index"],
    registry=REGISTRY,
)

search_pit_total = Counter(
    "search_pit_total",
    "Point-in-time snapshots opened and closed",
    ["action"],
    registry=REGISTRY,
)

# ============================================================================
# Retry Metrics
# ============================================================================

retry_attempts_total = Counter(
    "retry_attempts_total",
    "Total number of retry attempts",
    ["operation", "attempt_number"],
    registry=REGISTRY,
)

retry_exhausted_total = Counter(
    "retry_exhausted_total",
    "Total number of operations that exhausted all retries",
    ["operation"],
    registry=REGISTRY,
)

retry_success_after_failure_total = Counter(
    "retry_success_after_failure_total",
    "Total number of operations that succeeded after retry",
    ["operation", "attempts_needed"],
    registry=REGISTRY,
)
