"""Custom exception classes for search pagination."""

from __future__ import annotations

from typing import Any


class SearchPagerError(Exception):
    """Base search pagination exception.

    All custom exceptions should inherit from this class.

    Attributes:
        detail: Human-readable error message.
        type: Error type identifier.
        extra: Additional context-specific information about the error.

    Example:
            raise SearchPagerError(
            detail="Search request failed",
            type="search-failed",
            extra={"index": "compliance_results"}
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "search-error",
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize search pagination exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.type = type
        self.extra = extra or {}
        super().__init__(detail)


class IndexNotFoundError(SearchPagerError):
    """Exception raised when the target index does not exist.

    The paginator recovers from this locally and reports an empty result.

    Example:
            raise IndexNotFoundError(index="rc_analytics_connection_summary")
    """

    def __init__(
        self,
        index: str | None = None,
        detail: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize index not found exception.

        Args:
            index: Name of the missing index, when known.
            detail: Human-readable error message.
            extra: Additional context about the error.
        """
        self.index = index
        merged_extra = {"index": index, **(extra or {})}
        super().__init__(
            detail=detail or f"Index {index or '<unknown>'} not found",
            type="index_not_found_exception",
            extra=merged_extra,
        )


class InvalidLimitError(SearchPagerError):
    """Exception raised when a paginator is built with a negative limit."""

    def __init__(self, limit: int) -> None:
        """Initialize invalid limit exception.

        Args:
            limit: The rejected limit.
        """
        self.limit = limit
        super().__init__(
            detail=f"invalid limit: {limit}",
            type="invalid-limit",
            extra={"limit": limit},
        )


class ExhaustedError(SearchPagerError):
    """Exception raised when a page is requested from a finished paginator."""

    def __init__(self, index: str) -> None:
        """Initialize exhausted exception.

        Args:
            index: Index the paginator was traversing.
        """
        super().__init__(
            detail="no more page to query",
            type="paginator-exhausted",
            extra={"index": index},
        )


class TransportError(SearchPagerError):
    """Exception raised for search store failures.

    Covers HTTP error responses and network failures that survived the
    transport's retry policy.

    Example:
            raise TransportError(
            detail="search_phase_execution_exception: all shards failed",
            status_code=400,
            error_type="search_phase_execution_exception",
        )
    """

    def __init__(
        self,
        detail: str,
        status_code: int | None = None,
        error_type: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize transport exception.

        Args:
            detail: Human-readable error message.
            status_code: HTTP status code returned by the store, if any.
            error_type: Error type reported by the store, if any.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.error_type = error_type
        merged_extra = {"status_code": status_code, "error_type": error_type, **(extra or {})}
        super().__init__(detail=detail, type="transport-error", extra=merged_extra)


class DecodeError(SearchPagerError):
    """Exception raised when a response body cannot be decoded."""

    def __init__(
        self,
        detail: str,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize decode exception.

        Args:
            detail: Human-readable error message.
            extra: Additional context about the error.
        """
        super().__init__(detail=detail, type="decode-error", extra=extra)


__all__ = [
    "DecodeError",
    "ExhaustedError",
    "IndexNotFoundError",
    "InvalidLimitError",
    "SearchPagerError",
    "TransportError",
]
