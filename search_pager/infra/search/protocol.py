"""Search index protocol.

This module defines the only store capability the paginator consumes:
run a search, and open/close a point-in-time snapshot. Any client that
implements these coroutines can back a paginator (the HTTP ``SearchClient``,
an in-memory fake in tests, a wrapper adding tenancy, ...).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SearchIndex(Protocol):
    """Protocol interface for search stores.

    Uses structural typing (Protocol) rather than inheritance for flexibility.

    Implementations must raise ``IndexNotFoundError`` when the target index
    does not exist, ``TransportError`` for other store failures and
    ``DecodeError`` when the store answers with something that is not JSON.

    Example:
        class InMemoryIndex:
            async def search(self, body, index=None):
                return {"hits": {"hits": []}}

            async def open_pit(self, index, keep_alive):
                return "pit-1"

            async def close_pit(self, pit_id):
                return None
    """

    async def search(self, body: dict[str, Any], index: str | None = None) -> dict[str, Any]:
        """Run a search request.

        Args:
            body: Request body (size, query, pit, sort, search_after).
            index: Target index. ``None`` for point-in-time requests, which
                are bound to the index the PIT was opened on.

        Returns:
            Raw JSON response.
        """
        ...

    async def open_pit(self, index: str, keep_alive: str) -> str:
        """Open a point-in-time snapshot on ``index`` and return its id."""
        ...

    async def close_pit(self, pit_id: str) -> None:
        """Release a point-in-time snapshot."""
        ...


@runtime_checkable
class CountableIndex(SearchIndex, Protocol):
    """Search store that can also count matching documents."""

    async def count(self, query: dict[str, Any], index: str) -> int:
        """Count documents in ``index`` matching ``query``."""
        ...


__all__ = ["CountableIndex", "SearchIndex"]
