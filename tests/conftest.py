"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolate cached settings between tests
    - Search Index Fixtures: in-memory SearchIndex serving synthetic pages
"""

from __future__ import annotations

import os
from typing import Any

import pytest

from search_pager.core.exceptions import IndexNotFoundError
from search_pager.core.settings import clear_all_caches

# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Drop cached settings and SEARCH_/PAGINATION_/LOG_ overrides around each test."""
    for key in list(os.environ):
        if key.startswith(("SEARCH_", "PAGINATION_", "LOG_")):
            monkeypatch.delenv(key, raising=False)
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Search Index Fixtures
# ============================================================================


class FakeIndex:
    """In-memory ``SearchIndex`` over ``total`` synthetic documents.

    Document ``i`` is ``{"n": i}`` with sort values ``[i]``. Every call is
    recorded so tests can assert on the exact request sequence.

    Attributes:
        searches: ``(body, index)`` of every search call.
        opened: Index names a PIT was opened on.
        closed: PIT ids that were closed.
        fail_next: Exception raised by the next search call, then cleared.
        rotate_pit: Return a new PIT id with every page.
        omit_sort: Serve hits without sort values.
    """

    def __init__(
        self,
        total: int = 0,
        *,
        name: str = "findings",
        exists: bool = True,
        rotate_pit: bool = False,
        omit_sort: bool = False,
    ) -> None:
        self.total = total
        self.name = name
        self.exists = exists
        self.rotate_pit = rotate_pit
        self.omit_sort = omit_sort
        self.searches: list[tuple[dict[str, Any], str | None]] = []
        self.opened: list[str] = []
        self.closed: list[str] = []
        self.fail_next: BaseException | None = None
        self._pit_seq = 0

    @property
    def calls(self) -> int:
        return len(self.searches)

    async def search(self, body: dict[str, Any], index: str | None = None) -> dict[str, Any]:
        self.searches.append((body, index))
        if self.fail_next is not None:
            exc, self.fail_next = self.fail_next, None
            raise exc
        if not self.exists:
            raise IndexNotFoundError(index=index)

        start = body["search_after"][0] + 1 if "search_after" in body else 0
        stop = min(start + body["size"], self.total)
        hits = []
        for n in range(start, stop):
            hit: dict[str, Any] = {"_id": str(n), "_index": self.name, "_source": {"n": n}}
            if not self.omit_sort:
                hit["sort"] = [n]
            hits.append(hit)

        response: dict[str, Any] = {
            "took": 1,
            "timed_out": False,
            "hits": {"total": {"value": self.total, "relation": "eq"}, "hits": hits},
        }
        if "pit" in body:
            pit_id = body["pit"]["id"]
            if self.rotate_pit:
                self._pit_seq += 1
                pit_id = f"pit-rotated-{self._pit_seq}"
            response["pit_id"] = pit_id
        return response

    async def open_pit(self, index: str, keep_alive: str) -> str:
        if not self.exists:
            raise IndexNotFoundError(index=index)
        self.opened.append(index)
        self._pit_seq += 1
        return f"pit-{self._pit_seq}"

    async def close_pit(self, pit_id: str) -> None:
        self.closed.append(pit_id)

    async def count(self, query: dict[str, Any], index: str) -> int:
        if not self.exists:
            raise IndexNotFoundError(index=index)
        return self.total


@pytest.fixture
def fake_index():
    """Factory for in-memory search indices.

    Example:
        index = fake_index(25_000)
        paginator = Paginator(index, "findings", limit=25_000, page_size=10_000)
    """
    return FakeIndex
