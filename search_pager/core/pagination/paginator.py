"""Cursor paginator over a point-in-time snapshot.

The paginator walks a result set that can be larger than the store's
result window (10,000 documents) one bounded page at a time:

1. When the caller's limit can reach a full page, it opens a point in time
   (PIT) so every page reads the same snapshot.
2. Each page request carries the sort values of the previous page's last
   hit in ``search_after``; the ``_shard_doc`` tiebreaker gives the
   snapshot a total order to resume from.
3. It stops when the limit is exceeded, a page comes back empty, or a page
   comes back short, and then releases the PIT.

Usage:
    paginator = Paginator(
        client,
        "compliance_results",
        [TermsFilter("benchmarkID", ["cis-aws-v3"])],
        limit=None,
        source_model=ComplianceResult,
    )
    while paginator.has_next():
        page = await paginator.next_page()
        for result in page.items:
            ...

    # or
    async with paginator:
        async for result in paginator.items():
            ...

A paginator is one traversal: do not share it between concurrent tasks.
Tasks that traverse several queries at once should each build their own
paginator over a shared client.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import sys
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import ValidationError

from search_pager.core.exceptions import (
    DecodeError,
    ExhaustedError,
    IndexNotFoundError,
    InvalidLimitError,
    SearchPagerError,
)
from search_pager.core.pagination.envelope import SearchEnvelope, build_envelope
from search_pager.core.pagination.filters import BoolFilter, build_query
from search_pager.core.pagination.pit import PointInTime
from search_pager.core.pagination.schemas import Page, PageEnvelope, ResponseModel, SearchResponse
from search_pager.core.settings import get_logging_settings, get_pagination_settings
from search_pager.infra.metrics.tracking import track_page

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from search_pager.infra.search.protocol import SearchIndex

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNBOUNDED = sys.maxsize


@dataclass(frozen=True, slots=True)
class PaginatorState:
    """Snapshot of a paginator's traversal state."""

    index: str
    query: dict[str, Any]
    sort: list[dict[str, Any]] | None
    page_size: int
    limit: int
    uses_pit: bool
    pit_id: str | None
    queried: int
    search_after: list[Any] | None
    done: bool


class Paginator(Generic[T]):
    """Page through every document matching a filter set.

    Attributes:
        index: Index being traversed.
        query: Query object built from the filters.
        page_size: Hits requested per page.
        limit: Documents wanted; ``UNBOUNDED`` when the caller gave none.
        uses_pit: Whether this traversal reads through a point in time,
            decided once at construction (``limit >= page_size``).
        queried: Hits returned so far.
        done: Terminal state; ``next_page()`` raises once set.
    """

    def __init__(
        self,
        client: SearchIndex,
        index: str,
        filters: Sequence[BoolFilter] | None = None,
        limit: int | None = None,
        *,
        source_model: type[T] | None = None,
        response_model: type[ResponseModel[T]] | None = None,
        sort: Sequence[dict[str, Any]] | None = None,
        page_size: int | None = None,
        keep_alive: str | None = None,
        log_queries: bool | None = None,
    ) -> None:
        """Initialize a paginator. No request is sent until the first page.

        Args:
            client: Store implementing the ``SearchIndex`` protocol.
            index: Index to traverse.
            filters: Bool filters ANDed together; ``None`` matches everything.
            limit: Documents wanted; ``None`` means unbounded.
            source_model: Type each hit's ``_source`` is validated into.
            response_model: Custom response model implementing ``PageEnvelope``;
                overrides ``source_model``.
            sort: Caller sort clauses, applied before the ``_shard_doc`` tiebreaker.
            page_size: Hits per page (default from ``PaginationSettings``).
            keep_alive: PIT keep-alive (default from ``PaginationSettings``).
            log_queries: Log every request body at DEBUG (default from ``LoggingSettings``).

        Raises:
            InvalidLimitError: ``limit`` is negative.
            ValueError: ``page_size`` is not positive.
        """
        if limit is not None and limit < 0:
            raise InvalidLimitError(limit)

        settings = get_pagination_settings()
        page_size = settings.page_size if page_size is None else page_size
        if page_size < 1:
            msg = f"page_size must be positive, got {page_size}"
            raise ValueError(msg)

        self.client = client
        self.index = index
        self.query = build_query(filters)
        self.sort = list(sort) if sort else None
        self.page_size = page_size
        self.limit = UNBOUNDED if limit is None else limit
        self.uses_pit = self.limit >= self.page_size
        self.queried = 0
        self.search_after: list[Any] | None = None
        self.done = False

        self._pit = PointInTime(
            client,
            index,
            keep_alive or settings.pit_keep_alive,
            enabled=self.uses_pit,
        )
        if response_model is not None:
            self._response_model: type[ResponseModel[Any]] = response_model
        elif source_model is not None:
            self._response_model = SearchResponse[source_model]  # type: ignore[valid-type]
        else:
            self._response_model = SearchResponse
        self._log_queries = (
            get_logging_settings().include_queries if log_queries is None else log_queries
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def pit_id(self) -> str | None:
        return self._pit.pit_id

    @property
    def state(self) -> PaginatorState:
        return PaginatorState(
            index=self.index,
            query=self.query,
            sort=self.sort,
            page_size=self.page_size,
            limit=self.limit,
            uses_pit=self.uses_pit,
            pit_id=self._pit.pit_id,
            queried=self.queried,
            search_after=list(self.search_after) if self.search_after is not None else None,
            done=self.done,
        )

    def has_next(self) -> bool:
        """Whether another ``next_page()`` call is allowed."""
        return not self.done

    async def next_page(self) -> Page[T]:
        """Fetch the next page.

        State only changes after a page was received and decoded and, for
        the last page, its point in time was released. A call that failed or
        was cancelled can be retried as is.

        Returns:
            The decoded page; empty when the index does not exist.

        Raises:
            ExhaustedError: The paginator is done.
            TransportError: The store request failed.
            DecodeError: The response did not match the response model.
        """
        if self.done:
            raise ExhaustedError(self.index)

        try:
            await self._pit.ensure_open()
            envelope = self._build_envelope()
            raw = await self._execute(envelope)
        except IndexNotFoundError:
            logger.info(
                "Index not found, treating as empty result",
                extra={"index": self.index},
            )
            await self._finish()
            return Page.empty()

        response = self._decode(raw)
        hits = response.hit_count()
        last_sort = response.last_sort_key() if hits > 0 else None
        queried = self.queried + hits
        done = queried > self.limit or hits == 0 or hits < self.page_size

        if not done and not last_sort:
            msg = "last hit carries no sort values, cannot request the next page"
            raise DecodeError(msg, extra={"index": self.index, "queried": self.queried})

        # a rotated id names the same snapshot, so it is adopted before any release
        self._pit.refresh(response.pit_id)
        page: Page[T] = Page(
            items=response.sources(),
            hits=hits,
            last_sort=last_sort,
            pit_id=response.pit_id,
            total=response.hits.total if isinstance(response, SearchResponse) else None,
        )
        if done:
            # cancelled here, the cursor is still behind this page
            await self._finish()

        self.queried = queried
        if hits > 0:
            self.search_after = last_sort
        track_page(self.index, hits)

        logger.debug(
            "Fetched search page",
            extra={
                "index": self.index,
                "hits": hits,
                "queried": self.queried,
                "limit": self.limit,
                "done": done,
            },
        )
        return page

    async def close(self) -> None:
        """Stop the traversal and release its point in time.

        Safe to call more than once and after the traversal finished.
        """
        self.done = True
        await self._pit.close()

    async def items(self) -> AsyncIterator[T]:
        """Iterate over every item of every remaining page."""
        async for page in self:
            for item in page.items:
                yield item

    def __aiter__(self) -> AsyncIterator[Page[T]]:
        return self._iter_pages()

    async def __aenter__(self) -> Paginator[T]:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _iter_pages(self) -> AsyncIterator[Page[T]]:
        while self.has_next():
            yield await self.next_page()

    def _build_envelope(self) -> SearchEnvelope:
        return build_envelope(
            self.page_size,
            self.query,
            pit_id=self._pit.pit_id,
            keep_alive=self._pit.keep_alive,
            sort=self.sort,
            search_after=self.search_after,
        )

    async def _execute(self, envelope: SearchEnvelope) -> dict[str, Any]:
        body = envelope.to_body()
        if self._log_queries:
            logger.debug(
                "Search page request",
                extra={"index": self.index, "query": json.dumps(body, default=str)},
            )
        # a PIT is already bound to its index
        index = None if envelope.pit is not None else self.index
        return await self.client.search(body, index=index)

    def _decode(self, raw: dict[str, Any]) -> PageEnvelope[T]:
        try:
            return self._response_model.model_validate(raw)
        except ValidationError as e:
            msg = f"search response for {self.index} does not match {self._response_model.__name__}"
            raise DecodeError(msg, extra={"index": self.index, "errors": e.error_count()}) from e

    async def _finish(self) -> None:
        try:
            await self._pit.close()
        except SearchPagerError as e:
            # the page was already read; an unreleased PIT expires with its keep-alive
            logger.warning(
                "Failed to close point in time",
                extra={"index": self.index, "error": e.detail},
                exc_info=True,
            )
        self.done = True


__all__ = ["UNBOUNDED", "PaginatorState", "Paginator"]
