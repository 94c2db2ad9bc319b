"""Point-in-time cursor pagination over a search store.

This module pages through result sets larger than the store's result
window by combining a point-in-time snapshot with ``search_after`` cursors:
- Consistent: Every page reads the same snapshot
- Bounded: Each request asks for at most ``page_size`` hits
- Resumable: The cursor is the sort values of the previous page's last hit

Page by page:
    paginator = Paginator(client, "compliance_results", [TermFilter("kind", "aws")])
    while paginator.has_next():
        page = await paginator.next_page()
        handle(page.items)

Item by item:
    async with Paginator(client, index, filters, source_model=Finding) as paginator:
        async for finding in paginator.items():
            handle(finding)
"""

from search_pager.core.pagination.envelope import (
    SHARD_DOC_SORT,
    PitReference,
    SearchEnvelope,
    build_envelope,
)
from search_pager.core.pagination.filters import (
    BoolFilter,
    MustNotFilter,
    RangeFilter,
    TermFilter,
    TermsFilter,
    build_query,
)
from search_pager.core.pagination.paginator import UNBOUNDED, Paginator, PaginatorState
from search_pager.core.pagination.pit import PointInTime
from search_pager.core.pagination.schemas import (
    Page,
    PageEnvelope,
    ResponseModel,
    SearchHit,
    SearchHits,
    SearchResponse,
    SearchTotal,
)

__all__ = [
    "SHARD_DOC_SORT",
    "UNBOUNDED",
    # Filters
    "BoolFilter",
    "MustNotFilter",
    "Page",
    "PageEnvelope",
    # Paginator
    "Paginator",
    "PaginatorState",
    "PitReference",
    "PointInTime",
    "RangeFilter",
    "ResponseModel",
    # Request envelope
    "SearchEnvelope",
    # Response schemas
    "SearchHit",
    "SearchHits",
    "SearchResponse",
    "SearchTotal",
    "TermFilter",
    "TermsFilter",
    "build_envelope",
    "build_query",
]
