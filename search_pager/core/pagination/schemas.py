"""Response schemas for paged search results.

The paginator is decode-agnostic: it validates each raw response into a
response model and only reads four things from it through the
``PageEnvelope`` protocol:

- how many hits the page returned
- the sort values of the last hit (the next cursor)
- the point-in-time id returned by the store
- the decoded items handed back to the caller

``SearchResponse[T]`` is the default response model, generic over the
``_source`` document type:

    class ComplianceResult(BaseModel):
        controlID: str
        resourceID: str
        complianceStatus: str

    page: Page[ComplianceResult] = await paginator.next_page()
"""

from __future__ import annotations

from typing import Any, Generic, Literal, Protocol, Self, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


@runtime_checkable
class PageEnvelope(Protocol[T]):
    """What the paginator needs from a decoded response."""

    pit_id: str | None

    def hit_count(self) -> int: ...

    def last_sort_key(self) -> list[Any] | None: ...

    def sources(self) -> list[T]: ...


class ResponseModel(PageEnvelope[T], Protocol[T]):
    """A PageEnvelope that can validate itself from a raw response."""

    @classmethod
    def model_validate(cls, obj: Any) -> Self: ...


class SearchTotal(BaseModel):
    """Hit count reported by the store.

    ``relation`` is ``gte`` when the store stopped counting early.
    """

    value: int = 0
    relation: Literal["eq", "gte"] = "eq"


class SearchHit(BaseModel, Generic[T]):
    """A single hit with its document and sort values."""

    id: str | None = Field(default=None, alias="_id")
    index: str | None = Field(default=None, alias="_index")
    score: float | None = Field(default=None, alias="_score")
    version: int | None = Field(default=None, alias="_version")
    source: T = Field(alias="_source")
    sort: list[Any] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class SearchHits(BaseModel, Generic[T]):
    """The ``hits`` object of a search response."""

    total: SearchTotal | None = None
    hits: list[SearchHit[T]] = Field(default_factory=list)


class SearchResponse(BaseModel, Generic[T]):
    """Default response model: ``{"hits": {...}, "pit_id": "..."}``."""

    hits: SearchHits[T] = Field(default_factory=SearchHits)
    pit_id: str | None = None
    took: int | None = None
    timed_out: bool = False

    model_config = ConfigDict(extra="ignore")

    def hit_count(self) -> int:
        return len(self.hits.hits)

    def last_sort_key(self) -> list[Any] | None:
        if not self.hits.hits:
            return None
        return self.hits.hits[-1].sort

    def sources(self) -> list[T]:
        return [hit.source for hit in self.hits.hits]


class Page(BaseModel, Generic[T]):
    """One page of decoded results.

    Attributes:
        items: Decoded documents, in store order.
        hits: Number of hits the store returned for this page.
        last_sort: Sort values of the last hit; the cursor for the next page.
        pit_id: Point-in-time id returned with this page, if any.
        total: Store-reported total for the whole query, if any.
    """

    items: list[T] = Field(default_factory=list)
    hits: int = 0
    last_sort: list[Any] | None = None
    pit_id: str | None = None
    total: SearchTotal | None = None

    @classmethod
    def empty(cls) -> Page[T]:
        """Page returned when there is nothing to read."""
        return cls()


__all__ = [
    "Page",
    "PageEnvelope",
    "ResponseModel",
    "SearchHit",
    "SearchHits",
    "SearchResponse",
    "SearchTotal",
]
