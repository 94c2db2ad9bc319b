"""Search request envelope.

The envelope is the JSON body of one page request:

    {"size": 10000, "query": {...}, "pit": {"id": "...", "keep_alive": "1m"},
     "sort": [{"_shard_doc": "desc"}], "search_after": [12345]}

Optional fields are left out of the wire body when unset.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

SHARD_DOC_SORT: dict[str, str] = {"_shard_doc": "desc"}


class PitReference(BaseModel):
    """Point-in-time reference attached to a page request."""

    id: str = Field(min_length=1, description="Point-in-time id returned by the store")
    keep_alive: str = Field(description="Keep-alive extension for this request")

    model_config = {"frozen": True}


class SearchEnvelope(BaseModel):
    """One page request body.

    Attributes:
        size: Number of hits requested.
        query: Query object (bool filter or match_all).
        pit: Point-in-time reference, set only for PIT-backed traversals.
        sort: Sort clauses; required whenever ``pit`` is set.
        search_after: Sort values of the previous page's last hit.
    """

    size: int = Field(ge=0)
    query: dict[str, Any]
    pit: PitReference | None = None
    sort: list[dict[str, Any]] | None = None
    search_after: list[Any] | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _pit_requires_sort(self) -> SearchEnvelope:
        if self.pit is not None and not self.sort:
            msg = "a point-in-time request needs a deterministic sort"
            raise ValueError(msg)
        return self

    def to_body(self) -> dict[str, Any]:
        """Wire body with unset optional fields omitted."""
        return self.model_dump(exclude_none=True)


def build_envelope(
    size: int,
    query: dict[str, Any],
    *,
    pit_id: str | None = None,
    keep_alive: str = "1m",
    sort: list[dict[str, Any]] | None = None,
    search_after: list[Any] | None = None,
) -> SearchEnvelope:
    """Assemble a page request.

    With a PIT id the shard-doc tiebreaker is appended to the caller's sort,
    so ``search_after`` always has a total order to resume from.

    Args:
        size: Page size.
        query: Query object from ``build_query``.
        pit_id: Held point-in-time id, if any.
        keep_alive: Keep-alive for the PIT reference.
        sort: Caller sort clauses.
        search_after: Cursor from the previous page; ``None`` on the first page.

    Returns:
        Validated SearchEnvelope.
    """
    pit: PitReference | None = None
    effective_sort = list(sort) if sort else None
    if pit_id:
        pit = PitReference(id=pit_id, keep_alive=keep_alive)
        effective_sort = [*(effective_sort or []), dict(SHARD_DOC_SORT)]

    return SearchEnvelope(
        size=size,
        query=query,
        pit=pit,
        sort=effective_sort,
        search_after=list(search_after) if search_after is not None else None,
    )


__all__ = ["SHARD_DOC_SORT", "PitReference", "SearchEnvelope", "build_envelope"]
