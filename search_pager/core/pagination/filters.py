"""Bool filter clauses for search queries.

Filters are small immutable value objects that serialize to the store's
filter-clause shape. They do not hide the query: each one is a thin helper
around the JSON the store expects.

Usage:
    from search_pager.core.pagination.filters import TermFilter, TermsFilter, build_query

    query = build_query([
        TermsFilter("resourceType", ["aws::ec2::instance", "aws::s3::bucket"]),
        TermFilter("stateActive", "true"),
    ])
    # {"bool": {"filter": [{"terms": {...}}, {"term": {...}}]}}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


class BoolFilter(ABC):
    """Base class for bool filter clauses.

    All filters implement `to_clause()` which returns the JSON-ready clause.
    """

    @abstractmethod
    def to_clause(self) -> dict[str, Any]:
        """Serialize the filter to a store filter clause."""
        ...


def _require_field(name: str) -> None:
    if not name:
        msg = "filter field must be a non-empty string"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class TermFilter(BoolFilter):
    """Exact match on a single value.

    Example:
            TermFilter("integrationID", "acc-123").to_clause()
        # {"term": {"integrationID": "acc-123"}}
    """

    field: str
    value: Any

    def __post_init__(self) -> None:
        _require_field(self.field)

    def to_clause(self) -> dict[str, Any]:
        return {"term": {self.field: self.value}}


@dataclass(frozen=True, slots=True)
class TermsFilter(BoolFilter):
    """Match any of several values.

    An empty ``values`` sequence is kept and serializes to an empty array.

    Example:
            TermsFilter("severity", ["high", "critical"]).to_clause()
        # {"terms": {"severity": ["high", "critical"]}}
    """

    field: str
    values: tuple[Any, ...]

    def __init__(self, field: str, values: Sequence[Any] = ()) -> None:
        _require_field(field)
        object.__setattr__(self, "field", field)
        object.__setattr__(self, "values", tuple(values))

    def to_clause(self) -> dict[str, Any]:
        return {"terms": {self.field: list(self.values)}}


@dataclass(frozen=True, slots=True)
class RangeFilter(BoolFilter):
    """Range match with any combination of bounds.

    Unset bounds are left out of the clause; at least one must be set.

    Example:
            RangeFilter("evaluatedAt", gte=1700000000000, lte=1700086400000).to_clause()
        # {"range": {"evaluatedAt": {"gte": 1700000000000, "lte": 1700086400000}}}
    """

    field: str
    gt: Any = None
    gte: Any = None
    lt: Any = None
    lte: Any = None

    def __post_init__(self) -> None:
        _require_field(self.field)
        if not self._bounds():
            msg = f"range filter on {self.field!r} needs at least one bound"
            raise ValueError(msg)

    def _bounds(self) -> dict[str, Any]:
        candidates = {"gt": self.gt, "gte": self.gte, "lt": self.lt, "lte": self.lte}
        return {op: bound for op, bound in candidates.items() if bound is not None and bound != ""}

    def to_clause(self) -> dict[str, Any]:
        return {"range": {self.field: self._bounds()}}


@dataclass(frozen=True, slots=True)
class MustNotFilter(BoolFilter):
    """Negate another filter.

    Example:
            MustNotFilter(TermsFilter("integrationID", ["acc-1"])).to_clause()
        # {"bool": {"must_not": {"terms": {"integrationID": ["acc-1"]}}}}
    """

    filter: BoolFilter

    def to_clause(self) -> dict[str, Any]:
        return {"bool": {"must_not": self.filter.to_clause()}}


def build_query(filters: Sequence[BoolFilter] | None) -> dict[str, Any]:
    """Compose the query object for a set of filters.

    Args:
        filters: Filters to AND together. ``None`` or empty matches everything.

    Returns:
        ``{"bool": {"filter": [...]}}`` or ``{"match_all": {}}``.
    """
    if not filters:
        return {"match_all": {}}
    return {"bool": {"filter": [f.to_clause() for f in filters]}}


__all__ = [
    "BoolFilter",
    "MustNotFilter",
    "RangeFilter",
    "TermFilter",
    "TermsFilter",
    "build_query",
]
