"""Unit tests for search request envelopes."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from search_pager.core.pagination.envelope import (
    SHARD_DOC_SORT,
    PitReference,
    SearchEnvelope,
    build_envelope,
)

MATCH_ALL = {"match_all": {}}


@pytest.mark.unit
class TestBuildEnvelope:
    """Test suite for build_envelope."""

    def test_first_page_without_pit(self):
        """Unset optional fields are left out of the wire body."""
        body = build_envelope(10, MATCH_ALL).to_body()

        assert body == {"size": 10, "query": MATCH_ALL}

    def test_pit_adds_reference_and_tiebreaker(self):
        body = build_envelope(10_000, MATCH_ALL, pit_id="pit-1", keep_alive="1m").to_body()

        assert body == {
            "size": 10_000,
            "query": MATCH_ALL,
            "pit": {"id": "pit-1", "keep_alive": "1m"},
            "sort": [{"_shard_doc": "desc"}],
        }

    def test_caller_sort_comes_first(self):
        envelope = build_envelope(10, MATCH_ALL, pit_id="pit-1", sort=[{"evaluatedAt": "asc"}])

        assert envelope.sort == [{"evaluatedAt": "asc"}, SHARD_DOC_SORT]

    def test_caller_sort_not_mutated(self):
        sort = [{"evaluatedAt": "asc"}]

        build_envelope(10, MATCH_ALL, pit_id="pit-1", sort=sort)

        assert sort == [{"evaluatedAt": "asc"}]

    def test_caller_sort_without_pit_has_no_tiebreaker(self):
        envelope = build_envelope(10, MATCH_ALL, sort=[{"evaluatedAt": "asc"}])

        assert envelope.sort == [{"evaluatedAt": "asc"}]
        assert envelope.pit is None

    def test_search_after_included_when_given(self):
        body = build_envelope(10, MATCH_ALL, pit_id="pit-1", search_after=[1700000000000, 42]).to_body()

        assert body["search_after"] == [1700000000000, 42]


@pytest.mark.unit
class TestSearchEnvelope:
    """Test suite for SearchEnvelope validation."""

    def test_pit_requires_sort(self):
        with pytest.raises(ValidationError, match="deterministic sort"):
            SearchEnvelope(size=10, query=MATCH_ALL, pit=PitReference(id="pit-1", keep_alive="1m"))

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            SearchEnvelope(size=-1, query=MATCH_ALL)

    def test_envelope_is_frozen(self):
        envelope = build_envelope(10, MATCH_ALL)

        with pytest.raises(ValidationError):
            envelope.size = 20

    def test_pit_id_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            PitReference(id="", keep_alive="1m")
