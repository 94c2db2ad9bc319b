"""Point-in-time cursor pagination for Elasticsearch-compatible search stores."""

from search_pager.core.exceptions import (
    DecodeError,
    ExhaustedError,
    IndexNotFoundError,
    InvalidLimitError,
    SearchPagerError,
    TransportError,
)
from search_pager.core.pagination import (
    MustNotFilter,
    Page,
    Paginator,
    RangeFilter,
    SearchResponse,
    TermFilter,
    TermsFilter,
)
from search_pager.infra.search import SearchClient, SearchIndex

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "ExhaustedError",
    "IndexNotFoundError",
    "InvalidLimitError",
    "MustNotFilter",
    "Page",
    "Paginator",
    "RangeFilter",
    "SearchClient",
    "SearchIndex",
    "SearchPagerError",
    "SearchResponse",
    "TermFilter",
    "TermsFilter",
    "TransportError",
    "__version__",
]
