"""Search store access.

``SearchIndex`` is the capability the paginator consumes; ``SearchClient``
implements it over the store's REST API.
"""

from search_pager.infra.search.client import SearchClient
from search_pager.infra.search.protocol import CountableIndex, SearchIndex

__all__ = [
    "CountableIndex",
    "SearchClient",
    "SearchIndex",
]
