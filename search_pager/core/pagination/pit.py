"""Point-in-time lifecycle.

A point in time (PIT) pins the view of an index so successive page requests
see the same data even while documents are written concurrently. The store
keeps it alive for ``keep_alive`` after every request that references it.
"""

from __future__ import annotations

import logging

from search_pager.core.exceptions import IndexNotFoundError
from search_pager.infra.search.protocol import SearchIndex

logger = logging.getLogger(__name__)


class PointInTime:
    """At most one open PIT for one paginator.

    The PIT is opened lazily on first use, only when the traversal was set up
    to use one, and its id follows the id returned with each page because
    the store may rotate it.
    """

    def __init__(
        self,
        client: SearchIndex,
        index: str,
        keep_alive: str,
        *,
        enabled: bool,
    ) -> None:
        self._client = client
        self.index = index
        self.keep_alive = keep_alive
        self.enabled = enabled
        self.pit_id: str | None = None
        self.opened = 0

    @property
    def is_open(self) -> bool:
        return self.pit_id is not None

    async def ensure_open(self) -> None:
        """Open the PIT unless disabled or already held.

        Raises:
            IndexNotFoundError: The index does not exist.
        """
        if not self.enabled or self.pit_id is not None:
            return
        self.pit_id = await self._client.open_pit(self.index, self.keep_alive)
        self.opened += 1

    def refresh(self, pit_id: str | None) -> None:
        """Adopt the id returned with a page, if any."""
        if pit_id:
            self.pit_id = pit_id

    async def close(self) -> None:
        """Release the held PIT. Idempotent.

        The id is forgotten once the close request completed or failed. A
        cancelled close keeps it, so the snapshot can still be read or
        released later.
        """
        if self.pit_id is None:
            return
        try:
            await self._client.close_pit(self.pit_id)
        except IndexNotFoundError:
            # index deleted mid-traversal; the store already dropped the PIT
            logger.debug("Index gone while closing point in time", extra={"index": self.index})
        except Exception:
            self.pit_id = None
            raise
        self.pit_id = None


__all__ = ["PointInTime"]
