"""HTTP client for Elasticsearch-compatible search stores.

Implements the ``SearchIndex`` protocol over the store's REST API with:
- Connection pooling (one ``httpx.AsyncClient`` shared by every paginator)
- Retry with exponential backoff for network failures and overloaded nodes;
  opening a point in time is retried only when the store never acted on it
- Request/response logging and Prometheus metrics
- Error mapping to the search_pager exception taxonomy

Endpoints used:
    POST   /{index}/_search                search without a point in time
    POST   /_search                        search bound to a point in time
    POST   /{index}/_pit?keep_alive=1m     open a point in time
    DELETE /_pit                           close a point in time
    POST   /{index}/_count                 count matching documents
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from search_pager.core.exceptions import DecodeError, IndexNotFoundError, TransportError
from search_pager.core.settings import get_search_settings
from search_pager.core.settings.search import SearchSettings
from search_pager.infra.metrics.tracking import track_pit, track_search_request
from search_pager.utils.retry import RetryError, RetryPolicy, retry

logger = logging.getLogger(__name__)

INDEX_NOT_FOUND = "index_not_found_exception"

# Status codes the store uses for transient overload
RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})

NETWORK_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)

# Opening a PIT is not idempotent: a response lost after the store acted on
# the request would leave an orphaned PIT behind a retry. These failures mean
# the store never acted on it.
UNSENT_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.PoolTimeout,
)
REJECTED_STATUS_CODES = frozenset({429, 503})


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, NETWORK_EXCEPTIONS):
        return True
    return isinstance(exc, TransportError) and exc.status_code in RETRYABLE_STATUS_CODES


def _was_not_acted_on(exc: Exception) -> bool:
    if isinstance(exc, UNSENT_EXCEPTIONS):
        return True
    return isinstance(exc, TransportError) and exc.status_code in REJECTED_STATUS_CODES


def _operation_of(operation: str, *args: Any, **kwargs: Any) -> str:
    return operation


def _parse_error(response: httpx.Response) -> tuple[str | None, str]:
    """Extract ``(error type, reason)`` from an error response."""
    try:
        payload = response.json()
    except ValueError:
        return None, response.text[:500] or response.reason_phrase

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        error_type = error.get("type")
        reason = error.get("reason") or error_type or response.reason_phrase
        return error_type, reason
    if isinstance(error, str):
        return None, error
    return None, response.reason_phrase


class SearchClient:
    """Async client for an Elasticsearch-compatible search store.

    Safe for concurrent use by many paginators; each paginator owns its own
    cursor and point-in-time state.

    Example:
        ```python
        async with SearchClient.from_settings() as client:
            paginator = Paginator(client, "compliance_results", filters, limit=50_000)
            async for page in paginator:
                handle(page.items)
        ```
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_initial_delay: float = 0.5,
        retry_max_delay: float = 10.0,
        headers: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the search client.

        Args:
            base_url: Base URL of the store.
            timeout: Request timeout in seconds.
            max_retries: Attempts per request, including the first.
            retry_initial_delay: First backoff delay in seconds.
            retry_max_delay: Backoff ceiling in seconds.
            headers: Default headers to include in all requests.
            auth: Basic auth pair.
            verify: Verify TLS certificates.
            transport: Custom httpx transport (tests use ``httpx.MockTransport``).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json", **(headers or {})},
            auth=auth,
            verify=verify,
            transport=transport,
            limits=httpx.Limits(
                max_keepalive_connections=20,
                max_connections=100,
            ),
        )

        policy = RetryPolicy(
            max_attempts=max_retries,
            initial_delay=retry_initial_delay,
            max_delay=retry_max_delay,
            retry_if=_is_retryable,
        )
        self._send = retry(policy, operation=_operation_of)(self._send_once)
        self._send_unreplayable = retry(
            policy.only_if(_was_not_acted_on), operation=_operation_of
        )(self._send_once)

    @classmethod
    def from_settings(
        cls,
        settings: SearchSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SearchClient:
        """Build a client from ``SearchSettings`` (SEARCH_* environment)."""
        settings = settings or get_search_settings()
        return cls(
            settings.url,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            retry_initial_delay=settings.retry_initial_delay,
            retry_max_delay=settings.retry_max_delay,
            headers=settings.auth_headers,
            auth=settings.basic_auth,
            verify=settings.verify_tls,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self.client.aclose()

    async def __aenter__(self) -> SearchClient:
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager and close client."""
        await self.close()

    # ------------------------------------------------------------------
    # SearchIndex protocol
    # ------------------------------------------------------------------

    async def search(self, body: dict[str, Any], index: str | None = None) -> dict[str, Any]:
        """Run a search request.

        Args:
            body: Request body.
            index: Target index; ``None`` for point-in-time requests.

        Returns:
            Raw JSON response.

        Raises:
            IndexNotFoundError: The index does not exist.
            TransportError: Any other store or network failure.
            DecodeError: The response is not a JSON object.
        """
        path = f"/{self._index_path(index)}/_search" if index else "/_search"
        return await self._request("search", "POST", path, index=index, json=body)

    async def open_pit(self, index: str, keep_alive: str) -> str:
        """Open a point-in-time snapshot and return its id."""
        payload = await self._request(
            "open_pit",
            "POST",
            f"/{self._index_path(index)}/_pit",
            index=index,
            params={"keep_alive": keep_alive},
            replayable=False,
        )
        pit_id = payload.get("id")
        if not isinstance(pit_id, str) or not pit_id:
            msg = "open point in time response has no id"
            raise DecodeError(msg, extra={"index": index})

        track_pit("open")
        logger.debug("Opened point in time", extra={"index": index, "keep_alive": keep_alive})
        return pit_id

    async def close_pit(self, pit_id: str) -> None:
        """Release a point-in-time snapshot.

        A snapshot that already expired is not an error.
        """
        try:
            await self._request("close_pit", "DELETE", "/_pit", json={"id": pit_id})
        except TransportError as e:
            if e.status_code != 404:
                raise
            logger.debug("Point in time already released", extra={"status_code": 404})
            return
        track_pit("close")
        logger.debug("Closed point in time")

    async def count(self, query: dict[str, Any], index: str) -> int:
        """Count documents in ``index`` matching ``query``."""
        payload = await self._request(
            "count",
            "POST",
            f"/{self._index_path(index)}/_count",
            index=index,
            json={"query": query},
        )
        try:
            return int(payload["count"])
        except (KeyError, TypeError, ValueError) as e:
            msg = f"count response has no usable count: {e}"
            raise DecodeError(msg, extra={"index": index}) from e

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _index_path(index: str) -> str:
        return quote(index, safe=",*")

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        index: str | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        replayable: bool = True,
    ) -> dict[str, Any]:
        send = self._send if replayable else self._send_unreplayable
        try:
            response = await send(operation, method, path, index=index, json=json, params=params)
        except RetryError as e:
            last = e.last_exception
            if isinstance(last, TransportError):
                raise TransportError(
                    f"{last.detail} (after {e.attempts} attempts)",
                    status_code=last.status_code,
                    error_type=last.error_type,
                    extra={"path": path, "attempts": e.attempts},
                ) from e
            msg = f"{method} {path} failed after {e.attempts} attempts: {last}"
            raise TransportError(msg, extra={"path": path, "attempts": e.attempts}) from e
        except httpx.HTTPError as e:
            msg = f"{method} {path} failed: {e}"
            raise TransportError(msg, extra={"path": path}) from e

        try:
            payload = response.json()
        except ValueError as e:
            msg = f"{method} {path} returned a non-JSON body"
            raise DecodeError(msg, extra={"path": path}) from e
        if not isinstance(payload, dict):
            msg = f"{method} {path} returned {type(payload).__name__}, expected an object"
            raise DecodeError(msg, extra={"path": path})
        return payload

    async def _send_once(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        index: str | None,
        json: dict[str, Any] | None,
        params: dict[str, Any] | None,
    ) -> httpx.Response:
        async with track_search_request(operation):
            response = await self.client.request(method, path, json=json, params=params)

            logger.debug(
                f"{method} {path} -> {response.status_code}",
                extra={
                    "operation": operation,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": response.elapsed.total_seconds() * 1000,
                },
            )

            if response.is_success:
                return response

            error_type, reason = _parse_error(response)
            if error_type == INDEX_NOT_FOUND:
                raise IndexNotFoundError(index=index, detail=reason)
            raise TransportError(
                f"{error_type or response.status_code}: {reason}",
                status_code=response.status_code,
                error_type=error_type,
                extra={"path": path},
            )


__all__ = ["INDEX_NOT_FOUND", "SearchClient"]
