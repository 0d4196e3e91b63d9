"""
HTTP infrastructure layer for the remote history API.

Provides:
- HTTPClient: Async HTTP client that maps failures onto RemoteError

This layer separates HTTP concerns (headers, status handling, transport
errors) from domain logic (commit/pull request normalization). Requests are
never retried: a failure is surfaced to the caller with its status and the
remote's message.
"""

import logging
from typing import Any

import httpx

from src.errors import RemoteError

logger = logging.getLogger(__name__)

# Status reported when the remote could not be reached at all
TRANSPORT_FAILURE_STATUS = 502


def extract_error_message(response: httpx.Response) -> str:
    """
    Pull a human-readable message out of an error response.

    GitHub answers errors with ``{"message": "...", "documentation_url": ...}``;
    anything else falls back to the reason phrase or raw body.

    Args:
        response: The non-2xx response

    Returns:
        Error message text
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])

    text = response.text.strip()
    if text:
        return text[:500]
    return response.reason_phrase or f"HTTP {response.status_code}"


class HTTPClient:
    """
    Async HTTP client for JSON APIs.

    Features:
    - Shared default headers (auth, API version)
    - Non-2xx responses raised as RemoteError with status + remote message
    - Timeout/connection failures raised as RemoteError(status=502)
    - Context manager for proper resource cleanup

    Example:
        async with HTTPClient(headers={"Accept": "application/json"}) as client:
            response = await client.get(
                "https://api.github.com/repos/octocat/hello-world/commits",
                params={"per_page": 30},
            )
    """

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize HTTP client.

        Args:
            headers: Headers sent with every request.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests).
        """
        self.headers = dict(headers) if headers else {}
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HTTPClient":
        """Enter async context manager, create client."""
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers=self.headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager, close client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Perform a GET request and decode the JSON body.

        Args:
            url: Request URL
            params: Query parameters

        Returns:
            Decoded JSON payload

        Raises:
            RemoteError: On non-2xx status, transport failure or invalid JSON
        """
        response = await self.get(url, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(
                TRANSPORT_FAILURE_STATUS,
                f"Invalid JSON in response from {url}",
            ) from e

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Perform a GET request.

        Args:
            url: Request URL
            params: Query parameters

        Returns:
            httpx.Response on 2xx

        Raises:
            RemoteError: On non-2xx status or transport failure
        """
        if not self._client:
            raise RuntimeError("HTTPClient must be used as async context manager")

        try:
            response = await self._client.get(url, params=params)
        except httpx.TransportError as e:
            logger.warning(f"Request to {url} failed: {type(e).__name__}: {e}")
            raise RemoteError(
                TRANSPORT_FAILURE_STATUS,
                f"Could not reach remote service: {type(e).__name__}",
            ) from e

        if not response.is_success:
            message = extract_error_message(response)
            logger.warning(f"Remote returned {response.status_code} for {url}: {message}")
            raise RemoteError(response.status_code, message)

        return response
