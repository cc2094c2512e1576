"""Base client for Radarr/Sonarr API interactions."""

from __future__ import annotations

import logging
from typing import Any, Self

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class ArrClientError(Exception):
    """Raised when a request to a Radarr/Sonarr instance fails."""

    def __init__(self, message: str, endpoint: str) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class ArrHTTPError(ArrClientError):
    """Raised when the API answers with a non-success status code."""

    def __init__(self, status_code: int, reason: str, endpoint: str) -> None:
        super().__init__(f"{status_code} {reason} from {endpoint}", endpoint)
        self.status_code = status_code
        self.reason = reason


class ArrConnectionError(ArrClientError):
    """Raised when the request never got a response (DNS, refused, timeout)."""


class BaseArrClient:
    """Base client for Radarr/Sonarr APIs.

    This base class provides:
    - HTTP client management with connection pooling
    - API key and JSON headers on every request
    - Translation of HTTP and transport failures into ArrClientError
    - Context manager protocol for resource cleanup

    Each call is a single attempt. Subclasses implement specific API methods
    using `_get()` and `_post()`.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: The base URL of the arr instance (e.g., http://localhost:7878)
            api_key: The API key for authentication
            timeout: Request timeout in seconds (default 120.0)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "X-Api-Key": self.api_key,
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not in context.

        Returns:
            The httpx async client

        Raises:
            RuntimeError: If called outside of async context manager
        """
        if self._client is None:
            raise RuntimeError("Client must be used within async context manager")
        return self._client

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request.

        Args:
            endpoint: The API endpoint path (e.g., "/api/v3/movie")
            params: Optional query parameters

        Returns:
            The JSON response data
        """
        return await self._request("GET", endpoint, params=params)

    async def _post(self, endpoint: str, json: dict[str, Any]) -> Any:
        """Make a POST request with a JSON body.

        Args:
            endpoint: The API endpoint path (e.g., "/api/v3/command")
            json: JSON body to send

        Returns:
            The JSON response data, or None for an empty body
        """
        return await self._request("POST", endpoint, json=json)

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: The API endpoint path
            params: Optional query parameters
            json: Optional JSON body

        Returns:
            The JSON response data

        Raises:
            ArrHTTPError: On any non-2xx response
            ArrConnectionError: On transport failures and timeouts
        """
        logger.debug("%s %s params=%s", method, endpoint, params)
        try:
            response = await self.client.request(
                method,
                endpoint,
                params=params,
                json=json,
            )
        except httpx.TransportError as e:
            raise ArrConnectionError(
                f"Request to {endpoint} failed: {e!r}", endpoint
            ) from e

        if not response.is_success:
            raise ArrHTTPError(response.status_code, response.reason_phrase, endpoint)

        if not response.content:
            return None
        return response.json()
