"""httpx-based NASA API client.

Issues GET requests against api.nasa.gov (or any configured base URL) and
normalizes transport failures into the gateway's upstream error kinds.

Key features:
- Access key injected on every request, never taken from callers
- Bounded request timeout (10 seconds by default)
- Async support for concurrent fan-out requests
- The access key never appears in log output
"""

import logging
from typing import Any, Mapping

import httpx

from nasa_gateway.config import settings
from nasa_gateway.errors import UpstreamError, UpstreamTimeout, UpstreamUnavailable

logger = logging.getLogger(__name__)


def _upstream_message(response: httpx.Response) -> str:
    """Pull a human readable message out of a NASA error body."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "Unknown error"

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        for field in ("msg", "reason", "message"):
            if body.get(field):
                return str(body[field])

    return response.reason_phrase or "Unknown error"


class NasaApiClient:
    """NASA implementation of the UpstreamClient protocol.

    This class satisfies the UpstreamClient protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        client = NasaApiClient.create()
        apod = await client.fetch("/planetary/apod", {"date": "2023-01-01"})
        await client.aclose()
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the NASA API client.

        Args:
            base_url: NASA API base URL. Defaults to settings.nasa_api_base_url.
            api_key: NASA access key. Defaults to settings.nasa_api_key.
            timeout: Request timeout in seconds. Defaults to settings.
            transport: Optional httpx transport (used by tests).
        """
        self._base_url = (base_url or settings.nasa_api_base_url).rstrip("/")
        self._api_key = api_key or settings.nasa_api_key
        self._timeout = timeout or settings.upstream_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )
        return self._client

    @classmethod
    def create(
        cls,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> "NasaApiClient":
        """Factory method to create NasaApiClient with defaults.

        Args:
            base_url: API base URL. If None, uses settings.
            api_key: Access key. If None, uses settings.
            timeout: Request timeout. If None, uses settings.

        Returns:
            Configured NasaApiClient
        """
        return cls(base_url=base_url, api_key=api_key, timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_key(self) -> str:
        return self._api_key

    async def fetch(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Issue a GET request and return the decoded JSON body.

        Args:
            path: Endpoint path relative to the base URL, or an absolute URL
            params: Query parameters; ``None`` values are dropped

        Returns:
            The decoded JSON body

        Raises:
            UpstreamTimeout: The request exceeded the timeout
            UpstreamUnavailable: The request failed before a response arrived
            UpstreamError: NASA returned a non-2xx status or an unreadable body
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        # The key always comes last so callers can never override it
        query["api_key"] = self._api_key

        try:
            response = await self.client.get(path, params=query)
        except httpx.TimeoutException as e:
            logger.error("NASA API timeout for %s after %ss", path, self._timeout)
            raise UpstreamTimeout() from e
        except httpx.TransportError as e:
            logger.error("NASA API unreachable for %s: %s", path, type(e).__name__)
            raise UpstreamUnavailable() from e

        if not response.is_success:
            message = _upstream_message(response)
            logger.error("NASA API error for %s: %d %s", path, response.status_code, message)
            raise UpstreamError(response.status_code, message)

        try:
            return response.json()
        except ValueError as e:
            logger.error("NASA API returned a non-JSON body for %s", path)
            raise UpstreamError(response.status_code, "Invalid JSON in upstream response") from e

    async def aclose(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
