"""Upstream client protocol.

Defines the interface for anything that can perform a parameterized GET
against the NASA APIs and hand back the decoded JSON body.

Implementations can include:
- httpx-based client against api.nasa.gov (default)
- Recording fakes used by the test-suite
"""

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class UpstreamClient(Protocol):
    """Protocol for upstream NASA clients.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.
    """

    async def fetch(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Issue a GET request and return the decoded JSON body.

        Args:
            path: Endpoint path relative to the base URL, or an absolute URL
            params: Query parameters; ``None`` values are dropped

        Returns:
            The decoded JSON body

        Raises:
            UpstreamError: NASA answered with a non-2xx status
            UpstreamUnavailable: No response was received
            UpstreamTimeout: The request deadline elapsed
        """
        ...

    async def aclose(self) -> None:
        """Release any pooled connections."""
        ...
