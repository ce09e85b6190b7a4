"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the NASA HTTP client for a recording fake in tests
- Swapping the in-memory response cache for another store
- Clear separation of concerns

Usage:
    ```python
    from nasa_gateway.protocols import ResponseStore, UpstreamClient

    # Type hints work with any implementation
    store: ResponseStore = MemoryResponseCache()
    client: UpstreamClient = NasaApiClient.create()
    ```
"""

from .response_store import ResponseStore
from .upstream_client import UpstreamClient

__all__ = [
    "ResponseStore",
    "UpstreamClient",
]
