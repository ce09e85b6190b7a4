"""Repository layer for data access.

This layer wraps the external collaborators (the NASA HTTP APIs and the
response cache) behind protocol-based interfaces. This enables:
- Unit testing with fake upstream clients and fake clocks
- Swapping the cache store without touching the service
- Clear separation of concerns
"""

from nasa_gateway.protocols import ResponseStore, UpstreamClient

from .memory_cache import MemoryResponseCache, fingerprint
from .nasa_client import NasaApiClient

__all__ = [
    "ResponseStore",
    "UpstreamClient",
    "MemoryResponseCache",
    "NasaApiClient",
    "fingerprint",
]
