"""Response store protocol.

Defines the interface for the short-lived store that sits in front of the
upstream client. Keys are request fingerprints, values are decoded upstream
bodies.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResponseStore(Protocol):
    """Protocol for response caches.

    Example:
        ```python
        from nasa_gateway.protocols import ResponseStore

        store: ResponseStore = MemoryResponseCache(ttl=60)
        ```
    """

    def get(self, key: str) -> Any | None:
        """Return the stored value, or None when absent or expired."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store a value; the TTL is applied at insertion time."""
        ...

    def flush_all(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        ...

    def stats(self) -> dict:
        """Return hit/miss counters and the live key count."""
        ...
