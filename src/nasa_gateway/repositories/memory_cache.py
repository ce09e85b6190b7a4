"""In-memory implementation of ResponseStore.

Entries live in a plain dict keyed by request fingerprint and expire after a
fixed TTL. Expiry is checked lazily on read; ``purge_expired`` sweeps the
rest. There is no size bound, the TTL is the only limit.
"""

import json
import logging
import time
from typing import Any, Callable, Mapping

from nasa_gateway.config import settings
from nasa_gateway.entities import CacheEntryEntity

logger = logging.getLogger(__name__)


def fingerprint(path: str, params: Mapping[str, Any] | None = None) -> str:
    """Build the cache key for a request.

    Parameters are serialized with sorted keys so construction order does not
    matter, while every key and value still takes part in the key. ``None``
    values are dropped, matching what is actually sent upstream.

    Args:
        path: Endpoint path (or absolute URL)
        params: Query parameters

    Returns:
        Deterministic fingerprint string
    """
    cleaned = {k: v for k, v in (params or {}).items() if v is not None}
    canonical = json.dumps(cleaned, sort_keys=True, separators=(",", ":"), default=str)
    return f"{path}?{canonical}"


class MemoryResponseCache:
    """TTL cache for decoded upstream responses.

    This class satisfies the ResponseStore protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        cache = MemoryResponseCache(ttl=60)
        cache.set(fingerprint("/planetary/apod", {"date": "2023-01-01"}), body)
        ```
    """

    def __init__(
        self,
        ttl: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl: Time-to-live for entries in seconds. Defaults to settings.
            clock: Monotonic time source, replaceable in tests.
        """
        self._ttl = ttl or settings.cache_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntryEntity] = {}
        self._hits = 0
        self._misses = 0

    @classmethod
    def create(cls, ttl: int | None = None) -> "MemoryResponseCache":
        """Factory method to create MemoryResponseCache with defaults."""
        return cls(ttl=ttl)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        if entry.is_expired(self._clock()):
            del self._entries[key]
            self._misses += 1
            return None

        self._hits += 1
        return entry.value

    def set(self, key: str, value: Any) -> None:
        now = self._clock()
        self._entries[key] = CacheEntryEntity(
            key=key,
            value=value,
            inserted_at=now,
            expires_at=now + self._ttl,
        )

    def purge_expired(self) -> int:
        """Drop every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def flush_all(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        self._hits = 0
        self._misses = 0
        logger.info("Response cache flushed (%d entries)", count)
        return count

    def stats(self) -> dict:
        self.purge_expired()
        return {
            "hits": self._hits,
            "misses": self._misses,
            "keys": len(self._entries),
            "ttl": self._ttl,
        }

    @property
    def ttl(self) -> int:
        """Get the entry time-to-live in seconds."""
        return self._ttl
