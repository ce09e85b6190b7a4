"""Per-client rate limiting for the /api/ routes.

Uses an approximate sliding window: time is cut into fixed windows, the
counts of the current and previous window are kept, and the previous count
is weighted by how much of it still overlaps the sliding window.

Configuration via env vars:
- RATE_LIMIT_WINDOW_MS (default: 900000, 15 minutes)
- RATE_LIMIT_MAX_REQUESTS (default: 100)
"""

import logging
import math
import time
from threading import Lock
from typing import Callable

from nasa_gateway.errors import RateLimitExceeded

logger = logging.getLogger(__name__)


class SlidingWindowCounter:
    """Sliding window counter keyed by client address."""

    def __init__(self, window_seconds: float, clock: Callable[[], float] = time.time) -> None:
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = Lock()
        # key -> (prev_count, curr_count, curr_window_start)
        self._counters: dict[str, tuple[int, int, float]] = {}

    def _get_window_start(self, timestamp: float) -> float:
        return (timestamp // self._window_seconds) * self._window_seconds

    def increment_and_check(self, key: str, limit: int) -> tuple[bool, int, float]:
        """Count one request and check it against the limit.

        Args:
            key: Client identifier (IP address)
            limit: Maximum requests per window

        Returns:
            Tuple (allowed, approximate_count, seconds_until_window_rolls)
        """
        now = self._clock()
        window_start = self._get_window_start(now)

        with self._lock:
            prev_count, curr_count, stored_window = self._counters.get(key, (0, 0, window_start))

            if stored_window < window_start:
                # Only the immediately preceding window still overlaps
                if stored_window == window_start - self._window_seconds:
                    prev_count = curr_count
                else:
                    prev_count = 0
                curr_count = 0
                stored_window = window_start

            curr_count += 1
            self._counters[key] = (prev_count, curr_count, stored_window)

            elapsed_in_window = now - window_start
            prev_weight = 1 - (elapsed_in_window / self._window_seconds)
            approx_count = int(prev_count * prev_weight) + curr_count

        return approx_count <= limit, approx_count, window_start + self._window_seconds - now

    def cleanup_old_entries(self) -> int:
        """Drop counters that no longer overlap the sliding window.

        Returns:
            Number of entries removed
        """
        cutoff = self._get_window_start(self._clock()) - self._window_seconds

        with self._lock:
            old_keys = [k for k, (_, _, window_start) in self._counters.items() if window_start < cutoff]
            for k in old_keys:
                del self._counters[k]
            return len(old_keys)


class RateLimiter:
    """Process-wide per-IP rate limiter.

    Independent of the response cache and the upstream client: cached
    responses still count against the caller's allowance.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._counter = SlidingWindowCounter(window_seconds=window_seconds, clock=clock)
        self._clock = clock
        self._last_cleanup = clock()

    def _maybe_cleanup(self) -> None:
        now = self._clock()
        if now - self._last_cleanup > self._window_seconds:
            cleaned = self._counter.cleanup_old_entries()
            if cleaned > 0:
                logger.debug("Rate limit cleanup removed %d entries", cleaned)
            self._last_cleanup = now

    def check(self, client_ip: str) -> None:
        """Count a request from ``client_ip``.

        Raises:
            RateLimitExceeded: The client is over its allowance
        """
        self._maybe_cleanup()
        allowed, count, reset_in = self._counter.increment_and_check(f"ip:{client_ip}", self._max_requests)
        if not allowed:
            logger.warning(
                "Rate limit exceeded ip=%s approx_count=%d limit=%d",
                client_ip,
                count,
                self._max_requests,
            )
            raise RateLimitExceeded(retry_after=max(1, math.ceil(reset_in)))

    @property
    def max_requests(self) -> int:
        return self._max_requests
