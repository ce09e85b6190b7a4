"""HTTP handlers for service-level routes (health, cache management)."""

import time
from datetime import datetime, timezone

from nasa_gateway.dto import CacheStatsResponse, HealthCheckResponse, SuccessResponse
from nasa_gateway.services import NasaService


class SystemHandler:
    """HTTP handlers for the liveness probe and response-cache controls."""

    def __init__(self, nasa_service: NasaService, started_at: float | None = None) -> None:
        """Initialize the system handler.

        Args:
            nasa_service: The NASA service owning the response cache (required).
            started_at: Monotonic start time used for uptime. Defaults to now.
        """
        self._nasa = nasa_service
        self._started_at = started_at if started_at is not None else time.monotonic()

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        return HealthCheckResponse(
            status="OK",
            timestamp=datetime.now(timezone.utc).isoformat(),
            uptime=time.monotonic() - self._started_at,
        )

    async def get_cache_stats(self) -> SuccessResponse:
        """Handle GET /api/cache/stats requests."""
        stats = self._nasa.cache_stats()
        return SuccessResponse(
            data=CacheStatsResponse(
                hits=stats.get("hits", 0),
                misses=stats.get("misses", 0),
                keys=stats.get("keys", 0),
                ttl_seconds=stats.get("ttl", 0),
            ).model_dump()
        )

    async def clear_cache(self) -> SuccessResponse:
        """Handle DELETE /api/cache requests."""
        count = self._nasa.clear_cache()
        return SuccessResponse(
            data={
                "deleted_count": count,
                "message": "Cache cleared successfully",
            }
        )
