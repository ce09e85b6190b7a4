"""HTTP handlers for Near Earth Object routes."""

import logging
from datetime import datetime, timezone

from nasa_gateway.dto import SuccessResponse
from nasa_gateway.errors import GatewayError, InternalError, ValidationError
from nasa_gateway.services import NasaService, summarize_neos

from .validation import MAX_NEO_FEED_DAYS, parse_date, parse_int, require

logger = logging.getLogger(__name__)

STATS_SAMPLE_SIZE = 100


class NeoHandler:
    """HTTP handlers for the NeoWs routes."""

    def __init__(self, nasa_service: NasaService) -> None:
        self._nasa = nasa_service

    async def get_feed(self, start_date: str | None = None, end_date: str | None = None) -> SuccessResponse:
        """Handle GET /api/neo/feed requests.

        The span between the two dates is measured in calendar days and may
        not exceed seven.

        Raises:
            ValidationError: Missing or malformed dates, or span over 7 days
        """
        try:
            if not start_date or not end_date:
                raise ValidationError("start_date and end_date are required")

            start = parse_date(start_date)
            end = parse_date(end_date)
            if (end - start).days > MAX_NEO_FEED_DAYS:
                raise ValidationError(f"Date range cannot exceed {MAX_NEO_FEED_DAYS} days")

            return SuccessResponse(data=await self._nasa.get_near_earth_objects(start_date, end_date))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("NEO feed request failed")
            raise InternalError() from e

    async def get_today_feed(self) -> SuccessResponse:
        """Handle GET /api/neo/today/feed requests (today's UTC date)."""
        try:
            today = datetime.now(timezone.utc).date().isoformat()
            return SuccessResponse(data=await self._nasa.get_near_earth_objects(today, today))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Today NEO request failed")
            raise InternalError() from e

    async def get_by_id(self, asteroid_id: str) -> SuccessResponse:
        """Handle GET /api/neo/{asteroid_id} requests."""
        try:
            identifier = require(asteroid_id, "Asteroid ID is required")
            return SuccessResponse(data=await self._nasa.get_neo_by_id(identifier))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("NEO lookup request failed")
            raise InternalError() from e

    async def browse(self, page: str | None = None, size: str | None = None) -> SuccessResponse:
        """Handle GET /api/neo requests.

        Args:
            page: Zero-based page number (default 0)
            size: Page size between 1 and 100 (default 20)
        """
        try:
            page_number = parse_int(page, "Page must be a non-negative integer", default=0, minimum=0)
            page_size = parse_int(size, "Size must be between 1 and 100", default=20, minimum=1, maximum=100)
            return SuccessResponse(data=await self._nasa.browse_neos(page_number, page_size))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("NEO browse request failed")
            raise InternalError() from e

    async def get_stats(self) -> SuccessResponse:
        """Handle GET /api/neo/stats/summary requests.

        Statistics are computed over the first browse page of
        STATS_SAMPLE_SIZE objects, not the whole catalogue.
        """
        try:
            browse_data = await self._nasa.browse_neos(0, STATS_SAMPLE_SIZE)
            if not isinstance(browse_data, dict) or "near_earth_objects" not in browse_data:
                raise GatewayError("Failed to fetch NEO data for statistics")

            return SuccessResponse(data=summarize_neos(browse_data))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("NEO statistics request failed")
            raise InternalError() from e
