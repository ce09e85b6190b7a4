"""HTTP handlers for Astronomy Picture of the Day routes."""

import logging

from nasa_gateway.dto import SuccessResponse
from nasa_gateway.entities import ApodByDate, ApodQuery, ApodRandom, ApodRange, ApodToday
from nasa_gateway.errors import GatewayError, InternalError, ValidationError
from nasa_gateway.services import NasaService

from .validation import parse_int, validate_date

logger = logging.getLogger(__name__)

MAX_RANDOM_COUNT = 10
MAX_APOD_COUNT = 100


def parse_apod_query(
    date: str | None = None,
    count: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
) -> ApodQuery:
    """Turn raw APOD parameters into exactly one query mode.

    Combinations the upstream API treats as mutually exclusive are rejected
    rather than resolved by precedence.

    Raises:
        ValidationError: Ambiguous combination or malformed value
    """
    if date:
        if count or start_date or end_date:
            raise ValidationError("date cannot be combined with count, start_date or end_date")
        return ApodByDate(validate_date(date, "Date must be in YYYY-MM-DD format"))

    if count:
        if start_date or end_date:
            raise ValidationError("count cannot be combined with start_date or end_date")
        return ApodRandom(
            parse_int(
                count,
                f"Count must be an integer between 1 and {MAX_APOD_COUNT}",
                minimum=1,
                maximum=MAX_APOD_COUNT,
            )
        )

    if end_date and not start_date:
        raise ValidationError("end_date requires start_date")

    if start_date:
        return ApodRange(
            start_date=validate_date(start_date),
            end_date=validate_date(end_date) if end_date else None,
        )

    return ApodToday()


class ApodHandler:
    """HTTP handlers for the APOD routes.

    Example:
        ```python
        handler = ApodHandler(nasa_service=service)
        response = await handler.get_apod(date="2023-01-01")
        ```
    """

    def __init__(self, nasa_service: NasaService) -> None:
        """Initialize the APOD handler.

        Args:
            nasa_service: The NASA service for upstream access (required).
        """
        self._nasa = nasa_service

    async def _fetch(self, query: ApodQuery):
        if isinstance(query, ApodByDate):
            return await self._nasa.get_apod(date=query.date)
        if isinstance(query, ApodRandom):
            return await self._nasa.get_apod(count=query.count)
        if isinstance(query, ApodRange):
            return await self._nasa.get_apod(start_date=query.start_date, end_date=query.end_date)
        return await self._nasa.get_apod()

    async def get_apod(
        self,
        date: str | None = None,
        count: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> SuccessResponse:
        """Handle GET /api/apod requests.

        Raises:
            ValidationError: Ambiguous or malformed parameters
        """
        try:
            query = parse_apod_query(date, count, start_date, end_date)
            return SuccessResponse(data=await self._fetch(query))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("APOD request failed")
            raise InternalError() from e

    async def get_random(self, count: str | None = None) -> SuccessResponse:
        """Handle GET /api/apod/random requests (at most 10 pictures)."""
        try:
            requested = parse_int(count, "Count must be a positive integer", default=5, minimum=1)
            query = ApodRandom(min(requested, MAX_RANDOM_COUNT))
            return SuccessResponse(data=await self._fetch(query))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Random APOD request failed")
            raise InternalError() from e

    async def get_range(self, start_date: str | None = None, end_date: str | None = None) -> SuccessResponse:
        """Handle GET /api/apod/range requests."""
        try:
            if not start_date or not end_date:
                raise ValidationError("start_date and end_date are required")

            query = ApodRange(start_date=validate_date(start_date), end_date=validate_date(end_date))
            return SuccessResponse(data=await self._fetch(query))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("APOD range request failed")
            raise InternalError() from e
