"""HTTP handlers for EPIC (Earth Polychromatic Imaging Camera) routes."""

import logging
from typing import Any

from nasa_gateway.dto import SuccessResponse
from nasa_gateway.errors import GatewayError, InternalError, NotFoundError
from nasa_gateway.services import NasaService, summarize_epic_day

from .validation import validate_date, validate_epic_type

logger = logging.getLogger(__name__)

DATE_MESSAGE = "Date must be in YYYY-MM-DD format"


def _available_date(entry: Any) -> str | None:
    # Entries are plain date strings or {"date": ...} records
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return entry.get("date")
    return None


class EpicHandler:
    """HTTP handlers for the EPIC routes."""

    def __init__(self, nasa_service: NasaService) -> None:
        self._nasa = nasa_service

    def _with_urls(self, image_type: str, images: list[dict]) -> list[dict]:
        return [
            {**image, "image_url": self._nasa.epic_image_url(image_type, image["date"], image["image"])}
            for image in images
        ]

    @staticmethod
    def _is_image_list(data: Any) -> bool:
        return (
            isinstance(data, list)
            and len(data) > 0
            and all(isinstance(image, dict) and "image" in image and "date" in image for image in data)
        )

    async def get_images(self, date: str | None = None, image_type: str | None = None) -> SuccessResponse:
        """Handle GET /api/epic requests.

        With a date, returns that day's images each carrying an ``image_url``.
        Without one, returns the list of available dates.
        """
        try:
            kind = validate_epic_type(image_type)
            if date:
                validate_date(date, DATE_MESSAGE)

            data = await self._nasa.get_epic_images(date or None, kind)
            if self._is_image_list(data):
                data = self._with_urls(kind, data)
            return SuccessResponse(data=data)
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("EPIC request failed")
            raise InternalError() from e

    async def get_available(self, image_type: str | None = None) -> SuccessResponse:
        """Handle GET /api/epic/available requests."""
        try:
            kind = validate_epic_type(image_type)
            return SuccessResponse(data=await self._nasa.get_epic_images(None, kind))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("EPIC available dates request failed")
            raise InternalError() from e

    async def get_latest(self, image_type: str | None = None) -> SuccessResponse:
        """Handle GET /api/epic/latest requests.

        Raises:
            NotFoundError: The available-dates list is empty
        """
        try:
            kind = validate_epic_type(image_type)
            available = await self._nasa.get_epic_images(None, kind)

            dates = [d for d in (_available_date(entry) for entry in available or []) if d]
            if not dates:
                raise NotFoundError("No EPIC images available")

            # ISO dates order chronologically as strings
            latest_date = max(dates)
            images = await self._nasa.get_epic_images(latest_date, kind)

            return SuccessResponse(
                data={
                    "date": latest_date,
                    "type": kind,
                    "images": self._with_urls(kind, images or []),
                }
            )
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Latest EPIC request failed")
            raise InternalError() from e

    async def get_metadata(self, date: str, image_type: str | None = None) -> SuccessResponse:
        """Handle GET /api/epic/metadata/{date} requests.

        Raises:
            NotFoundError: No images exist for the date
        """
        try:
            validate_date(date, DATE_MESSAGE)
            kind = validate_epic_type(image_type)

            images = await self._nasa.get_epic_images(date, kind)
            if not isinstance(images, list) or not images:
                raise NotFoundError(f"No EPIC images found for date {date}")

            return SuccessResponse(data=summarize_epic_day(date, kind, images))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("EPIC metadata request failed")
            raise InternalError() from e
