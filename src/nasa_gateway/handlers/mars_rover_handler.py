"""HTTP handlers for Mars Rover routes."""

import logging

from nasa_gateway.dto import SuccessResponse
from nasa_gateway.entities import RoverEarthDate, RoverPhotoQuery, RoverSol
from nasa_gateway.errors import GatewayError, InternalError, ValidationError
from nasa_gateway.services import NasaService

from .fanout import settle_all
from .validation import parse_int, validate_date, validate_rover

logger = logging.getLogger(__name__)

LATEST_ROVERS = ("curiosity", "perseverance", "opportunity", "spirit")
LATEST_PHOTOS_PER_ROVER = 5


def parse_rover_photo_query(sol: str | None = None, earth_date: str | None = None) -> RoverPhotoQuery:
    """Resolve the sol / earth_date pair into exactly one selector.

    Raises:
        ValidationError: Neither or both supplied, or a malformed value
    """
    if sol and earth_date:
        raise ValidationError("Provide either sol or earth_date, not both")
    if sol:
        return RoverSol(parse_int(sol, "Sol must be a non-negative integer", minimum=0))
    if earth_date:
        return RoverEarthDate(validate_date(earth_date, "earth_date must be in YYYY-MM-DD format"))
    raise ValidationError("Either sol or earth_date parameter is required")


class MarsRoverHandler:
    """HTTP handlers for the Mars Rover routes.

    Rover names are validated against the fixed roster and normalized to
    lower case before reaching the service.
    """

    def __init__(self, nasa_service: NasaService) -> None:
        self._nasa = nasa_service

    async def get_photos(
        self,
        rover: str,
        sol: str | None = None,
        earth_date: str | None = None,
        camera: str | None = None,
        page: str | None = None,
    ) -> SuccessResponse:
        """Handle GET /api/mars-rover/{rover}/photos requests.

        Args:
            rover: Rover name from the path
            sol: Martian day (mutually exclusive with earth_date)
            earth_date: Calendar date (mutually exclusive with sol)
            camera: Optional camera abbreviation
            page: 1-based page number (default 1)

        Returns:
            SuccessResponse wrapping the upstream photo page

        Raises:
            ValidationError: Invalid rover, selector or page
        """
        try:
            rover_name = validate_rover(rover)
            query = parse_rover_photo_query(sol, earth_date)
            page_number = parse_int(page, "Page must be a positive integer", default=1, minimum=1)

            if isinstance(query, RoverSol):
                data = await self._nasa.get_mars_rover_photos(
                    rover_name, sol=query.sol, camera=camera or None, page=page_number
                )
            else:
                data = await self._nasa.get_mars_rover_photos(
                    rover_name, earth_date=query.earth_date, camera=camera or None, page=page_number
                )
            return SuccessResponse(data=data)
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Mars Rover photos request failed")
            raise InternalError() from e

    async def get_manifest(self, rover: str) -> SuccessResponse:
        """Handle GET /api/mars-rover/{rover}/manifest requests."""
        try:
            rover_name = validate_rover(rover)
            return SuccessResponse(data=await self._nasa.get_mars_rover_manifest(rover_name))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Mars Rover manifest request failed")
            raise InternalError() from e

    async def get_cameras(self, rover: str) -> SuccessResponse:
        """Handle GET /api/mars-rover/{rover}/cameras requests."""
        try:
            rover_name = validate_rover(rover)
            manifest = await self._nasa.get_mars_rover_manifest(rover_name)
            details = manifest.get("rover") or {}
            return SuccessResponse(
                data={
                    "rover": details.get("name"),
                    "cameras": details.get("cameras", []),
                }
            )
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Mars Rover cameras request failed")
            raise InternalError() from e

    async def _latest_for_rover(self, rover: str) -> dict | None:
        manifest = await self._nasa.get_mars_rover_manifest(rover)
        latest_sol = manifest["rover"]["max_sol"]
        photos = await self._nasa.get_mars_rover_photos(rover, sol=latest_sol, page=1)

        if not photos.get("photos"):
            return None
        return {
            "rover": manifest["rover"],
            "photos": photos["photos"][:LATEST_PHOTOS_PER_ROVER],
        }

    async def get_latest(self) -> SuccessResponse:
        """Handle GET /api/mars-rover/latest requests.

        Each rover is looked up independently. A rover whose lookup fails is
        reported with an error marker; rovers without photos are omitted.
        """
        try:
            settled = await settle_all({rover: self._latest_for_rover(rover) for rover in LATEST_ROVERS})

            latest: dict[str, dict] = {}
            for rover, outcome in settled.items():
                if not outcome.ok:
                    latest[rover] = {"error": f"Failed to fetch latest photos for {rover}"}
                elif outcome.value is not None:
                    latest[rover] = outcome.value
            return SuccessResponse(data=latest)
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Latest Mars photos request failed")
            raise InternalError() from e
