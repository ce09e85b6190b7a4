"""NASA domain service.

This service owns one operation per NASA data family. Every operation builds
the upstream path and parameters, consults the response store, and falls back
to the upstream client on a miss.
"""

import logging
from typing import Any

from nasa_gateway.config import settings
from nasa_gateway.protocols import ResponseStore, UpstreamClient
from nasa_gateway.repositories import fingerprint

logger = logging.getLogger(__name__)


class NasaService:
    """Cached access to the NASA public APIs.

    This service depends on PROTOCOLS, not concrete implementations:
    - UpstreamClient: the httpx client, or a recording fake in tests
    - ResponseStore: the in-memory TTL cache, or any other store

    Example:
        ```python
        from nasa_gateway.repositories import MemoryResponseCache, NasaApiClient
        from nasa_gateway.services import NasaService

        service = NasaService.create(
            upstream=NasaApiClient.create(),
            store=MemoryResponseCache.create(),
        )
        apod = await service.get_apod(date="2023-01-01")
        ```
    """

    def __init__(
        self,
        upstream: UpstreamClient,
        store: ResponseStore,
        base_url: str | None = None,
        api_key: str | None = None,
        images_base_url: str | None = None,
    ) -> None:
        """Initialize the NASA service.

        Args:
            upstream: Client used on cache misses (required).
            store: Response cache (required).
            base_url: Public base URL used when building EPIC archive links.
            api_key: Key appended to EPIC archive links.
            images_base_url: Host of the Image and Video Library search API.
        """
        self._upstream = upstream
        self._store = store
        self._base_url = (base_url or settings.nasa_api_base_url).rstrip("/")
        self._api_key = api_key or settings.nasa_api_key
        self._images_base_url = (images_base_url or settings.nasa_images_api_base_url).rstrip("/")

    @classmethod
    def create(
        cls,
        upstream: UpstreamClient,
        store: ResponseStore,
        base_url: str | None = None,
        api_key: str | None = None,
        images_base_url: str | None = None,
    ) -> "NasaService":
        """Factory method to create NasaService with settings defaults."""
        return cls(
            upstream=upstream,
            store=store,
            base_url=base_url,
            api_key=api_key,
            images_base_url=images_base_url,
        )

    async def _request(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Serve a request from the cache, fetching upstream on a miss."""
        key = fingerprint(path, params)
        cached = self._store.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", path)
            return cached

        data = await self._upstream.fetch(path, params or {})
        self._store.set(key, data)
        return data

    # Astronomy Picture of the Day

    async def get_apod(
        self,
        date: str | None = None,
        count: int | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> Any:
        """Fetch the Astronomy Picture of the Day.

        Exactly the supplied parameters are forwarded; the handler layer is
        responsible for choosing a single mode (date, count or range).

        Args:
            date: A single day (YYYY-MM-DD)
            count: Number of random pictures
            start_date: First day of a range
            end_date: Last day of a range

        Returns:
            One APOD record, or a list of records for count/range modes
        """
        params: dict[str, Any] = {}
        if date:
            params["date"] = date
        if count:
            params["count"] = count
        if start_date:
            params["start_date"] = start_date
        if end_date:
            params["end_date"] = end_date

        return await self._request("/planetary/apod", params)

    # Mars Rover Photos

    async def get_mars_rover_photos(
        self,
        rover: str,
        sol: int | None = None,
        earth_date: str | None = None,
        camera: str | None = None,
        page: int = 1,
    ) -> Any:
        """Fetch one page of rover photos for a sol or an Earth date.

        Both ``sol`` and ``earth_date`` are forwarded as given.

        Args:
            rover: Rover name (lower case)
            sol: Martian day of the mission
            earth_date: Calendar date (YYYY-MM-DD)
            camera: Optional camera abbreviation filter
            page: 1-based page number

        Returns:
            Upstream body with a ``photos`` list
        """
        params: dict[str, Any] = {"page": page}
        if sol is not None:
            params["sol"] = sol
        if earth_date:
            params["earth_date"] = earth_date
        if camera:
            params["camera"] = camera

        return await self._request(f"/mars-photos/api/v1/rovers/{rover}/photos", params)

    async def get_mars_rover_manifest(self, rover: str) -> Any:
        """Fetch rover metadata: max sol/date, photo totals, dates, cameras."""
        return await self._request(f"/mars-photos/api/v1/rovers/{rover}")

    # Near Earth Objects

    async def get_near_earth_objects(self, start_date: str, end_date: str) -> Any:
        """Fetch the NEO feed between two dates (at most 7 days apart)."""
        return await self._request(
            "/neo/rest/v1/feed",
            {"start_date": start_date, "end_date": end_date},
        )

    async def get_neo_by_id(self, asteroid_id: str) -> Any:
        return await self._request(f"/neo/rest/v1/neo/{asteroid_id}")

    async def browse_neos(self, page: int = 0, size: int = 20) -> Any:
        """Browse the overall NEO catalogue.

        Args:
            page: Zero-based page number
            size: Page size (1-100)
        """
        return await self._request("/neo/rest/v1/neo/browse", {"page": page, "size": size})

    # NASA Image and Video Library

    async def search_image_library(self, query: str, media_type: str = "image", page: int = 1) -> Any:
        """Search the Image and Video Library.

        Args:
            query: Free-text search terms
            media_type: One of image, video, audio
            page: 1-based page number

        Returns:
            Upstream body with a ``collection`` object
        """
        return await self._request(
            f"{self._images_base_url}/search",
            {"q": query, "media_type": media_type, "page": page},
        )

    # EPIC (Earth Polychromatic Imaging Camera)

    async def get_epic_images(self, date: str | None = None, image_type: str = "natural") -> Any:
        """Fetch EPIC images for a date, or the list of available dates.

        Args:
            date: Day to fetch (YYYY-MM-DD). When omitted, the available
                dates are returned instead of images.
            image_type: natural or enhanced

        Returns:
            List of image records, or list of available dates
        """
        endpoint = f"/EPIC/api/{image_type}"
        if date:
            endpoint += f"/date/{date}"
        else:
            endpoint += "/available"
        return await self._request(endpoint)

    def epic_image_url(self, image_type: str, date: str, image_name: str) -> str:
        """Build the archive URL of an EPIC image.

        Args:
            image_type: natural or enhanced
            date: Capture date, optionally followed by a time
                (``2015-10-31`` or ``2015-10-31 00:36:33``)
            image_name: Image identifier without extension

        Returns:
            Fully-qualified PNG URL including the access key
        """
        day = date.strip().split(" ")[0].split("T")[0]
        return (
            f"{self._base_url}/EPIC/archive/{image_type}/{day.replace('-', '/')}"
            f"/png/{image_name}.png?api_key={self._api_key}"
        )

    # Cache management

    def clear_cache(self) -> int:
        """Drop every cached upstream response.

        Returns:
            Number of entries removed
        """
        return self._store.flush_all()

    def cache_stats(self) -> dict:
        return self._store.stats()

    @property
    def store(self) -> ResponseStore:
        """Get the underlying response store (for testing)."""
        return self._store

    @property
    def upstream(self) -> UpstreamClient:
        """Get the underlying upstream client (for testing)."""
        return self._upstream
