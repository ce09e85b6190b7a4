"""HTTP handlers for NASA Image and Video Library routes."""

import logging
import random
from typing import Any

from nasa_gateway.dto import SuccessResponse
from nasa_gateway.errors import GatewayError, InternalError
from nasa_gateway.services import NasaService

from .fanout import settle_all
from .validation import VALID_MEDIA_TYPES, parse_int, require, validate_choice

logger = logging.getLogger(__name__)

POPULAR_TOPICS = (
    "mars",
    "earth",
    "moon",
    "jupiter",
    "saturn",
    "hubble",
    "international space station",
    "apollo",
    "nebula",
    "galaxy",
)
POPULAR_TOPIC_LIMIT = 5
POPULAR_ITEMS_PER_TOPIC = 3

FEATURED_COLLECTIONS = (
    {
        "name": "Hubble Space Telescope",
        "query": "hubble telescope",
        "description": "Amazing images from the Hubble Space Telescope",
    },
    {
        "name": "Mars Exploration",
        "query": "mars rover exploration",
        "description": "Mars exploration missions and discoveries",
    },
    {
        "name": "Earth from Space",
        "query": "earth space view",
        "description": "Beautiful views of Earth from space",
    },
    {
        "name": "Apollo Missions",
        "query": "apollo mission moon",
        "description": "Historic Apollo moon landing missions",
    },
    {
        "name": "Deep Space",
        "query": "deep space nebula galaxy",
        "description": "Stunning deep space imagery",
    },
)
FEATURED_ITEMS_PER_COLLECTION = 6

RANDOM_TOPICS = (
    "space",
    "mars",
    "earth",
    "moon",
    "jupiter",
    "saturn",
    "hubble",
    "nebula",
    "galaxy",
    "astronaut",
    "rocket",
    "iss",
    "apollo",
    "shuttle",
)
MAX_RANDOM_IMAGES = 20
RANDOM_PICK_WINDOW = 10


def _collection_items(data: Any) -> list[dict]:
    collection = data.get("collection") if isinstance(data, dict) else None
    return (collection or {}).get("items") or []


def _total_hits(data: dict) -> int:
    return ((data.get("collection") or {}).get("metadata") or {}).get("total_hits", 0)


def _nasa_id(item: dict) -> str | None:
    entries = item.get("data") or []
    return entries[0].get("nasa_id") if entries else None


class ImageLibraryHandler:
    """HTTP handlers for the Image and Video Library routes.

    Example:
        ```python
        handler = ImageLibraryHandler(nasa_service=service, rng=random.Random(42))
        response = await handler.get_random(count="5")
        ```
    """

    def __init__(self, nasa_service: NasaService, rng: random.Random | None = None) -> None:
        """Initialize the image library handler.

        Args:
            nasa_service: The NASA service for upstream access (required).
            rng: Random source for the random-image route.
        """
        self._nasa = nasa_service
        self._rng = rng or random.Random()

    async def search(
        self,
        q: str | None = None,
        media_type: str | None = None,
        page: str | None = None,
    ) -> SuccessResponse:
        """Handle GET /api/image-library/search requests.

        Raises:
            ValidationError: Missing query, unknown media type or bad page
        """
        try:
            query = require(q, 'Query parameter "q" is required')
            media = validate_choice(media_type or "image", VALID_MEDIA_TYPES, "media_type")
            page_number = parse_int(page, "Page must be a positive integer", default=1, minimum=1)
            return SuccessResponse(data=await self._nasa.search_image_library(query, media, page_number))
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Image library search failed")
            raise InternalError() from e

    async def get_popular(self) -> SuccessResponse:
        """Handle GET /api/image-library/popular requests.

        Only the first POPULAR_TOPIC_LIMIT topics are fetched; the full topic
        list is still returned so clients can offer the rest as searches.
        """
        try:
            topics = POPULAR_TOPICS[:POPULAR_TOPIC_LIMIT]
            settled = await settle_all(
                {topic: self._nasa.search_image_library(topic, "image", 1) for topic in topics}
            )

            results: dict[str, dict] = {}
            for topic, outcome in settled.items():
                if not outcome.ok:
                    results[topic] = {"error": f"Failed to fetch images for {topic}"}
                    continue
                items = _collection_items(outcome.value)
                if items:
                    results[topic] = {
                        "total_hits": _total_hits(outcome.value),
                        "items": items[:POPULAR_ITEMS_PER_TOPIC],
                    }

            return SuccessResponse(data={"topics": list(POPULAR_TOPICS), "results": results})
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Popular topics request failed")
            raise InternalError() from e

    async def get_featured(self) -> SuccessResponse:
        """Handle GET /api/image-library/featured requests."""
        try:
            settled = await settle_all(
                {
                    collection["name"]: self._nasa.search_image_library(collection["query"], "image", 1)
                    for collection in FEATURED_COLLECTIONS
                }
            )

            collections: dict[str, dict] = {}
            for collection in FEATURED_COLLECTIONS:
                name = collection["name"]
                outcome = settled[name]
                if not outcome.ok:
                    collections[name] = {
                        "description": collection["description"],
                        "error": f"Failed to fetch {name} collection",
                    }
                    continue
                items = _collection_items(outcome.value)
                if items:
                    collections[name] = {
                        "description": collection["description"],
                        "query": collection["query"],
                        "total_hits": _total_hits(outcome.value),
                        "items": items[:FEATURED_ITEMS_PER_COLLECTION],
                    }

            return SuccessResponse(data=collections)
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Featured collections request failed")
            raise InternalError() from e

    def _pick(self, data: Any) -> dict | None:
        """Pick one item from the first RANDOM_PICK_WINDOW results."""
        items = _collection_items(data)
        if not items:
            return None
        return items[self._rng.randrange(min(len(items), RANDOM_PICK_WINDOW))]

    async def get_random(self, count: str | None = None) -> SuccessResponse:
        """Handle GET /api/image-library/random requests.

        Topics are drawn without replacement, one image per topic, in rounds
        sized to the number of images still missing. The number of upstream
        searches therefore never exceeds len(RANDOM_TOPICS). Topics that fail
        or come back empty are skipped, as are items already picked through
        another topic.
        """
        try:
            requested = parse_int(count, "Count must be a positive integer", default=10, minimum=1)
            target = min(requested, MAX_RANDOM_IMAGES)

            remaining = list(RANDOM_TOPICS)
            self._rng.shuffle(remaining)

            images: list[dict] = []
            seen_ids: set[str] = set()
            while len(images) < target and remaining:
                batch = remaining[: target - len(images)]
                remaining = remaining[len(batch):]

                settled = await settle_all(
                    {topic: self._nasa.search_image_library(topic, "image", 1) for topic in batch}
                )
                for topic, outcome in settled.items():
                    if not outcome.ok:
                        continue
                    item = self._pick(outcome.value)
                    if item is None:
                        continue
                    nasa_id = _nasa_id(item)
                    if nasa_id is not None:
                        if nasa_id in seen_ids:
                            continue
                        seen_ids.add(nasa_id)
                    images.append({**item, "search_topic": topic})

            return SuccessResponse(data={"count": len(images), "images": images})
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Random images request failed")
            raise InternalError() from e
