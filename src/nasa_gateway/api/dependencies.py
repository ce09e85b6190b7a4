"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Test overrides (upstream client, response store) placed on app.state
      by create_app() before startup
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from nasa_gateway.config import Settings, configure_logging
from nasa_gateway.handlers import (
    ApodHandler,
    EpicHandler,
    ImageLibraryHandler,
    MarsRoverHandler,
    NeoHandler,
    SystemHandler,
)
from nasa_gateway.repositories import MemoryResponseCache, NasaApiClient
from nasa_gateway.services import NasaService

logger = logging.getLogger(__name__)


def _state_handler(request: Request, name: str):
    handler = getattr(request.app.state, name, None)
    if handler is None:
        raise RuntimeError(f"{name} not initialized. Check lifespan setup.")
    return handler


def get_apod_handler(request: Request) -> ApodHandler:
    """Dependency injection for ApodHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ApodHandler instance from app.state

    Raises:
        RuntimeError: If handlers are not initialized
    """
    return _state_handler(request, "apod_handler")


def get_mars_rover_handler(request: Request) -> MarsRoverHandler:
    return _state_handler(request, "mars_rover_handler")


def get_neo_handler(request: Request) -> NeoHandler:
    return _state_handler(request, "neo_handler")


def get_image_library_handler(request: Request) -> ImageLibraryHandler:
    return _state_handler(request, "image_library_handler")


def get_epic_handler(request: Request) -> EpicHandler:
    return _state_handler(request, "epic_handler")


def get_system_handler(request: Request) -> SystemHandler:
    return _state_handler(request, "system_handler")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Upstream client and response cache - created unless overridden
    2. Service (domain logic) - stored in app.state.nasa_service
    3. Handlers (HTTP endpoints) - one per route family

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Closes the upstream client it created and removes all services
        from app.state on shutdown
    """
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)

    upstream = app.state.upstream_override
    owns_upstream = upstream is None
    if owns_upstream:
        upstream = NasaApiClient.create(
            base_url=settings.nasa_api_base_url,
            api_key=settings.nasa_api_key,
            timeout=settings.upstream_timeout,
        )

    store = app.state.store_override
    if store is None:
        store = MemoryResponseCache.create(ttl=settings.cache_ttl)

    nasa_service = NasaService.create(
        upstream=upstream,
        store=store,
        base_url=settings.nasa_api_base_url,
        api_key=settings.nasa_api_key,
        images_base_url=settings.nasa_images_api_base_url,
    )

    # Store in app.state (FastAPI pattern)
    app.state.nasa_service = nasa_service
    app.state.apod_handler = ApodHandler(nasa_service=nasa_service)
    app.state.mars_rover_handler = MarsRoverHandler(nasa_service=nasa_service)
    app.state.neo_handler = NeoHandler(nasa_service=nasa_service)
    app.state.image_library_handler = ImageLibraryHandler(nasa_service=nasa_service, rng=app.state.rng)
    app.state.epic_handler = EpicHandler(nasa_service=nasa_service)
    app.state.system_handler = SystemHandler(nasa_service=nasa_service)

    logger.info("NASA gateway started (base URL %s, cache TTL %ss)", settings.nasa_api_base_url, settings.cache_ttl)
    logger.info("NASA API key: %s", "using DEMO_KEY" if settings.using_demo_key else "configured")

    yield

    if owns_upstream:
        await upstream.aclose()

    del app.state.system_handler
    del app.state.epic_handler
    del app.state.image_library_handler
    del app.state.neo_handler
    del app.state.mars_rover_handler
    del app.state.apod_handler
    del app.state.nasa_service
    logger.info("NASA gateway shut down")


# Type aliases for cleaner dependency injection
ApodHandlerDep = Annotated[ApodHandler, Depends(get_apod_handler)]
MarsRoverHandlerDep = Annotated[MarsRoverHandler, Depends(get_mars_rover_handler)]
NeoHandlerDep = Annotated[NeoHandler, Depends(get_neo_handler)]
ImageLibraryHandlerDep = Annotated[ImageLibraryHandler, Depends(get_image_library_handler)]
EpicHandlerDep = Annotated[EpicHandler, Depends(get_epic_handler)]
SystemHandlerDep = Annotated[SystemHandler, Depends(get_system_handler)]
