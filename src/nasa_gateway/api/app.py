import logging
import random
from typing import Any

from fastapi import FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nasa_gateway.api.dependencies import (
    ApodHandlerDep,
    EpicHandlerDep,
    ImageLibraryHandlerDep,
    MarsRoverHandlerDep,
    NeoHandlerDep,
    SystemHandlerDep,
    lifespan,
)
from nasa_gateway.api.rate_limit import RateLimiter
from nasa_gateway.config import Settings, get_settings
from nasa_gateway.dto import ErrorResponse, HealthCheckResponse, SuccessResponse
from nasa_gateway.errors import GatewayError, RateLimitExceeded
from nasa_gateway.protocols import ResponseStore, UpstreamClient

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


def _error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


def _install_middleware(app: FastAPI, rate_limiter: RateLimiter) -> None:
    # Registration order matters: the last one added runs first

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if request.url.path.startswith("/api/"):
            client_ip = request.client.host if request.client else "unknown"
            try:
                rate_limiter.check(client_ip)
            except RateLimitExceeded as e:
                return _error_response(e.status_code, e.message, {"Retry-After": str(e.retry_after)})
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response


def _install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("query", "path"))
        message = f"Invalid parameter {field}: {first.get('msg', 'invalid value')}" if field else "Invalid request"
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _error_response(exc.status_code, "Route not found")
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        # Runs outside the middleware stack, so its headers are set here
        headers = dict(SECURITY_HEADERS)
        origin = request.headers.get("origin")
        if origin:
            headers.update(
                {
                    "Access-Control-Allow-Origin": origin,
                    "Access-Control-Allow-Credentials": "true",
                    "Vary": "Origin",
                }
            )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", headers)


def _install_routes(app: FastAPI) -> None:
    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "NASA Data Explorer API",
            "version": API_VERSION,
            "endpoints": {
                "apod": "/api/apod",
                "marsRover": "/api/mars-rover",
                "neo": "/api/neo",
                "imageLibrary": "/api/image-library",
                "epic": "/api/epic",
                "cache": "/api/cache/stats",
                "health": "/health",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: SystemHandlerDep) -> HealthCheckResponse:
        """Liveness probe with process uptime."""
        return await handler.health_check()

    # Astronomy Picture of the Day

    @app.get("/api/apod", response_model=SuccessResponse)
    async def get_apod(
        handler: ApodHandlerDep,
        date: str | None = None,
        count: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> SuccessResponse:
        return await handler.get_apod(date=date, count=count, start_date=start_date, end_date=end_date)

    @app.get("/api/apod/random", response_model=SuccessResponse)
    async def get_random_apod(handler: ApodHandlerDep, count: str | None = None) -> SuccessResponse:
        return await handler.get_random(count=count)

    @app.get("/api/apod/range", response_model=SuccessResponse)
    async def get_apod_range(
        handler: ApodHandlerDep,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> SuccessResponse:
        return await handler.get_range(start_date=start_date, end_date=end_date)

    # Mars Rover

    @app.get("/api/mars-rover/latest", response_model=SuccessResponse)
    async def get_latest_rover_photos(handler: MarsRoverHandlerDep) -> SuccessResponse:
        return await handler.get_latest()

    @app.get("/api/mars-rover/{rover}/photos", response_model=SuccessResponse)
    async def get_rover_photos(
        rover: str,
        handler: MarsRoverHandlerDep,
        sol: str | None = None,
        earth_date: str | None = None,
        camera: str | None = None,
        page: str | None = None,
    ) -> SuccessResponse:
        return await handler.get_photos(rover, sol=sol, earth_date=earth_date, camera=camera, page=page)

    @app.get("/api/mars-rover/{rover}/manifest", response_model=SuccessResponse)
    async def get_rover_manifest(rover: str, handler: MarsRoverHandlerDep) -> SuccessResponse:
        return await handler.get_manifest(rover)

    @app.get("/api/mars-rover/{rover}/cameras", response_model=SuccessResponse)
    async def get_rover_cameras(rover: str, handler: MarsRoverHandlerDep) -> SuccessResponse:
        return await handler.get_cameras(rover)

    # Near Earth Objects (fixed paths before /{asteroid_id})

    @app.get("/api/neo", response_model=SuccessResponse)
    async def browse_neos(
        handler: NeoHandlerDep,
        page: str | None = None,
        size: str | None = None,
    ) -> SuccessResponse:
        return await handler.browse(page=page, size=size)

    @app.get("/api/neo/feed", response_model=SuccessResponse)
    async def get_neo_feed(
        handler: NeoHandlerDep,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> SuccessResponse:
        return await handler.get_feed(start_date=start_date, end_date=end_date)

    @app.get("/api/neo/today/feed", response_model=SuccessResponse)
    async def get_today_neo_feed(handler: NeoHandlerDep) -> SuccessResponse:
        return await handler.get_today_feed()

    @app.get("/api/neo/stats/summary", response_model=SuccessResponse)
    async def get_neo_stats(handler: NeoHandlerDep) -> SuccessResponse:
        return await handler.get_stats()

    @app.get("/api/neo/{asteroid_id}", response_model=SuccessResponse)
    async def get_neo(asteroid_id: str, handler: NeoHandlerDep) -> SuccessResponse:
        return await handler.get_by_id(asteroid_id)

    # Image and Video Library

    @app.get("/api/image-library/search", response_model=SuccessResponse)
    async def search_image_library(
        handler: ImageLibraryHandlerDep,
        q: str | None = None,
        media_type: str | None = None,
        page: str | None = None,
    ) -> SuccessResponse:
        return await handler.search(q=q, media_type=media_type, page=page)

    @app.get("/api/image-library/popular", response_model=SuccessResponse)
    async def get_popular_images(handler: ImageLibraryHandlerDep) -> SuccessResponse:
        return await handler.get_popular()

    @app.get("/api/image-library/featured", response_model=SuccessResponse)
    async def get_featured_images(handler: ImageLibraryHandlerDep) -> SuccessResponse:
        return await handler.get_featured()

    @app.get("/api/image-library/random", response_model=SuccessResponse)
    async def get_random_images(handler: ImageLibraryHandlerDep, count: str | None = None) -> SuccessResponse:
        return await handler.get_random(count=count)

    # EPIC

    @app.get("/api/epic", response_model=SuccessResponse)
    async def get_epic_images(
        handler: EpicHandlerDep,
        date: str | None = None,
        image_type: str | None = Query(None, alias="type"),
    ) -> SuccessResponse:
        return await handler.get_images(date=date, image_type=image_type)

    @app.get("/api/epic/available", response_model=SuccessResponse)
    async def get_epic_available(
        handler: EpicHandlerDep,
        image_type: str | None = Query(None, alias="type"),
    ) -> SuccessResponse:
        return await handler.get_available(image_type=image_type)

    @app.get("/api/epic/latest", response_model=SuccessResponse)
    async def get_epic_latest(
        handler: EpicHandlerDep,
        image_type: str | None = Query(None, alias="type"),
    ) -> SuccessResponse:
        return await handler.get_latest(image_type=image_type)

    @app.get("/api/epic/metadata/{date}", response_model=SuccessResponse)
    async def get_epic_metadata(
        date: str,
        handler: EpicHandlerDep,
        image_type: str | None = Query(None, alias="type"),
    ) -> SuccessResponse:
        return await handler.get_metadata(date, image_type=image_type)

    # Response cache

    @app.get("/api/cache/stats", response_model=SuccessResponse)
    async def get_cache_stats(handler: SystemHandlerDep) -> SuccessResponse:
        return await handler.get_cache_stats()

    @app.delete("/api/cache", response_model=SuccessResponse)
    async def clear_cache(handler: SystemHandlerDep) -> SuccessResponse:
        return await handler.clear_cache()


def create_app(
    settings: Settings | None = None,
    upstream_client: UpstreamClient | None = None,
    response_store: ResponseStore | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """Build the gateway application.

    Args:
        settings: Configuration. Defaults to the environment settings.
        upstream_client: Replaces the NASA HTTP client (tests).
        response_store: Replaces the in-memory response cache (tests).
        rng: Random source for the random-image route.

    Returns:
        Configured FastAPI application
    """
    app_settings = settings or get_settings()

    app = FastAPI(
        title="NASA Data Explorer API",
        description="Cached, validated gateway in front of NASA's public APIs",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.upstream_override = upstream_client
    app.state.store_override = response_store
    app.state.rng = rng

    rate_limiter = RateLimiter(
        max_requests=app_settings.rate_limit_max_requests,
        window_seconds=app_settings.rate_limit_window_seconds,
    )
    app.state.rate_limiter = rate_limiter

    _install_middleware(app, rate_limiter)
    _install_exception_handlers(app)
    _install_routes(app)
    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "nasa_gateway.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
