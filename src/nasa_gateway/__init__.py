"""NASA Gateway - cached, validated proxy in front of NASA's public APIs.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (UpstreamClient, ResponseStore)
    - repositories: NASA HTTP client and in-memory response cache
    - services: NASA domain operations and derived aggregates
    - handlers: Validation, fan-out and response shaping per route family
    - dto: Data transfer objects (response envelope)
    - entities: Domain models (internal)

Usage:
    ```python
    from nasa_gateway.repositories import MemoryResponseCache, NasaApiClient
    from nasa_gateway.services import NasaService

    service = NasaService.create(
        upstream=NasaApiClient.create(),
        store=MemoryResponseCache.create(),
    )
    ```

For HTTP API:
    ```python
    from nasa_gateway.api.app import app
    ```
"""

from nasa_gateway.config import get_settings, settings
from nasa_gateway.dto import ErrorResponse, SuccessResponse
from nasa_gateway.errors import (
    GatewayError,
    InternalError,
    NotFoundError,
    UpstreamError,
    UpstreamTimeout,
    UpstreamUnavailable,
    ValidationError,
)
from nasa_gateway.protocols import ResponseStore, UpstreamClient
from nasa_gateway.repositories import MemoryResponseCache, NasaApiClient
from nasa_gateway.services import NasaService

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    # Protocols (interfaces)
    "ResponseStore",
    "UpstreamClient",
    # Services (domain logic)
    "NasaService",
    # Repositories (upstream access)
    "MemoryResponseCache",
    "NasaApiClient",
    # Errors
    "GatewayError",
    "ValidationError",
    "NotFoundError",
    "UpstreamError",
    "UpstreamUnavailable",
    "UpstreamTimeout",
    "InternalError",
    # DTOs (API contracts)
    "SuccessResponse",
    "ErrorResponse",
]
