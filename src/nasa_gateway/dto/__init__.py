"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract: the uniform
success/failure envelope and the shapes of the service's own endpoints.

Internal domain logic should use entities from the entities package.
"""

from .responses import (
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
    SuccessResponse,
)

__all__ = [
    "SuccessResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "CacheStatsResponse",
]
