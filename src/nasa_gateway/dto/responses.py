"""Response DTOs for API endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    """Success form of the response envelope."""

    success: Literal[True] = Field(True, description="Always true for successful responses")
    data: Any = Field(..., description="Upstream body or derived record")


class ErrorResponse(BaseModel):
    """Failure form of the response envelope."""

    success: Literal[False] = Field(False, description="Always false for failed responses")
    error: str = Field(..., description="Human-readable failure reason")


class HealthCheckResponse(BaseModel):
    """Response DTO for the liveness probe."""

    status: str = Field(..., description="Always 'OK' while the process serves requests")
    timestamp: str = Field(..., description="Current UTC time in ISO 8601 format")
    uptime: float = Field(..., description="Seconds since the application started", ge=0.0)


class CacheStatsResponse(BaseModel):
    """Response DTO for response cache statistics."""

    hits: int = Field(..., description="Reads served from the cache", ge=0)
    misses: int = Field(..., description="Reads that went upstream", ge=0)
    keys: int = Field(..., description="Live (unexpired) entries", ge=0)
    ttl_seconds: int = Field(..., description="Time-to-live for entries in seconds", ge=0)
