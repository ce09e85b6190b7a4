"""Error taxonomy for the gateway.

Every error the gateway raises on purpose derives from ``GatewayError`` and
carries the HTTP status it maps to. The API layer turns these into the
failure form of the response envelope; anything else is an internal fault.
"""

from fastapi import status


class GatewayError(Exception):
    """Base class for errors that map onto a failure envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GatewayError):
    """Caller input is missing, malformed or out of range."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(GatewayError):
    """The request was well formed but there is nothing to return."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UpstreamError(GatewayError):
    """NASA answered with a non-2xx status (or an unreadable body)."""

    def __init__(self, status_code: int, upstream_message: str) -> None:
        self.upstream_status = status_code
        self.upstream_message = upstream_message
        super().__init__(f"NASA API Error: {status_code} - {upstream_message}")


class UpstreamUnavailable(GatewayError):
    """No response was received from NASA."""

    default_message = "NASA API is currently unavailable. Please try again later."


class UpstreamTimeout(UpstreamUnavailable):
    """NASA did not answer within the request deadline."""


class InternalError(GatewayError):
    """Unexpected fault inside the gateway."""


class RateLimitExceeded(GatewayError):
    """The caller exhausted its request allowance for the current window."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests from this IP, please try again later."

    def __init__(self, retry_after: int, message: str | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(message)
