"""Service layer for business logic.

This layer contains the NASA domain operations and the derived aggregates
computed from their results. Services depend on protocols (interfaces), not
concrete implementations, making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Domain)  -> (Upstream client / cache)

Usage:
    ```python
    from nasa_gateway.services import NasaService

    service = NasaService.create(upstream=client, store=cache)
    ```
"""

from .aggregates import summarize_epic_day, summarize_neos
from .nasa_service import NasaService

__all__ = [
    "NasaService",
    "summarize_epic_day",
    "summarize_neos",
]
