"""Handler layer for HTTP endpoints.

This layer validates raw request parameters, calls the domain service
(sometimes several times, concurrently) and shapes the response envelope.
Handlers depend on services, not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Domain)  -> (Upstream client / cache)
"""

from .apod_handler import ApodHandler
from .epic_handler import EpicHandler
from .image_library_handler import ImageLibraryHandler
from .mars_rover_handler import MarsRoverHandler
from .neo_handler import NeoHandler
from .system_handler import SystemHandler

__all__ = [
    "ApodHandler",
    "EpicHandler",
    "ImageLibraryHandler",
    "MarsRoverHandler",
    "NeoHandler",
    "SystemHandler",
]
