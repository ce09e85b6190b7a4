"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by handlers, services
and repositories. They are NOT used for API contracts - use DTOs from the
dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .queries import (
    ApodByDate,
    ApodQuery,
    ApodRandom,
    ApodRange,
    ApodToday,
    RoverEarthDate,
    RoverPhotoQuery,
    RoverSol,
)

__all__ = [
    "CacheEntryEntity",
    "ApodQuery",
    "ApodToday",
    "ApodByDate",
    "ApodRandom",
    "ApodRange",
    "RoverPhotoQuery",
    "RoverSol",
    "RoverEarthDate",
]
