"""Query variants parsed from raw query strings.

The upstream APIs accept several mutually exclusive parameter combinations.
Handlers parse the raw parameters once into one of these variants and reject
ambiguous combinations, so the service only ever sees a single mode.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ApodToday:
    """Picture of the day for today (no parameters)."""


@dataclass(frozen=True)
class ApodByDate:
    date: str


@dataclass(frozen=True)
class ApodRandom:
    count: int


@dataclass(frozen=True)
class ApodRange:
    """Pictures between two dates; an open end means "up to today"."""

    start_date: str
    end_date: str | None = None


ApodQuery = Union[ApodToday, ApodByDate, ApodRandom, ApodRange]


@dataclass(frozen=True)
class RoverSol:
    sol: int


@dataclass(frozen=True)
class RoverEarthDate:
    earth_date: str


RoverPhotoQuery = Union[RoverSol, RoverEarthDate]
