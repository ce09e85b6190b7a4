"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for one cached upstream response.

    Attributes:
        key: Request fingerprint (endpoint path + canonical parameters)
        value: Decoded upstream body, stored as received
        inserted_at: Clock reading when the entry was stored
        expires_at: Clock reading after which the entry reads as absent
    """

    key: str
    value: Any
    inserted_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
