"""Gather several independent upstream calls with per-key error capture.

A failing sub-call never cancels or fails its siblings; its exception is
recorded against its own key.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settled:
    """Outcome of one sub-call: a value or the exception it raised."""

    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle_all(calls: Mapping[str, Awaitable[Any]]) -> dict[str, Settled]:
    """Run every awaitable concurrently and settle each one independently.

    Args:
        calls: Sub-key to awaitable (coroutine or task)

    Returns:
        Sub-key to Settled, in the same order as ``calls``
    """
    keys = list(calls)
    results = await asyncio.gather(*calls.values(), return_exceptions=True)

    settled: dict[str, Settled] = {}
    for key, result in zip(keys, results):
        if isinstance(result, Exception):
            logger.warning("Fan-out call for %r failed: %s", key, result)
            settled[key] = Settled(error=result)
        elif isinstance(result, BaseException):
            # Cancellation and interpreter exits are not per-key failures
            raise result
        else:
            settled[key] = Settled(value=result)
    return settled
