"""
Retry policy for read-only RPC queries.

The default policy makes a single attempt.  Callers that want retries build
their own ``RetryPolicy`` and hand it to :class:`~obol.pneuma.rpc.RpcEndpoint`.
Broadcasts are never retried.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from loguru import logger

from ..errors import NetworkError

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attributes:
        max_attempts: Total attempts, including the first (>= 1)
        backoff: Delay in seconds before the second attempt
        multiplier: Factor applied to the delay after every failed attempt
    """
    max_attempts: int = 1
    backoff: float = 1.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.backoff < 0 or self.multiplier < 1:
            raise ValueError("backoff must be >= 0 and multiplier >= 1")

    def delays(self) -> list[float]:
        """Sleep durations between consecutive attempts."""
        return [self.backoff * self.multiplier ** i for i in range(self.max_attempts - 1)]

    async def run(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        delays = self.delays()
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await call()
            except NetworkError as exc:
                if attempt == self.max_attempts:
                    raise
                delay = delays[attempt - 1]
                logger.warning(
                    f"{operation} failed on attempt {attempt}/{self.max_attempts}: {exc}. "
                    f"Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
        raise AssertionError("unreachable")


NO_RETRY = RetryPolicy()
