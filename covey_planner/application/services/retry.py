"""Bounded exponential-backoff retries for remote fetches."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry an operation up to ``max_attempts`` times in total.

    The delay before attempt *n + 1* is ``base_delay * 2 ** (n - 1)``,
    capped at ``max_delay``. ``max_attempts=1`` disables retrying.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 8.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Backoff before the attempt following *attempt* (1-based)."""
        return min(self.base_delay * 2 ** (attempt - 1), self.max_delay)

    async def run(self, operation: Callable[[], Awaitable[T]], *, description: str) -> T:
        """Await ``operation()``, retrying on any exception until attempts run out.

        The last exception is re-raised once the budget is exhausted.
        """
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as exc:
                if attempt >= self.max_attempts:
                    raise
                delay = self.delay_for(attempt)
                logger.info(
                    "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                    description,
                    attempt,
                    self.max_attempts,
                    exc,
                    delay,
                )
                await asyncio.sleep(delay)
                attempt += 1


NO_RETRY = RetryPolicy(max_attempts=1)
