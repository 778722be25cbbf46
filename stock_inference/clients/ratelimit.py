"""Asynchronous rate limiting helpers.

Token bucket for per-host request budgets, plus the fixed courtesy pause
used between order pages and line-item batches.
"""

from __future__ import annotations

import asyncio
import time


class AsyncTokenBucket:
    """Simple token-bucket with time-based refill (async)."""

    def __init__(self, rate_per_sec: float, capacity: int):
        """Initialize token bucket.

        Args:
            rate_per_sec: Token refill rate per second
            capacity: Maximum number of tokens

        """
        if rate_per_sec <= 0:
            raise ValueError("rate_per_sec must be positive")
        self.rate = rate_per_sec
        self.capacity = capacity
        self.tokens = float(capacity)
        self.updated = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        self.tokens = min(self.capacity, self.tokens + (now - self.updated) * self.rate)
        self.updated = now

    async def acquire(self, tokens: int = 1) -> None:
        """Acquire tokens from bucket, waiting if necessary.

        Concurrent callers queue on the lock, so a batch of line-item
        requests drains the bucket in arrival order.
        """
        async with self._lock:
            self._refill()
            if self.tokens < tokens:
                wait_sec = (tokens - self.tokens) / self.rate
                await asyncio.sleep(wait_sec)
                self._refill()
            self.tokens = max(0.0, self.tokens - tokens)


async def courtesy_pause(delay_sec: float) -> None:
    """Sleep between upstream calls; zero or negative delays return immediately."""
    if delay_sec > 0:
        await asyncio.sleep(delay_sec)


__all__ = ["AsyncTokenBucket", "courtesy_pause"]
