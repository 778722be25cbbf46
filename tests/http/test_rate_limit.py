"""Tests for rate limiting and courtesy pauses."""

from __future__ import annotations

import time

import pytest

from stock_inference.clients.ratelimit import AsyncTokenBucket, courtesy_pause


@pytest.mark.asyncio
async def test_token_bucket_rate():
    """Test that token bucket enforces rate limit."""
    bucket = AsyncTokenBucket(rate_per_sec=10, capacity=5)
    t0 = time.monotonic()

    # Use up 5 tokens immediately
    for _ in range(5):
        await bucket.acquire()

    # 6th token should require waiting ~0.1s
    await bucket.acquire()
    elapsed = time.monotonic() - t0

    assert elapsed >= 0.09  # Allow small margin for timing


@pytest.mark.asyncio
async def test_token_bucket_burst():
    """Test that bucket allows burst up to capacity."""
    bucket = AsyncTokenBucket(rate_per_sec=10, capacity=20)

    t0 = time.monotonic()
    for _ in range(20):
        await bucket.acquire()

    elapsed = time.monotonic() - t0
    assert elapsed < 0.1


def test_token_bucket_rejects_non_positive_rate():
    """A zero rate would never refill."""
    with pytest.raises(ValueError):
        AsyncTokenBucket(rate_per_sec=0, capacity=1)


@pytest.mark.asyncio
async def test_courtesy_pause_sleeps():
    """Positive delays sleep for roughly that long."""
    t0 = time.monotonic()
    await courtesy_pause(0.05)

    assert time.monotonic() - t0 >= 0.04


@pytest.mark.asyncio
async def test_courtesy_pause_zero_returns_immediately():
    """Zero disables the pause (used by tests and fast local runs)."""
    t0 = time.monotonic()
    await courtesy_pause(0)
    await courtesy_pause(-1)

    assert time.monotonic() - t0 < 0.01
