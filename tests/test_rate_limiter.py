"""Tests for the sliding window rate limiter."""
import asyncio

import pytest
from conftest import FakeClock, RecordingSleep

from social_uploader.services.rate_limiter import RateLimiter


def _limiter(max_requests=2, window=10.0):
    clock = FakeClock()
    sleep = RecordingSleep(clock)
    limiter = RateLimiter(max_requests=max_requests, window_seconds=window, clock=clock, sleep=sleep)
    return limiter, clock, sleep


class TestRateLimiter:
    @pytest.mark.asyncio
    async def test_under_capacity_does_not_wait(self):
        limiter, _, sleep = _limiter(max_requests=3)
        for _ in range(3):
            await limiter.acquire()
        assert sleep.calls == []
        assert limiter.in_window() == 3

    @pytest.mark.asyncio
    async def test_full_window_waits_until_oldest_expires(self):
        limiter, clock, sleep = _limiter(max_requests=2, window=10)

        await limiter.acquire()       # t=0
        clock.advance(3)
        await limiter.acquire()       # t=3
        await limiter.acquire()       # full -> waits 10 - 3 = 7

        assert sleep.calls == [7]
        assert clock.now == 10
        assert limiter.in_window() == 2

    @pytest.mark.asyncio
    async def test_old_requests_are_pruned(self):
        limiter, clock, sleep = _limiter(max_requests=1, window=5)
        await limiter.acquire()
        clock.advance(5)
        await limiter.acquire()
        assert sleep.calls == []

    @pytest.mark.asyncio
    async def test_never_exceeds_max_in_any_window(self):
        limiter, clock, _ = _limiter(max_requests=3, window=10)
        stamps = []
        for _ in range(15):
            await limiter.acquire()
            stamps.append(clock.now)
            clock.advance(1)

        # Any max_requests + 1 consecutive acquisitions must span a full window
        for i in range(len(stamps) - 3):
            assert stamps[i + 3] - stamps[i] >= 10

    @pytest.mark.asyncio
    async def test_concurrent_acquisitions_are_serialized(self):
        limiter, clock, sleep = _limiter(max_requests=1, window=4)
        await asyncio.gather(*(limiter.acquire() for _ in range(3)))
        assert sleep.calls == [4, 4]
        assert clock.now == 8

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            RateLimiter(max_requests=0)
