"""
Rate Limiter - sliding window request bound for one platform.
"""
import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class RateLimiter:
    """
    Bounds acquisitions to ``max_requests`` per trailing ``window_seconds``.

    When the window is full the caller is suspended until the oldest request
    leaves the window. Acquisitions are serialized, so the limiter may be
    shared by concurrent tasks uploading to the same platform.

    Usage:
        limiter = RateLimiter(max_requests=50, window_seconds=3600)
        await limiter.acquire()
    """

    def __init__(
        self,
        max_requests: int = 50,
        window_seconds: float = 3600,
        name: str = "",
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self._max_requests = max_requests
        self._window = window_seconds
        self._name = name
        self._clock = clock
        self._sleep = sleep
        self._requests: Deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window

    def _prune(self, now: float) -> None:
        while self._requests and now - self._requests[0] >= self._window:
            self._requests.popleft()

    def in_window(self) -> int:
        """Number of requests currently counted against the window."""
        self._prune(self._clock())
        return len(self._requests)

    async def acquire(self) -> None:
        """Wait until a request slot is free, then take it."""
        async with self._lock:
            now = self._clock()
            self._prune(now)

            while len(self._requests) >= self._max_requests:
                wait_time = self._window - (now - self._requests[0])
                logger.warning(
                    f"Rate limit reached{' for ' + self._name if self._name else ''}, "
                    f"waiting {round(wait_time)}s"
                )
                await self._sleep(wait_time)
                now = self._clock()
                self._prune(now)

            self._requests.append(now)
