"""
Retry driver - one platform upload with bounded retries.

Flow per attempt:
1. Wait on the platform's rate limiter
2. Authenticate if the platform has no cached session
3. Upload; a non-empty identifier ends the sequence
4. On failure back off ``2**attempt * base_delay`` before the next attempt
"""
import asyncio
import logging
import random
import time
from typing import Awaitable, Callable, Dict, Optional

from ..errors import AuthenticationError, UploadError
from ..models import Clip, UploadConfig, UploadOutcome
from ..platforms.base import PlatformUploader
from .rate_limiter import Clock, RateLimiter

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _describe_exception(exc: Exception) -> str:
    message = str(exc).strip()
    if message:
        return message
    return f"{type(exc).__name__}: {repr(exc)}"


class RetryingUploader:
    """
    Wraps platform uploads with rate limiting and exponential backoff.

    Holds one RateLimiter per platform identifier, created on first use
    from the configured thresholds. Default limiters share ``clock`` and
    ``sleep``; inject both together.
    """

    def __init__(
        self,
        config: Optional[UploadConfig] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = time.monotonic,
        limiter_factory: Optional[Callable[[str], RateLimiter]] = None,
    ):
        self._config = config or UploadConfig()
        self._sleep = sleep
        self._clock = clock
        self._limiter_factory = limiter_factory or self._default_limiter
        self._limiters: Dict[str, RateLimiter] = {}

    def _default_limiter(self, platform_id: str) -> RateLimiter:
        return RateLimiter(
            max_requests=self._config.rate_limit_requests,
            window_seconds=self._config.rate_limit_window,
            name=platform_id,
            clock=self._clock,
            sleep=self._sleep,
        )

    def limiter_for(self, platform_id: str) -> RateLimiter:
        limiter = self._limiters.get(platform_id)
        if limiter is None:
            limiter = self._limiters[platform_id] = self._limiter_factory(platform_id)
        return limiter

    def backoff_delay(self, attempt: int) -> float:
        delay = (2 ** attempt) * self._config.retry_base_delay
        if self._config.retry_jitter > 0:
            delay += random.uniform(0, self._config.retry_jitter)
        return delay

    async def perform_with_retry(
        self,
        platform_id: str,
        platform: PlatformUploader,
        clip: Clip,
        max_attempts: Optional[int] = None,
    ) -> UploadOutcome:
        """
        Upload a clip to one platform, retrying transient failures.

        Args:
            platform_id: Registry identifier (keys the rate limiter)
            platform: Platform adapter
            clip: Validated clip
            max_attempts: Override for ``config.max_retries``

        Returns:
            UploadOutcome - never raises for upload errors

        Raises:
            ValueError: max_attempts below 1
        """
        if max_attempts is None:
            max_attempts = self._config.max_retries
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        limiter = self.limiter_for(platform_id)
        last_error: Optional[str] = None

        for attempt in range(1, max_attempts + 1):
            try:
                await limiter.acquire()
                logger.info(f"Uploading to {platform.name} (attempt {attempt}/{max_attempts})")

                if not platform.authenticated and not await platform.authenticate():
                    raise AuthenticationError(f"{platform.name} authentication failed")

                identifier = await platform.upload(clip)
                if not identifier:
                    raise UploadError("empty upload identifier")

                url = platform.url_for(identifier)
                logger.info(f"✅ Successfully uploaded to {platform.name}: {url}")
                return UploadOutcome.ok(platform_id, url, attempts=attempt)

            except Exception as e:
                if isinstance(e, AuthenticationError):
                    platform.invalidate_authentication()
                last_error = _describe_exception(e)
                logger.error(f"Upload to {platform.name} failed (attempt {attempt}): {last_error}")

                if attempt < max_attempts:
                    delay = self.backoff_delay(attempt)
                    logger.info(f"Retrying in {delay:g}s...")
                    await self._sleep(delay)

        return UploadOutcome.fail(platform_id, last_error or "upload failed", attempts=max_attempts)
