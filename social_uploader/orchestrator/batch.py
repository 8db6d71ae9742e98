"""Batch orchestrator - drives clips through their target platforms."""
import asyncio
import logging
import random
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from ..errors import ClipValidationError, ConfigurationError, UnknownPlatformError
from ..models import Clip, UploadConfig, UploadOutcome
from ..platforms.registry import PlatformRegistry
from ..protocols import IAnalyticsSink
from ..services.analytics import AnalyticsRecorder
from ..services.retry import RetryingUploader
from ..utils.events import BATCH_COMPLETE, UPLOAD_FAILED, UPLOAD_SUCCESS, EventEmitter
from .models import BatchResult

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class BatchOrchestrator:
    """
    Uploads clips to every target platform, one platform at a time.

    Failures are isolated: a failing platform never stops the remaining
    platforms or clips. Every clip x platform pairing ends up as a URL in
    ``results``, an entry in ``failed`` or an entry in ``skipped``.

    Events (subscribe with ``on``):
        upload_success(platform, clip, url)
        upload_failed(platform, clip, error)
        batch_complete(results, failed)
    """

    def __init__(
        self,
        registry: PlatformRegistry,
        config: Optional[UploadConfig] = None,
        analytics: Optional[IAnalyticsSink] = None,
        retry_uploader: Optional[RetryingUploader] = None,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize orchestrator with dependencies.

        Args:
            registry: Platform adapters by identifier
            config: Upload configuration
            analytics: Analytics sink (in-memory recorder if omitted)
            retry_uploader: Retry driver (built from config if omitted)
            sleep: Awaitable used for stagger and random delays

        Raises:
            ConfigurationError: registry has no platforms
        """
        if registry is None or len(registry) == 0:
            raise ConfigurationError("Platform registry is empty")

        self._registry = registry
        self._config = config or UploadConfig()
        self._analytics = analytics if analytics is not None else AnalyticsRecorder()
        self._retry = retry_uploader or RetryingUploader(self._config, sleep=sleep)
        self._sleep = sleep
        self._rng = rng or random.Random()
        self.events = EventEmitter()

    @property
    def analytics(self) -> IAnalyticsSink:
        return self._analytics

    def on(self, event_name: str, callback: Callable) -> None:
        self.events.on(event_name, callback)

    async def run(self, clips: Sequence[Clip]) -> BatchResult:
        """Upload clips in order and return the aggregated result."""
        clips = list(clips)
        platforms: List[str] = list(self._config.platforms)
        for clip in clips:
            platforms.extend(p for p in clip.platforms if p not in platforms)

        logger.info(f"Starting upload of {len(clips)} clips to platforms: {', '.join(platforms)}")

        results: Dict[str, List[str]] = {platform: [] for platform in platforms}
        failed: List[str] = []
        skipped: List[str] = []

        for index, clip in enumerate(clips):
            logger.info(f"Processing clip {index + 1}/{len(clips)}: {clip.title}")

            try:
                clip.validate(self._config.max_file_size_mb)
            except ClipValidationError as e:
                failed.append(f"{clip.title}: {e}")
                logger.error(f"Clip validation failed: {clip.title}: {e}")
                await self.events.emit(UPLOAD_FAILED, platform=None, clip=clip.title, error=str(e))
                continue

            for platform_id in clip.platforms:
                await self._upload_to_platform(clip, platform_id, results, failed, skipped)

            # Invalid clips made no requests, so they are not followed by a stagger
            if self._config.stagger_uploads and index < len(clips) - 1:
                logger.info(f"Waiting {self._config.stagger_minutes:g} minutes before next clip...")
                await self._sleep(self._config.stagger_seconds)

        self._analytics.record_batch({
            "clips_count": len(clips),
            "platforms": platforms,
            "results": results,
            "failed": failed,
            "skipped": skipped,
        })

        success_count = sum(len(urls) for urls in results.values())
        logger.info(f"Upload batch completed! Successful: {success_count}, Failed: {len(failed)}")
        await self.events.emit(BATCH_COMPLETE, results=results, failed=failed)

        return BatchResult(
            status="completed",
            results=results,
            failed=failed,
            skipped=skipped,
            analytics=self._analytics.snapshot(),
        )

    async def _upload_to_platform(
        self,
        clip: Clip,
        platform_id: str,
        results: Dict[str, List[str]],
        failed: List[str],
        skipped: List[str],
    ) -> None:
        try:
            uploader = self._registry.dispatch(platform_id)
        except UnknownPlatformError:
            logger.error(f"Unknown platform: {platform_id}")
            skipped.append(f"{clip.title} -> {platform_id}: unknown platform")
            return

        try:
            if self._config.random_delay and self._config.max_random_delay > 0:
                await self._sleep(self._rng.uniform(0, self._config.max_random_delay))

            outcome = await self._retry.perform_with_retry(platform_id, uploader, clip)
        except Exception as e:
            logger.error(f"Upload exception: {clip.title} -> {platform_id}: {e}")
            outcome = UploadOutcome.fail(platform_id, str(e) or type(e).__name__, attempts=0)

        if outcome.success:
            clip.upload_urls[platform_id] = outcome.url
            results.setdefault(platform_id, []).append(outcome.url)
            self._analytics.record_upload(platform_id, True)
            await self.events.emit(UPLOAD_SUCCESS, platform=platform_id, clip=clip.title, url=outcome.url)
        else:
            failed.append(f"{clip.title} -> {platform_id}: {outcome.error}")
            self._analytics.record_upload(platform_id, False, outcome.error)
            await self.events.emit(UPLOAD_FAILED, platform=platform_id, clip=clip.title, error=outcome.error)
