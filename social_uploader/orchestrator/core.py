"""Core facade - wires platforms, analytics, batch orchestrator and scheduler."""
import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence, Union

import httpx

from ..errors import ClipValidationError
from ..models import Clip, UploadConfig
from ..platforms.credentials import Credentials, load_credentials, missing_credentials
from ..platforms.registry import PlatformRegistry, build_default_registry
from ..protocols import IAnalyticsStore
from ..scheduler.models import ScheduledJob
from ..scheduler.scheduler import UploadScheduler
from ..services.analytics import AnalyticsRecorder, AnalyticsSnapshot
from ..services.analytics_store import JsonAnalyticsStore
from ..utils.events import JOB_COMPLETED, JOB_FAILED
from .batch import BatchOrchestrator
from .file_collector import FileCollector
from .models import BatchResult

logger = logging.getLogger(__name__)


class SocialMediaUploader:
    """
    Uploads clips to social platforms using injected services.

    Follows:
    - Dependency Injection (registry, store and clocks injectable)
    - Single Responsibility (delegates to BatchOrchestrator / UploadScheduler)

    Usage:
        async with SocialMediaUploader(config) as uploader:
            uploader.on("upload_success", lambda platform, clip, url: print(url))
            result = await uploader.upload_single_clip("video.mp4", "My Video")

        # Per-platform posting times
        async with SocialMediaUploader(config) as uploader:
            clip = uploader.build_clip("video.mp4", "Multi-Platform")
            job_ids = uploader.schedule_upload(clip, platform_schedule={"youtube": "09:00"})
            uploader.start_scheduler()
    """

    def __init__(
        self,
        config: Optional[UploadConfig] = None,
        credentials: Optional[Credentials] = None,
        registry: Optional[PlatformRegistry] = None,
        analytics_store: Optional[IAnalyticsStore] = None,
        persist_analytics: bool = True,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep=asyncio.sleep,
        now: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize uploader with dependencies.

        Args:
            config: Upload configuration
            credentials: Platform credentials (default: read from environment)
            registry: Pre-built platform registry (default: all adapters)
            analytics_store: Analytics persistence (default: JSON file from config)
            persist_analytics: Set False to keep analytics in memory only
            http_client: Shared HTTP client (created in __aenter__ if omitted)
            sleep: Awaitable used for delays, injectable for tests
            now: Wall clock for the scheduler and analytics
        """
        self._config = config or UploadConfig()
        self._credentials = credentials if credentials is not None else load_credentials()
        self._external_registry = registry
        self._http_client = http_client
        self._owns_http_client = False
        self._sleep = sleep
        self._now = now

        if analytics_store is None and persist_analytics:
            analytics_store = JsonAnalyticsStore(self._config.analytics_file)
        self._analytics_store = analytics_store

        # Services (initialized in __aenter__)
        self._registry: Optional[PlatformRegistry] = None
        self._analytics: Optional[AnalyticsRecorder] = None
        self._batch: Optional[BatchOrchestrator] = None
        self._scheduler: Optional[UploadScheduler] = None
        self._collector = FileCollector()

    async def __aenter__(self):
        """Initialize services."""
        if self._external_registry is not None:
            self._registry = self._external_registry
        else:
            if self._http_client is None:
                self._http_client = httpx.AsyncClient(timeout=30)
                self._owns_http_client = True
            self._registry = build_default_registry(self._credentials, self._config, self._http_client)

        self._analytics = AnalyticsRecorder(self._analytics_store, now=self._now)
        self._batch = BatchOrchestrator(
            self._registry,
            config=self._config,
            analytics=self._analytics,
            sleep=self._sleep,
        )
        self._scheduler = UploadScheduler(self._batch, self._config, now=self._now)
        logger.info("Social Media Uploader initialized")
        return self

    async def __aexit__(self, *args):
        """Cleanup resources."""
        if self._scheduler is not None:
            self._scheduler.stop()
            await self._scheduler.join()
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def config(self) -> UploadConfig:
        return self._config

    @property
    def scheduler(self) -> UploadScheduler:
        assert self._scheduler is not None
        return self._scheduler

    @property
    def orchestrator(self) -> BatchOrchestrator:
        assert self._batch is not None
        return self._batch

    def on(self, event_name: str, callback: Callable) -> None:
        """Subscribe to upload or job events."""
        if event_name in (JOB_COMPLETED, JOB_FAILED):
            self.scheduler.on(event_name, callback)
        else:
            self.orchestrator.on(event_name, callback)

    def build_clip(self, file_path, title: str, **options) -> Clip:
        """Clip with unset metadata taken from the configured defaults."""
        return self._config.make_clip(file_path, title, **options)

    async def upload_single_clip(
        self,
        file_path: Union[str, Path],
        title: str,
        schedule_time: Optional[datetime] = None,
        platform_schedule: Optional[Mapping[str, str]] = None,
        **options,
    ) -> Union[BatchResult, str, List[str]]:
        """
        Upload one file now, or schedule it.

        Returns:
            BatchResult for immediate uploads (status "error" on invalid input),
            a job id when ``schedule_time`` is given, or job ids when
            ``platform_schedule`` is given.
        """
        try:
            clip = self.build_clip(file_path, title, schedule_time=schedule_time, **options)
            clip.validate(self._config.max_file_size_mb)

            if schedule_time is not None or platform_schedule:
                return self.schedule_upload(clip, schedule_time, platform_schedule)

            return await self.upload_clips([clip])

        except (ClipValidationError, ValueError) as e:
            logger.error(f"Single clip upload failed: {e}")
            return BatchResult.from_error(str(e))

    async def upload_from_folder(self, folder_path: Union[str, Path]) -> BatchResult:
        """Upload every video in a folder, titled from the file names."""
        folder = Path(folder_path)
        if not folder.is_dir():
            logger.error(f"Folder upload failed: Folder not found: {folder}")
            return BatchResult.from_error(f"Folder not found: {folder}")

        files = self._collector.collect_files(folder)
        if not files:
            logger.error(f"Folder upload failed: No video files found in {folder}")
            return BatchResult.from_error(f"No video files found in {folder}")

        clips = [
            self.build_clip(path, FileCollector.title_from_filename(path))
            for path in files
        ]
        return await self.upload_clips(clips)

    async def upload_clips(self, clips: Sequence[Clip]) -> BatchResult:
        return await self.orchestrator.run(clips)

    def schedule_upload(
        self,
        clip: Clip,
        schedule_time: Optional[datetime] = None,
        platform_schedule: Optional[Mapping[str, str]] = None,
    ) -> Union[str, List[str]]:
        if platform_schedule:
            return self.scheduler.schedule_platform_uploads(clip, platform_schedule)
        if schedule_time is None:
            raise ValueError("schedule_time or platform_schedule is required")
        return self.scheduler.schedule_upload(clip, schedule_time)

    def start_scheduler(self) -> None:
        self.scheduler.start()

    def stop_scheduler(self) -> None:
        self.scheduler.stop()

    def get_analytics(self) -> AnalyticsSnapshot:
        assert self._analytics is not None
        return self._analytics.snapshot()

    def get_scheduled_jobs(self) -> List[ScheduledJob]:
        return self.scheduler.get_scheduled_jobs()

    def validate_credentials(self) -> List[str]:
        """Missing credentials for the configured platforms, as "PLATFORM KEY"."""
        return missing_credentials(self._credentials, self._config.platforms)
