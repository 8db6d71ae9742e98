"""
social_uploader - Upload video clips to multiple social platforms.

Retries with exponential backoff behind a per-platform rate limiter, and
schedules uploads for wall-clock times.

Usage:
    from social_uploader import SocialMediaUploader, UploadConfig

    # Upload now
    async with SocialMediaUploader(UploadConfig(platforms=("youtube", "tiktok"))) as uploader:
        result = await uploader.upload_single_clip("video.mp4", "Amazing Content")
        print(result.results, result.failed)

    # Upload a folder of .mp4 files
    result = await uploader.upload_from_folder("clips")

    # Schedule per-platform posting times
    clip = uploader.build_clip("video.mp4", "Multi-Platform Scheduled")
    job_ids = uploader.schedule_upload(
        clip, platform_schedule={"youtube": "09:00", "instagram": "12:00"}
    )
    uploader.start_scheduler()
"""
from .errors import (
    AuthenticationError,
    ClipValidationError,
    ConfigurationError,
    UnknownPlatformError,
    UploaderError,
    UploadError,
)
from .models import Clip, Privacy, UploadConfig, UploadOutcome
from .orchestrator import BatchOrchestrator, BatchResult, SocialMediaUploader
from .platforms import PlatformRegistry, PlatformUploader, build_default_registry
from .scheduler import JobStatus, ScheduledJob, UploadScheduler
from .services import (
    AnalyticsRecorder,
    AnalyticsSnapshot,
    JsonAnalyticsStore,
    RateLimiter,
    RetryingUploader,
)

__version__ = "0.1.0"
__all__ = [
    # Main
    "SocialMediaUploader",
    "BatchOrchestrator",
    "BatchResult",
    "UploadScheduler",
    "ScheduledJob",
    "JobStatus",
    # Models
    "Clip",
    "Privacy",
    "UploadConfig",
    "UploadOutcome",
    # Platforms
    "PlatformRegistry",
    "PlatformUploader",
    "build_default_registry",
    # Services
    "AnalyticsRecorder",
    "AnalyticsSnapshot",
    "JsonAnalyticsStore",
    "RateLimiter",
    "RetryingUploader",
    # Errors
    "UploaderError",
    "ConfigurationError",
    "ClipValidationError",
    "UnknownPlatformError",
    "UploadError",
    "AuthenticationError",
]
