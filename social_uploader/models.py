"""
Models for social_uploader.

Immutable dataclasses following Single Responsibility Principle.
"""
import os
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import ClipValidationError, ConfigurationError

MB = 1024 * 1024

DEFAULT_DESCRIPTION = "Check out this amazing clip! 🎬\n\n#shorts #viral #video"
DEFAULT_TAGS = ("shorts", "viral", "video", "content")
DEFAULT_PLATFORMS = ("youtube", "instagram", "tiktok")
DEFAULT_UPLOAD_SCHEDULE = (
    ("youtube", "09:00"),
    ("instagram", "12:00"),
    ("tiktok", "18:00"),
)


class Privacy(Enum):
    """Visibility of an uploaded clip."""
    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


@dataclass(frozen=True)
class Clip:
    """A video file plus its upload metadata and target platforms."""
    file_path: Path
    title: str
    description: str = DEFAULT_DESCRIPTION
    tags: List[str] = field(default_factory=lambda: list(DEFAULT_TAGS))
    privacy: Privacy = Privacy.PUBLIC
    thumbnail_path: Optional[Path] = None
    schedule_time: Optional[datetime] = None
    platforms: List[str] = field(default_factory=lambda: list(DEFAULT_PLATFORMS))
    # Filled in only after a successful upload: platform -> url
    upload_urls: Dict[str, str] = field(default_factory=dict, compare=False)
    created_at: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self):
        if self.privacy is not None and not isinstance(self.privacy, Privacy):
            object.__setattr__(self, "privacy", Privacy(self.privacy))
        object.__setattr__(self, "file_path", Path(self.file_path))

    def validate(self, max_file_size_mb: float = 500) -> None:
        """
        Check the clip can be uploaded.

        Raises:
            ClipValidationError: missing file, empty title or oversized file
        """
        path = Path(self.file_path)
        if not path.is_file():
            raise ClipValidationError(f"File not found: {path}")

        if not self.title or not self.title.strip():
            raise ClipValidationError("Title is required")

        size_mb = path.stat().st_size / MB
        if size_mb > max_file_size_mb:
            raise ClipValidationError(
                f"File too large: {size_mb:.2f}MB (max: {max_file_size_mb}MB)"
            )

    def for_platform(self, platform: str) -> "Clip":
        """Copy of this clip targeting a single platform."""
        return replace(self, platforms=[platform], upload_urls={})


@dataclass(frozen=True)
class UploadOutcome:
    """Immutable result of one retry sequence for a (clip, platform) pair."""
    platform: str
    success: bool
    url: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    attempts: int = 0

    @classmethod
    def ok(cls, platform: str, url: str, attempts: int):
        return cls(platform=platform, success=True, url=url, attempts=attempts)

    @classmethod
    def fail(cls, platform: str, error: str, attempts: int):
        return cls(platform=platform, success=False, error=error, attempts=attempts)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(value: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env_schedule(value: str) -> Tuple[Tuple[str, str], ...]:
    """Parse "youtube=09:00,tiktok=18:00" into (platform, time) pairs."""
    pairs = []
    for item in _env_list(value):
        platform, sep, at = item.partition("=")
        if not sep or not platform.strip() or not at.strip():
            raise ValueError(f"expected platform=HH:MM, got {item!r}")
        pairs.append((platform.strip().lower(), at.strip()))
    return tuple(pairs)


# env suffix -> (field name, parser)
_ENV_FIELDS = {
    "PLATFORMS": ("platforms", _env_list),
    "UPLOAD_SCHEDULE": ("upload_schedule", _env_schedule),
    "AUTO_PUBLISH": ("auto_publish", _env_bool),
    "STAGGER_UPLOADS": ("stagger_uploads", _env_bool),
    "STAGGER_MINUTES": ("stagger_minutes", float),
    "MAX_RETRIES": ("max_retries", int),
    "RETRY_BASE_DELAY": ("retry_base_delay", float),
    "RETRY_JITTER": ("retry_jitter", float),
    "RANDOM_DELAY": ("random_delay", _env_bool),
    "MAX_RANDOM_DELAY": ("max_random_delay", float),
    "DEFAULT_PRIVACY": ("default_privacy", Privacy),
    "DEFAULT_TAGS": ("default_tags", _env_list),
    "RATE_LIMIT_REQUESTS": ("rate_limit_requests", int),
    "RATE_LIMIT_WINDOW": ("rate_limit_window", float),
    "MAX_FILE_SIZE_MB": ("max_file_size_mb", float),
    "TICK_INTERVAL": ("tick_interval", float),
    "JOB_RETENTION_HOURS": ("job_retention_hours", float),
    "JOB_MAX_RETRIES": ("job_max_retries", int),
    "JOB_RETRY_DELAY_MINUTES": ("job_retry_delay_minutes", float),
    "SIMULATED_UPLOAD_SECONDS": ("simulated_upload_seconds", float),
    "ANALYTICS_FILE": ("analytics_file", Path),
}


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration passed into every component."""
    platforms: Tuple[str, ...] = DEFAULT_PLATFORMS
    auto_publish: bool = True

    # Batch behaviour
    stagger_uploads: bool = True
    stagger_minutes: float = 30
    random_delay: bool = True
    max_random_delay: float = 60  # seconds

    # Retry / rate limiting
    max_retries: int = 3
    retry_base_delay: float = 1.0  # backoff is 2**attempt * base
    retry_jitter: float = 0.0
    rate_limit_requests: int = 50
    rate_limit_window: float = 3600  # seconds

    # Clip defaults
    default_privacy: Privacy = Privacy.PUBLIC
    default_tags: Tuple[str, ...] = DEFAULT_TAGS
    default_description: str = DEFAULT_DESCRIPTION
    max_file_size_mb: float = 500

    # Scheduling
    upload_schedule: Tuple[Tuple[str, str], ...] = DEFAULT_UPLOAD_SCHEDULE
    tick_interval: float = 60  # seconds
    job_retention_hours: float = 24
    job_max_retries: int = 0  # reschedules after a job raises
    job_retry_delay_minutes: float = 5

    # Platform adapters
    simulated_upload_seconds: float = 0.0
    analytics_file: Path = Path("upload_analytics.json")

    def __post_init__(self):
        if self.max_retries < 1:
            raise ConfigurationError("max_retries must be at least 1")
        if self.rate_limit_requests < 1:
            raise ConfigurationError("rate_limit_requests must be at least 1")

    @property
    def stagger_seconds(self) -> float:
        return self.stagger_minutes * 60

    @property
    def job_retention_seconds(self) -> float:
        return self.job_retention_hours * 3600

    def make_clip(self, file_path, title: str, **options) -> Clip:
        """Build a clip, filling unset metadata from configured defaults."""
        privacy = options.get("privacy") or self.default_privacy
        if isinstance(privacy, str):
            privacy = Privacy(privacy)
        return Clip(
            file_path=Path(file_path),
            title=title,
            description=options.get("description") or self.default_description,
            tags=list(options.get("tags") or self.default_tags),
            privacy=privacy,
            thumbnail_path=options.get("thumbnail_path"),
            schedule_time=options.get("schedule_time"),
            platforms=list(options.get("platforms") or self.platforms),
        )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        prefix: str = "SOCIAL_UPLOADER_",
        **overrides,
    ) -> "UploadConfig":
        """
        Build config from ``SOCIAL_UPLOADER_*`` environment variables.

        Args:
            environ: Mapping to read (default: os.environ)
            prefix: Variable name prefix
            **overrides: Explicit values that win over the environment

        Raises:
            ConfigurationError: a variable could not be parsed
        """
        environ = os.environ if environ is None else environ
        values = {}
        for suffix, (name, parse) in _ENV_FIELDS.items():
            raw = environ.get(prefix + suffix)
            if raw is None or raw == "":
                continue
            try:
                values[name] = parse(raw)
            except ValueError as exc:
                raise ConfigurationError(f"Invalid {prefix}{suffix}={raw!r}: {exc}") from exc
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
