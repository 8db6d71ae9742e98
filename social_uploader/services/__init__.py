"""Services for social_uploader."""
from .analytics import AnalyticsRecorder, AnalyticsSnapshot, AnalyticsState
from .analytics_store import JsonAnalyticsStore
from .rate_limiter import RateLimiter
from .retry import RetryingUploader

__all__ = [
    "AnalyticsRecorder",
    "AnalyticsSnapshot",
    "AnalyticsState",
    "JsonAnalyticsStore",
    "RateLimiter",
    "RetryingUploader",
]
