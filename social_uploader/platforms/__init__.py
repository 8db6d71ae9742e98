"""Platform adapters and registry."""
from .base import PlatformUploader
from .credentials import load_credentials, missing_credentials, has_credentials
from .instagram import InstagramUploader
from .linkedin import LinkedInUploader
from .registry import PlatformRegistry, build_default_registry
from .tiktok import TikTokUploader
from .twitter import TwitterUploader
from .youtube import YouTubeUploader

__all__ = [
    "PlatformUploader",
    "PlatformRegistry",
    "build_default_registry",
    "load_credentials",
    "missing_credentials",
    "has_credentials",
    "YouTubeUploader",
    "InstagramUploader",
    "TikTokUploader",
    "LinkedInUploader",
    "TwitterUploader",
]
