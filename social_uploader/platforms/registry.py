"""Platform registry - maps platform identifiers to adapters."""
import logging
from typing import Dict, List, Optional

import httpx

from ..errors import UnknownPlatformError
from ..models import UploadConfig
from .base import PlatformUploader
from .credentials import Credentials
from .instagram import InstagramUploader
from .linkedin import LinkedInUploader
from .tiktok import TikTokUploader
from .twitter import TwitterUploader
from .youtube import YouTubeUploader

logger = logging.getLogger(__name__)


class PlatformRegistry:
    """Dispatch point from platform identifier to its uploader."""

    def __init__(self, uploaders: Optional[Dict[str, PlatformUploader]] = None):
        self._uploaders: Dict[str, PlatformUploader] = {}
        for platform_id, uploader in (uploaders or {}).items():
            self.register(platform_id, uploader)

    def register(self, platform_id: str, uploader: PlatformUploader) -> None:
        key = platform_id.lower()
        if key in self._uploaders:
            logger.debug(f"Replacing uploader for {key}")
        self._uploaders[key] = uploader

    def dispatch(self, platform_id: str) -> PlatformUploader:
        """
        Get the uploader for a platform.

        Raises:
            UnknownPlatformError: no uploader registered for the identifier
        """
        try:
            return self._uploaders[platform_id.lower()]
        except KeyError:
            raise UnknownPlatformError(platform_id) from None

    def platform_ids(self) -> List[str]:
        return list(self._uploaders)

    def __contains__(self, platform_id: str) -> bool:
        return platform_id.lower() in self._uploaders

    def __len__(self) -> int:
        return len(self._uploaders)


def build_default_registry(
    credentials: Credentials,
    config: Optional[UploadConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> PlatformRegistry:
    """Registry with every supported platform adapter."""
    config = config or UploadConfig()
    delay = config.simulated_upload_seconds
    return PlatformRegistry({
        "youtube": YouTubeUploader(credentials.get("youtube"), delay),
        "instagram": InstagramUploader(
            credentials.get("instagram"),
            http_client=http_client,
            auto_publish=config.auto_publish,
            simulated_upload_seconds=delay,
        ),
        "tiktok": TikTokUploader(credentials.get("tiktok"), delay),
        "linkedin": LinkedInUploader(credentials.get("linkedin"), delay),
        "twitter": TwitterUploader(credentials.get("twitter"), delay),
    })
