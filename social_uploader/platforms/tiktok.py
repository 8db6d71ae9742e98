"""TikTok adapter."""
import logging

from ..models import Clip
from .base import PlatformUploader
from .credentials import PLATFORM_CREDENTIALS

logger = logging.getLogger(__name__)


class TikTokUploader(PlatformUploader):
    name = "TikTok"
    url_template = "https://tiktok.com/@user/video/{identifier}"
    id_prefix = "tt_"
    required_credentials = PLATFORM_CREDENTIALS["tiktok"]

    async def authenticate(self) -> bool:
        if not self.credentials_configured:
            logger.warning("TikTok client key/secret not configured")
            return False
        self.authenticated = True
        return True

    async def upload(self, clip: Clip) -> str:
        await self._simulate_transfer(clip)
        return self._new_identifier()
