"""YouTube adapter."""
import logging

from ..models import Clip
from .base import PlatformUploader
from .credentials import PLATFORM_CREDENTIALS

logger = logging.getLogger(__name__)


class YouTubeUploader(PlatformUploader):
    """
    YouTube Data API adapter.

    The OAuth 2.0 consent flow is not performed here; configured client
    credentials are accepted as an authenticated session.
    """

    name = "YouTube"
    url_template = "https://youtube.com/watch?v={identifier}"
    id_prefix = "yt_"
    required_credentials = PLATFORM_CREDENTIALS["youtube"]

    async def authenticate(self) -> bool:
        if not self.credentials_configured:
            logger.info("YouTube authentication required - configure OAuth client credentials")
            return False
        self.authenticated = True
        return True

    async def upload(self, clip: Clip) -> str:
        await self._simulate_transfer(clip)
        return self._new_identifier()
