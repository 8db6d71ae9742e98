"""Twitter adapter."""
import logging

from ..models import Clip
from .base import PlatformUploader
from .credentials import PLATFORM_CREDENTIALS

logger = logging.getLogger(__name__)


class TwitterUploader(PlatformUploader):
    name = "Twitter"
    url_template = "https://twitter.com/user/status/{identifier}"
    id_prefix = "tw_"
    required_credentials = PLATFORM_CREDENTIALS["twitter"]

    async def authenticate(self) -> bool:
        if not self.credentials_configured:
            logger.warning("Twitter API keys not configured")
            return False
        self.authenticated = True
        return True

    async def upload(self, clip: Clip) -> str:
        await self._simulate_transfer(clip)
        return self._new_identifier()
