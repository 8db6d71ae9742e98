"""LinkedIn adapter."""
import logging

from ..models import Clip
from .base import PlatformUploader
from .credentials import PLATFORM_CREDENTIALS

logger = logging.getLogger(__name__)


class LinkedInUploader(PlatformUploader):
    name = "LinkedIn"
    url_template = "https://linkedin.com/posts/{identifier}"
    id_prefix = "li_"
    required_credentials = PLATFORM_CREDENTIALS["linkedin"]

    async def authenticate(self) -> bool:
        if not self.credentials_configured:
            logger.warning("LinkedIn client credentials not configured")
            return False
        self.authenticated = True
        return True

    async def upload(self, clip: Clip) -> str:
        await self._simulate_transfer(clip)
        return self._new_identifier()
