"""Base class shared by all platform adapters."""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional
from uuid import uuid4

from ..models import Clip
from .credentials import is_placeholder

logger = logging.getLogger(__name__)


class PlatformUploader(ABC):
    """
    Capability interface every platform adapter implements.

    The retry driver only relies on ``authenticate()``, ``upload()`` and
    ``url_for()``. Adapters may run multi-step protocols inside ``upload()``
    but must expose the single call contract: return an identifier or raise.

    Authentication is cached on the instance until
    ``invalidate_authentication()`` is called.
    """

    name: str = "Platform"
    url_template: str = "{identifier}"
    id_prefix: str = ""
    # Credential keys this platform needs, e.g. ("CLIENT_ID", "CLIENT_SECRET")
    required_credentials: tuple = ()

    def __init__(
        self,
        credentials: Optional[Dict[str, str]] = None,
        simulated_upload_seconds: float = 0.0,
    ):
        self._credentials = dict(credentials or {})
        self._simulated_upload_seconds = simulated_upload_seconds
        self.authenticated = False

    @property
    def credentials_configured(self) -> bool:
        return all(
            not is_placeholder(self._credentials.get(key))
            for key in self.required_credentials
        )

    @abstractmethod
    async def authenticate(self) -> bool:
        """Authenticate with the platform. Returns True on success."""
        pass

    @abstractmethod
    async def upload(self, clip: Clip) -> str:
        """
        Upload one clip.

        Returns:
            Platform identifier of the created post

        Raises:
            UploadError: transient failure
            AuthenticationError: token rejected or missing
        """
        pass

    def url_for(self, identifier: str) -> str:
        """Public URL for an identifier returned by ``upload()``."""
        return self.url_template.format(identifier=identifier)

    def invalidate_authentication(self) -> None:
        self.authenticated = False

    def _new_identifier(self) -> str:
        return f"{self.id_prefix}{uuid4().hex[:12]}"

    async def _simulate_transfer(self, clip: Clip) -> None:
        logger.info(f"{self.name} upload: {clip.title}")
        logger.debug(f"Description: {clip.description[:100]}...")
        logger.debug(f"Tags: {', '.join(clip.tags)}")
        if self._simulated_upload_seconds > 0:
            await asyncio.sleep(self._simulated_upload_seconds)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} authenticated={self.authenticated}>"
