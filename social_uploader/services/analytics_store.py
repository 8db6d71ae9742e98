"""
JsonAnalyticsStore - JSON file persistence for upload analytics.

Load and save failures are logged and never raised.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_ANALYTICS_FILE = Path("upload_analytics.json")


class JsonAnalyticsStore:
    """Implements IAnalyticsStore on a single JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path or DEFAULT_ANALYTICS_FILE)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            if not self._path.exists():
                logger.debug("No analytics file found at %s, starting fresh", self._path)
                return None
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse analytics file: %s - starting fresh", e)
            return None
        except OSError as e:
            logger.error("Failed to load analytics: %s", e)
            return None

        if not isinstance(data, dict):
            logger.warning("Analytics file %s does not hold an object - starting fresh", self._path)
            return None
        return data

    def save(self, data: Dict[str, Any]) -> None:
        try:
            if self._path.parent != Path("."):
                self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except (OSError, TypeError) as e:
            logger.error("Failed to save analytics: %s", e)
