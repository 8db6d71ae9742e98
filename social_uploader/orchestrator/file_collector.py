"""File collection utilities for folder uploads."""
import re
from pathlib import Path
from typing import Iterable, List

VIDEO_EXTENSIONS = (".mp4",)


class FileCollector:
    """Collects video files from a folder."""

    def __init__(self, extensions: Iterable[str] = VIDEO_EXTENSIONS):
        self._extensions = tuple(ext.lower() for ext in extensions)

    def collect_files(self, folder: Path) -> List[Path]:
        """
        Collect video files directly inside ``folder`` (not recursive).

        Args:
            folder: Folder to scan

        Returns:
            Sorted list of video file paths
        """
        return sorted(
            item for item in Path(folder).iterdir()
            if item.is_file() and item.suffix.lower() in self._extensions
        )

    @staticmethod
    def title_from_filename(path: Path) -> str:
        """``my_cool_clip.mp4`` -> ``My Cool Clip``."""
        title = Path(path).stem.replace("_", " ")
        return re.sub(r"\b\w", lambda m: m.group(0).upper(), title)
