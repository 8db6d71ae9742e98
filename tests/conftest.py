"""Shared fixtures: fake clocks, recording sleep and scriptable platforms."""
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pytest

from social_uploader.errors import UploadError
from social_uploader.models import Clip, UploadConfig
from social_uploader.platforms.base import PlatformUploader


class FakeClock:
    """Monotonic clock advanced by hand (or by RecordingSleep)."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeNow:
    """Wall clock returning a fixed datetime until advanced."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingSleep:
    """Awaitable sleep that records durations and advances a FakeClock."""

    def __init__(self, clock: Optional[FakeClock] = None):
        self.calls: List[float] = []
        self._clock = clock

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._clock is not None:
            self._clock.advance(seconds)


Step = Union[str, Exception]


class FakePlatform(PlatformUploader):
    """
    Platform whose upload results are scripted.

    Each upload consumes the next step: a string is returned as identifier,
    an exception is raised. The last step repeats once the script runs out.
    """

    url_template = "https://fake.example/{identifier}"

    def __init__(self, steps: Sequence[Step] = ("id-1",), auth_ok: bool = True, name: str = "Fake"):
        super().__init__()
        self.name = name
        self._steps = list(steps)
        self._auth_ok = auth_ok
        self.upload_calls = 0
        self.auth_calls = 0
        self.uploaded: List[Clip] = []

    async def authenticate(self) -> bool:
        self.auth_calls += 1
        self.authenticated = self._auth_ok
        return self._auth_ok

    async def upload(self, clip: Clip) -> str:
        self.upload_calls += 1
        self.uploaded.append(clip)
        step = self._steps[min(self.upload_calls, len(self._steps)) - 1]
        if isinstance(step, Exception):
            raise step
        return step


def always_fail(reason: str = "quota_exceeded") -> List[Step]:
    return [UploadError(reason)]


@pytest.fixture
def video_file(tmp_path) -> Path:
    path = tmp_path / "my_video.mp4"
    path.write_bytes(b"\x00" * 1024)
    return path


@pytest.fixture
def make_clip(tmp_path):
    counter = {"n": 0}

    def factory(title: str = "Clip", platforms=("youtube",), path: Optional[Path] = None) -> Clip:
        if path is None:
            counter["n"] += 1
            path = tmp_path / f"clip_{counter['n']}.mp4"
            path.write_bytes(b"\x00" * 512)
        return Clip(file_path=path, title=title, platforms=list(platforms))

    return factory


@pytest.fixture
def quiet_config():
    """Config without stagger or random delays."""
    def factory(**overrides) -> UploadConfig:
        values = dict(stagger_uploads=False, random_delay=False)
        values.update(overrides)
        return UploadConfig(**values)

    return factory
