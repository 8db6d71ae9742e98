"""
Analytics Service - Single Responsibility: upload counters and per-platform stats.

Persistence is delegated to an injected store (see analytics_store.py).
"""
import copy
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from ..protocols import IAnalyticsStore

logger = logging.getLogger(__name__)


@dataclass
class PlatformPerformance:
    success_rate: float = 0.0
    total_attempts: int = 0
    last_upload: Optional[str] = None
    last_success: Optional[str] = None
    common_errors: Dict[str, int] = field(default_factory=dict)


@dataclass
class AnalyticsState:
    """Process-wide aggregate, mutated only by AnalyticsRecorder."""
    total_uploads: int = 0
    successful_uploads: Dict[str, int] = field(default_factory=dict)
    failed_uploads: Dict[str, int] = field(default_factory=dict)
    upload_history: List[Dict[str, Any]] = field(default_factory=list)
    platform_performance: Dict[str, PlatformPerformance] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyticsState":
        """Build state from persisted data, ignoring unknown keys."""
        performance = {
            platform: PlatformPerformance(**{
                k: v for k, v in perf.items()
                if k in PlatformPerformance.__dataclass_fields__
            })
            for platform, perf in (data.get("platform_performance") or {}).items()
        }
        return cls(
            total_uploads=int(data.get("total_uploads", 0)),
            successful_uploads=dict(data.get("successful_uploads") or {}),
            failed_uploads=dict(data.get("failed_uploads") or {}),
            upload_history=list(data.get("upload_history") or []),
            platform_performance=performance,
        )


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Detached, read-only copy of AnalyticsState."""
    total_uploads: int
    successful_uploads: Dict[str, int]
    failed_uploads: Dict[str, int]
    upload_history: List[Dict[str, Any]]
    platform_performance: Dict[str, Dict[str, Any]]

    @property
    def total_successful(self) -> int:
        return sum(self.successful_uploads.values())

    @property
    def total_failed(self) -> int:
        return sum(self.failed_uploads.values())

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(asdict(self))


class AnalyticsRecorder:
    """
    Accumulates upload results.

    Usage:
        recorder = AnalyticsRecorder(store=JsonAnalyticsStore(path))
        recorder.record_upload("youtube", True)
        recorder.record_upload("tiktok", False, "quota_exceeded")
        stats = recorder.snapshot()
    """

    def __init__(
        self,
        store: Optional[IAnalyticsStore] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._now = now
        self._state = AnalyticsState()
        if store is not None:
            data = store.load()
            if data:
                self._state = AnalyticsState.from_dict(data)
                logger.debug(f"Loaded analytics: {self._state.total_uploads} uploads recorded")

    def record_upload(self, platform: str, success: bool, error: Optional[str] = None) -> None:
        state = self._state
        state.total_uploads += 1

        if success:
            state.successful_uploads[platform] = state.successful_uploads.get(platform, 0) + 1
        else:
            state.failed_uploads[platform] = state.failed_uploads.get(platform, 0) + 1

        perf = state.platform_performance.setdefault(platform, PlatformPerformance())
        timestamp = self._now().isoformat()
        perf.total_attempts += 1
        perf.last_upload = timestamp
        perf.success_rate = state.successful_uploads.get(platform, 0) / perf.total_attempts

        if success:
            perf.last_success = timestamp
        elif error:
            perf.common_errors[error] = perf.common_errors.get(error, 0) + 1

        self._flush()

    def record_batch(self, summary: Dict[str, Any]) -> None:
        entry = {"timestamp": self._now().isoformat()}
        entry.update(copy.deepcopy(summary))
        self._state.upload_history.append(entry)
        self._flush()

    def snapshot(self) -> AnalyticsSnapshot:
        data = copy.deepcopy(self._state.to_dict())
        return AnalyticsSnapshot(**data)

    def _flush(self) -> None:
        if self._store is not None:
            self._store.save(self._state.to_dict())
