"""Orchestrator data models."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..services.analytics import AnalyticsSnapshot


@dataclass
class BatchResult:
    """Result of a batch upload."""
    status: str
    results: Dict[str, List[str]] = field(default_factory=dict)  # platform -> urls
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    analytics: Optional[AnalyticsSnapshot] = None
    error: Optional[str] = None

    @property
    def success_count(self) -> int:
        return sum(len(urls) for urls in self.results.values())

    @property
    def all_success(self) -> bool:
        return self.status == "completed" and not self.failed and not self.skipped

    @classmethod
    def from_error(cls, error: str):
        return cls(status="error", error=error, failed=[error])
