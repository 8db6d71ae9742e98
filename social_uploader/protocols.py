"""
Protocols (Interfaces) for Dependency Inversion.

Following Interface Segregation Principle - small, focused interfaces.
"""
from typing import Any, Dict, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class IAnalyticsStore(Protocol):
    """Interface for analytics persistence."""

    def load(self) -> Optional[Dict[str, Any]]:
        """Load persisted state, or None when nothing is stored."""
        ...

    def save(self, data: Dict[str, Any]) -> None:
        """Persist state after a mutation."""
        ...


@runtime_checkable
class IAnalyticsSink(Protocol):
    """Interface for recording upload results."""

    def record_upload(self, platform: str, success: bool, error: Optional[str] = None) -> None:
        ...

    def record_batch(self, summary: Dict[str, Any]) -> None:
        ...

    def snapshot(self) -> Any:
        ...


@runtime_checkable
class IBatchRunner(Protocol):
    """Interface for running a batch of clips (used by the scheduler)."""

    async def run(self, clips: Sequence[Any]) -> Any:
        ...
