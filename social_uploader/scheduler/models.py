"""Scheduler data models."""
import random
import string
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from ..models import Clip

if TYPE_CHECKING:
    from ..orchestrator.models import BatchResult


class JobStatus(Enum):
    """Lifecycle of a scheduled job."""
    SCHEDULED = "scheduled"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


def generate_job_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"job_{int(time.time() * 1000)}_{suffix}"


@dataclass
class ScheduledJob:
    """A clip waiting for its target time. Owned by the scheduler."""
    clip: Clip
    schedule_time: datetime
    id: str = field(default_factory=generate_job_id)
    status: JobStatus = JobStatus.SCHEDULED
    retry_count: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    result: Optional["BatchResult"] = None
    error: Optional[str] = None
    finished_at: Optional[datetime] = None
    # Set once the job is terminal; the tick removes the job after this time
    expires_at: Optional[datetime] = None

    def is_due(self, now: datetime) -> bool:
        return self.status == JobStatus.SCHEDULED and self.schedule_time <= now
