"""
Upload scheduler - fires batch uploads at wall-clock times.

Jobs live in a single id -> job arena. One periodic tick both runs due jobs
and sweeps resolved jobs whose retention window has passed.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Mapping, Optional

from ..models import Clip, UploadConfig
from ..protocols import IBatchRunner
from ..utils.events import JOB_COMPLETED, JOB_FAILED, EventEmitter
from .models import JobStatus, ScheduledJob

logger = logging.getLogger(__name__)


def parse_time_of_day(value: str) -> tuple:
    """Parse ``HH:MM`` into (hour, minute)."""
    try:
        hours, minutes = value.strip().split(":")
        hour, minute = int(hours), int(minutes)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM") from None
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
    return hour, minute


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def next_occurrence(time_of_day: str, now: datetime) -> datetime:
    """Next datetime at ``time_of_day``: today if still ahead, otherwise tomorrow."""
    hour, minute = parse_time_of_day(time_of_day)
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return target


class UploadScheduler:
    """
    Holds scheduled jobs and runs them when due.

    Usage:
        scheduler = UploadScheduler(orchestrator, config)
        job_id = scheduler.schedule_upload(clip, datetime(2025, 1, 15, 14, 30))
        scheduler.start()
        ...
        scheduler.stop()

    Events (subscribe with ``on``):
        job_completed(job)
        job_failed(job)
    """

    def __init__(
        self,
        orchestrator: IBatchRunner,
        config: Optional[UploadConfig] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self._orchestrator = orchestrator
        self._config = config or UploadConfig()
        self._now = now
        self._jobs: Dict[str, ScheduledJob] = {}
        self._task: Optional[asyncio.Task] = None
        self._tick_task: Optional[asyncio.Future] = None
        self._running = False
        self._ticking = False
        self.events = EventEmitter()

    def on(self, event_name: str, callback: Callable) -> None:
        self.events.on(event_name, callback)

    @property
    def is_running(self) -> bool:
        return self._running

    # Scheduling

    def schedule_upload(self, clip: Clip, schedule_time: datetime) -> str:
        """
        Schedule one batch run of ``clip`` at ``schedule_time``.

        Raises:
            ValueError: schedule_time is timezone-aware while the scheduler
                clock is naive, or the other way round
        """
        if _is_aware(schedule_time) != _is_aware(self._now()):
            raise ValueError(
                f"Schedule time {schedule_time.isoformat()} does not match the scheduler clock: "
                "use naive and timezone-aware datetimes consistently"
            )
        job = ScheduledJob(clip=clip, schedule_time=schedule_time, created_at=self._now())
        while job.id in self._jobs:
            job = ScheduledJob(clip=clip, schedule_time=schedule_time, created_at=self._now())
        self._jobs[job.id] = job
        logger.info(f"Scheduled upload: {clip.title} for {schedule_time}")
        return job.id

    def schedule_platform_uploads(self, clip: Clip, platform_schedule: Mapping[str, str]) -> List[str]:
        """
        Schedule one single-platform job per platform at its own time of day.

        Args:
            clip: Clip metadata shared by every job
            platform_schedule: platform -> "HH:MM"

        Returns:
            Created job ids, in platform_schedule order

        Raises:
            ValueError: a time is not HH:MM (nothing is scheduled)
        """
        now = self._now()
        targets = [
            (platform, next_occurrence(time_of_day, now))
            for platform, time_of_day in platform_schedule.items()
        ]
        return [
            self.schedule_upload(clip.for_platform(platform), schedule_time)
            for platform, schedule_time in targets
        ]

    def get_scheduled_jobs(self) -> List[ScheduledJob]:
        return list(self._jobs.values())

    def get_job(self, job_id: str) -> Optional[ScheduledJob]:
        return self._jobs.get(job_id)

    # Tick

    async def tick(self) -> int:
        """
        Run every due job once, then return how many were run.

        Not reentrant: a tick started while another is in progress does nothing.
        """
        if self._ticking:
            logger.debug("Scheduler tick already in progress, skipping")
            return 0

        self._ticking = True
        try:
            now = self._now()
            self._sweep(now)
            due = await self._collect_due(now)
            for job in due:
                await self._execute(job)
            return len(due)
        finally:
            self._ticking = False

    async def _collect_due(self, now: datetime) -> List[ScheduledJob]:
        due = []
        for job in list(self._jobs.values()):
            try:
                if job.is_due(now):
                    due.append(job)
            except TypeError as e:
                # Time not comparable with the clock; fail this job only
                job.status = JobStatus.FAILED
                job.error = f"Invalid schedule time {job.schedule_time!r}: {e}"
                logger.error(f"Scheduled job failed: {job.id}: {job.error}")
                self._resolve(job)
                await self.events.emit(JOB_FAILED, job=job)
        return due

    def _sweep(self, now: datetime) -> None:
        expired = [
            job_id for job_id, job in self._jobs.items()
            if job.expires_at is not None and job.expires_at <= now
        ]
        for job_id in expired:
            del self._jobs[job_id]
        if expired:
            logger.debug(f"Removed {len(expired)} expired job(s)")

    async def _execute(self, job: ScheduledJob) -> None:
        logger.info(f"Executing scheduled job: {job.id}")
        job.status = JobStatus.EXECUTING

        try:
            result = await self._orchestrator.run([job.clip])
        except Exception as e:
            job.error = str(e) or type(e).__name__
            logger.error(f"Scheduled job failed: {job.id}: {job.error}")

            if job.retry_count < self._config.job_max_retries:
                job.retry_count += 1
                job.status = JobStatus.SCHEDULED
                job.schedule_time = self._now() + timedelta(minutes=self._config.job_retry_delay_minutes)
                logger.info(
                    f"Rescheduled job {job.id} for {job.schedule_time} "
                    f"(retry {job.retry_count}/{self._config.job_max_retries})"
                )
                return

            job.status = JobStatus.FAILED
            self._resolve(job)
            await self.events.emit(JOB_FAILED, job=job)
            return

        job.status = JobStatus.COMPLETED
        job.result = result
        job.error = None
        self._resolve(job)
        logger.info(f"Scheduled job completed: {job.id}")
        await self.events.emit(JOB_COMPLETED, job=job)

    def _resolve(self, job: ScheduledJob) -> None:
        job.finished_at = self._now()
        job.expires_at = job.finished_at + timedelta(seconds=self._config.job_retention_seconds)

    # Lifecycle

    def start(self) -> None:
        """Start the periodic tick. Must be called from a running event loop."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info("Upload scheduler started")

    def stop(self) -> None:
        """
        Stop the periodic tick. No tick fires after this returns.

        A tick already executing a job is left to finish; await ``join()``
        to wait for it.
        """
        if not self._running:
            return
        self._running = False
        if self._task is not None:
            self._task.cancel()
            self._task = None
        logger.info("Upload scheduler stopped")

    async def join(self) -> None:
        """Wait for an in-flight tick to finish."""
        if self._tick_task is not None and not self._tick_task.done():
            await self._tick_task

    async def _run(self) -> None:
        while self._running:
            await asyncio.sleep(self._config.tick_interval)
            if not self._running:
                break
            self._tick_task = asyncio.ensure_future(self.tick())
            try:
                # Shielded so stop() never cancels a job mid-upload
                await asyncio.shield(self._tick_task)
            except Exception as e:
                logger.error(f"Scheduler tick failed: {e}")
