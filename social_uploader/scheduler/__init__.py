"""Scheduler package - time-based upload jobs."""
from .models import JobStatus, ScheduledJob
from .scheduler import UploadScheduler, next_occurrence, parse_time_of_day

__all__ = ["UploadScheduler", "ScheduledJob", "JobStatus", "next_occurrence", "parse_time_of_day"]
