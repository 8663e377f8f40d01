"""Background task scheduling components."""

from orien.scheduler.base import BackgroundScheduler, Schedule
from orien.scheduler.schedules import PeriodicSchedule

__all__ = [
    "BackgroundScheduler",
    "PeriodicSchedule",
    "Schedule",
]
