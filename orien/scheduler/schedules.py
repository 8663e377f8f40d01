"""Concrete schedule implementations."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from orien.scheduler.base import Schedule

if TYPE_CHECKING:
    from orien.agents import Agent

logger = logging.getLogger(__name__)


class PeriodicSchedule(Schedule):
    """Runs periodically while the chat endpoint is idle."""

    def __init__(
        self,
        agent: Agent,
        interval: float,
    ):
        """
        Initialize periodic schedule.

        Args:
            agent: The agent to execute on each interval
            interval: Time in seconds between executions while idle
        """
        self.agent = agent
        self._interval = interval
        self._last_run: float | None = None
        logger.info(
            "PeriodicSchedule created for %s with interval=%.0fs",
            agent.name,
            interval,
        )

    def should_run(self, is_idle: bool) -> bool:
        """Check if idle and the interval has elapsed since the last run."""
        if not is_idle:
            return False
        if self._last_run is None:
            return True
        return time.monotonic() - self._last_run >= self._interval

    def reset(self) -> None:
        """The interval keeps running across chat activity."""
        pass

    def mark_complete(self) -> None:
        """Record completion time for next interval calculation."""
        self._last_run = time.monotonic()
