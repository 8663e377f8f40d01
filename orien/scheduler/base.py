"""Background task scheduling."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from orien.agents import Agent

logger = logging.getLogger(__name__)


class Schedule:
    """Base class for schedule policies."""

    agent: Agent

    def should_run(self, is_idle: bool) -> bool:
        """
        Check if the schedule condition is met.

        Args:
            is_idle: True if no chat request arrived within the idle threshold

        Returns:
            True if the task should run now
        """
        return False

    def reset(self) -> None:
        """Reset schedule state. Called when a chat request arrives."""
        pass

    def mark_complete(self) -> None:
        """Called after task execution completes."""
        pass


class BackgroundScheduler:
    """Runs background agents while the chat endpoint is idle.

    Chat requests bracket their work with notify_foreground_start/end; a
    background pass in flight at that moment is cancelled so the user's
    request is not queued behind it.
    """

    def __init__(
        self,
        schedules: list[Schedule],
        idle_threshold: float,
        tick_interval: float = 1.0,
    ):
        """
        Initialize the scheduler.

        Args:
            schedules: Schedules in priority order (first checked first)
            idle_threshold: Seconds without a chat request before background work may run
            tick_interval: How often to check schedules in seconds
        """
        self._schedules = schedules
        self._idle_threshold = idle_threshold
        self._tick_interval = tick_interval
        self._last_message_time = time.monotonic()
        self._running = True
        self._foreground_active = 0
        self._current_task: str | None = None
        self._active_task: asyncio.Task[bool] | None = None

    def notify_message(self) -> None:
        """Called when a chat request arrives. Resets all schedules."""
        self._last_message_time = time.monotonic()
        for schedule in self._schedules:
            schedule.reset()
        logger.debug("Scheduler: schedules reset by chat request")

    def notify_foreground_start(self) -> None:
        """Called when a chat request starts processing."""
        self._foreground_active += 1
        if self._active_task and not self._active_task.done():
            self._active_task.cancel()
            logger.info("Scheduler: cancelled %s for a chat request", self._current_task)

    def notify_foreground_end(self) -> None:
        """Called when a chat request finishes processing."""
        self._foreground_active = max(0, self._foreground_active - 1)

    def stop(self) -> None:
        """Signal the scheduler to stop."""
        self._running = False

    async def tick(self) -> bool:
        """Run the first due schedule, if any. Returns True if a task ran."""
        if self._foreground_active:
            return False

        is_idle = time.monotonic() - self._last_message_time >= self._idle_threshold
        for schedule in self._schedules:
            if not schedule.should_run(is_idle):
                continue

            agent = schedule.agent
            self._current_task = agent.name
            try:
                self._active_task = asyncio.create_task(agent.execute())
                did_work = await self._active_task
                schedule.mark_complete()
                if did_work:
                    logger.info("Background task completed: %s", agent.name)
            except asyncio.CancelledError:
                logger.info("Background task cancelled: %s", agent.name)
            except Exception as e:
                logger.exception("Background task failed: %s - %s", agent.name, e)
            finally:
                self._active_task = None
                self._current_task = None
            # One task per tick
            return True
        return False

    async def run(self) -> None:
        """Main scheduler loop."""
        logger.info(
            "Background scheduler started with tasks: %s (idle_threshold=%.0fs)",
            [s.agent.name for s in self._schedules],
            self._idle_threshold,
        )
        while self._running:
            await self.tick()
            await asyncio.sleep(self._tick_interval)
        logger.info("Background scheduler stopped")
