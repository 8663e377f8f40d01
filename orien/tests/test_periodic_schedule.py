"""Unit tests for PeriodicSchedule."""

import asyncio
from unittest.mock import MagicMock

import pytest

from orien.scheduler.schedules import PeriodicSchedule


@pytest.fixture
def mock_agent():
    """Create a mock agent."""
    agent = MagicMock()
    agent.name = "wakeup"
    return agent


def test_first_run_when_idle(mock_agent):
    schedule = PeriodicSchedule(agent=mock_agent, interval=60.0)
    assert schedule.should_run(is_idle=True)


def test_not_run_when_busy(mock_agent):
    schedule = PeriodicSchedule(agent=mock_agent, interval=60.0)
    assert not schedule.should_run(is_idle=False)


async def test_respects_interval(mock_agent):
    schedule = PeriodicSchedule(agent=mock_agent, interval=0.1)

    assert schedule.should_run(is_idle=True)
    schedule.mark_complete()
    assert not schedule.should_run(is_idle=True)

    await asyncio.sleep(0.15)

    assert schedule.should_run(is_idle=True)


def test_chat_activity_keeps_interval(mock_agent):
    schedule = PeriodicSchedule(agent=mock_agent, interval=60.0)
    schedule.mark_complete()

    schedule.reset()

    assert not schedule.should_run(is_idle=True)
