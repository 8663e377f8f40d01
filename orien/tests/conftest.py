"""Pytest fixtures for Orien tests."""

from collections.abc import Callable
from typing import Any, cast

import pytest

from orien.agents import ChatAgent, WakeupAgent
from orien.config import Config
from orien.context import CacheBreakpointTracker, InMemoryBreakpointStore
from orien.database import Database
from orien.openrouter import OpenRouterClient
from orien.tests.mocks.openrouter import MockOpenRouter

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

# Default config values for tests
DEFAULT_TEST_CONFIG = {
    "openrouter_api_key": "test-api-key",
    "openrouter_api_url": "http://openrouter.test/api/v1/chat/completions",
    "log_level": "DEBUG",
    "tool_timeout": 5.0,
    # Fast retries for tests
    "openrouter_max_retries": 1,
    "openrouter_retry_delay": 0.0,
    "openrouter_timeout": 5.0,
    # Background tasks never fire on their own
    "idle_seconds": 99999.0,
    "scheduler_tick_interval": 0.05,
}


@pytest.fixture
def test_db(tmp_path):
    """Create a temporary test database path."""
    return str(tmp_path / "test.db")


@pytest.fixture
def make_config(test_db) -> Callable[..., Config]:
    """
    Factory fixture for creating test configs with custom overrides.

    Usage:
        config = make_config()  # defaults
        config = make_config(tool_timeout=0.1)  # with override
    """

    def _make_config(**overrides: Any) -> Config:
        config_kwargs: dict[str, Any] = {
            **DEFAULT_TEST_CONFIG,
            "db_path": test_db,
            **overrides,
        }
        return Config(**cast(Any, config_kwargs))

    return _make_config


@pytest.fixture
def test_config(make_config) -> Config:
    return make_config()


@pytest.fixture
def db(test_config) -> Database:
    """Database with all tables created."""
    database = Database(test_config.db_path)
    database.create_tables()
    return database


@pytest.fixture
def mock_openrouter() -> MockOpenRouter:
    return MockOpenRouter()


@pytest.fixture
async def model_client(test_config, db, mock_openrouter):
    """OpenRouterClient wired to the mock endpoint."""
    client = OpenRouterClient(
        api_url=test_config.openrouter_api_url,
        api_key=test_config.openrouter_api_key,
        db=db,
        max_retries=test_config.openrouter_max_retries,
        retry_delay=test_config.openrouter_retry_delay,
        timeout=test_config.openrouter_timeout,
        transport=mock_openrouter.transport,
    )
    yield client
    await client.close()


@pytest.fixture
def tracker() -> CacheBreakpointTracker:
    return CacheBreakpointTracker(InMemoryBreakpointStore())


@pytest.fixture
def chat_agent(db, model_client, test_config, tracker) -> ChatAgent:
    return ChatAgent(db=db, client=model_client, config=test_config, tracker=tracker)


@pytest.fixture
def wakeup_agent(db, model_client, test_config) -> WakeupAgent:
    return WakeupAgent(db=db, client=model_client, config=test_config)


@pytest.fixture
def persona(db):
    """A persona on a natively tool-calling model."""
    return db.personas.create(
        name="Levo",
        model="anthropic/claude-sonnet-4.5",
        system_prompt="You are Levo, a warm companion.",
        avatar="💙",
    )
