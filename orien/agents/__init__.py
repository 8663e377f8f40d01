"""Agent loop components."""

from orien.agents.base import Agent
from orien.agents.chat import ChatAgent
from orien.agents.models import (
    ChatRequest,
    ChatResult,
    HistoryMessage,
    MessageRole,
    ToolCallRecord,
)
from orien.agents.wakeup import WakeupAgent

__all__ = [
    "Agent",
    "ChatAgent",
    "ChatRequest",
    "ChatResult",
    "HistoryMessage",
    "MessageRole",
    "ToolCallRecord",
    "WakeupAgent",
]
