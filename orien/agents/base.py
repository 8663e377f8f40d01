"""Base Agent class shared by the chat loop and the wake-up agent."""

from __future__ import annotations

import logging

from orien.agents.models import ToolCallRecord
from orien.config import Config
from orien.database import Database
from orien.openrouter import OpenRouterClient
from orien.prompts import Prompt
from orien.responses import OrienResponse
from orien.tools import ToolCall, ToolExecutor, ToolFormat, ToolRegistry, ToolResult

logger = logging.getLogger(__name__)


class Agent:
    """
    Holds the collaborators every model-driven task needs.

    Agents receive a shared OpenRouterClient; callers create and own it.
    """

    @property
    def name(self) -> str:
        """Task name for logging. Override in subclasses."""
        return self.__class__.__name__

    async def execute(self) -> bool:
        """
        Execute a scheduled task. Override in subclasses.

        Returns:
            True if work was done, False otherwise
        """
        return False

    def __init__(self, db: Database, client: OpenRouterClient, config: Config):
        self.db = db
        self.client = client
        self.config = config

    async def _dispatch(
        self,
        calls: list[ToolCall],
        registry: ToolRegistry,
        records: list[ToolCallRecord],
    ) -> list[ToolResult]:
        """Execute tool calls one at a time, in the order the model emitted them."""
        executor = ToolExecutor(registry, timeout=self.config.tool_timeout)
        results = []
        for call in calls:
            result = await executor.execute(call)
            records.append(
                ToolCallRecord(
                    tool=call.tool,
                    arguments=result.arguments
                    or (call.arguments if isinstance(call.arguments, dict) else {}),
                    result=None if result.error else self._format_result(result),
                    error=result.error,
                    skipped=result.skipped,
                )
            )
            results.append(result)
        return results

    @staticmethod
    def _format_result(result: ToolResult) -> str:
        """Text fed back to the model for a tool result."""
        if result.error:
            return OrienResponse.TOOL_ERROR.format(error=result.error)
        return str(result.result)

    def _tool_turn_messages(
        self,
        tool_format: ToolFormat,
        assistant_message: dict,
        transcript: str,
        calls: list[ToolCall],
        results: list[ToolResult],
    ) -> list[dict]:
        """Messages that replay one tool-calling turn and its results to the model."""
        if tool_format == ToolFormat.NATIVE:
            messages = [assistant_message]
            for call, result in zip(calls, results, strict=True):
                messages.append(
                    {
                        "role": "tool",
                        "tool_call_id": call.id,
                        "content": self._format_result(result),
                    }
                )
            return messages

        responses = "\n".join(
            Prompt.TAGGED_TOOL_RESPONSE.format(result=self._format_result(result))
            for result in results
        )
        return [
            {"role": "assistant", "content": transcript},
            {"role": "user", "content": responses},
        ]
