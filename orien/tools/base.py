"""Base classes for tools."""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel

from orien.errors import ToolArgumentParseError
from orien.prompts import Prompt
from orien.tools.models import DuplicateSkipped, NoArgs, ToolCall, ToolDefinition, ToolResult
from orien.tools.parser import decode_arguments

logger = logging.getLogger(__name__)


class Tool(ABC):
    """Abstract base class for tools."""

    name: str
    description: str
    parameters: dict[str, Any] = {"type": "object", "properties": {}}
    args_model: ClassVar[type[BaseModel]] = NoArgs
    # Field recoverable by regex when the arguments are not valid JSON
    salvage_field: ClassVar[str | None] = None

    @abstractmethod
    async def execute(self, args: Any) -> Any:
        """
        Execute the tool.

        Args:
            args: Validated instance of ``args_model``

        Returns:
            Tool result (will be serialized to string for model)
        """
        pass

    def to_definition(self) -> ToolDefinition:
        """Convert to tool definition for prompt."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
        )

    def to_native_tool(self) -> dict[str, Any]:
        """Convert to the structured tool-calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class ToolRegistry:
    """Registry of available tools."""

    def __init__(self):
        """Initialize empty registry."""
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def get_definitions(self) -> list[ToolDefinition]:
        """Get all tool definitions for prompt building."""
        return [tool.to_definition() for tool in self._tools.values()]

    def get_native_tools(self) -> list[dict[str, Any]]:
        """Get all tools in the structured `tools` field format."""
        return [tool.to_native_tool() for tool in self._tools.values()]

    def render_tagged_block(self) -> str:
        """Render all tools as a <tools> block plus calling instructions for the system prompt."""
        schemas = [definition.model_dump() for definition in self.get_definitions()]
        return (
            f"<tools>\n{json.dumps(schemas, ensure_ascii=False)}\n</tools>\n\n"
            f"{Prompt.TAGGED_TOOLS_INSTRUCTIONS}"
        )


class ToolExecutor:
    """Executes tools with argument decoding, timeout and error handling."""

    def __init__(self, registry: ToolRegistry, timeout: float = 30.0):
        self.registry = registry
        self.timeout = timeout

    async def execute(self, tool_call: ToolCall) -> ToolResult:
        """Execute a tool call. Never raises; failures are reported on the result."""
        tool = self.registry.get(tool_call.tool)

        if tool is None:
            logger.error("Tool not found: %s", tool_call.tool)
            return ToolResult(
                tool=tool_call.tool,
                error=f"Tool '{tool_call.tool}' not found",
                id=tool_call.id,
            )

        try:
            args = decode_arguments(
                tool_call.tool, tool_call.arguments, tool.args_model, tool.salvage_field
            )
        except ToolArgumentParseError as e:
            logger.warning("Skipping tool call with bad arguments: %s", e)
            return ToolResult(tool=tool_call.tool, error=str(e), skipped=True, id=tool_call.id)

        arguments = args.model_dump(by_alias=True)
        try:
            logger.info("Executing tool: %s", tool_call.tool)
            logger.debug("Tool arguments: %s", arguments)

            result = await asyncio.wait_for(tool.execute(args), timeout=self.timeout)

            if isinstance(result, DuplicateSkipped):
                logger.info("Tool %s skipped: %s", tool_call.tool, result.reason)
                return ToolResult(
                    tool=tool_call.tool,
                    result=str(result),
                    skipped=True,
                    arguments=arguments,
                    id=tool_call.id,
                )

            logger.info("Tool executed successfully: %s", tool_call.tool)
            logger.debug("Tool result: %s", result)

            return ToolResult(
                tool=tool_call.tool, result=result, arguments=arguments, id=tool_call.id
            )

        except TimeoutError:
            logger.error("Tool execution timeout: %s", tool_call.tool)
            return ToolResult(
                tool=tool_call.tool,
                error=f"Tool execution timeout after {self.timeout}s",
                arguments=arguments,
                id=tool_call.id,
            )

        except Exception as e:
            logger.exception("Tool execution error: %s", tool_call.tool)
            return ToolResult(
                tool=tool_call.tool,
                error=f"Tool execution error: {str(e)}",
                arguments=arguments,
                id=tool_call.id,
            )
