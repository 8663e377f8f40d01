"""Tools for agentic capabilities."""

from orien.tools.base import Tool, ToolExecutor, ToolRegistry
from orien.tools.context import ToolContext
from orien.tools.formats import ToolFormat, select_tool_format
from orien.tools.knowledge import (
    ListKnowledgeFilesTool,
    LoadKnowledgeByTitleTool,
    SearchKnowledgeTool,
)
from orien.tools.memory import SaveFactTool, SaveSummaryTool
from orien.tools.models import (
    KnowledgeSearchResult,
    SearchMatch,
    ToolCall,
    ToolDefinition,
    ToolResult,
)
from orien.tools.notification import GetLoopStateTool, SendNotificationTool


def build_chat_tools(db, context: ToolContext) -> ToolRegistry:
    """Registry with the full tool set offered during a persona chat."""
    registry = ToolRegistry()
    registry.register(SaveFactTool(db, context))
    registry.register(SaveSummaryTool(db, context))
    registry.register(SendNotificationTool(db, context))
    registry.register(LoadKnowledgeByTitleTool(db))
    registry.register(ListKnowledgeFilesTool(db))
    registry.register(SearchKnowledgeTool(db, context))
    registry.register(GetLoopStateTool(db))
    return registry


def build_wakeup_tools(db, context: ToolContext) -> ToolRegistry:
    """Registry offered during an autonomous wake-up pass."""
    registry = ToolRegistry()
    registry.register(SendNotificationTool(db, context))
    registry.register(SaveFactTool(db, context))
    registry.register(GetLoopStateTool(db))
    return registry


__all__ = [
    "GetLoopStateTool",
    "KnowledgeSearchResult",
    "ListKnowledgeFilesTool",
    "LoadKnowledgeByTitleTool",
    "SaveFactTool",
    "SaveSummaryTool",
    "SearchKnowledgeTool",
    "SearchMatch",
    "SendNotificationTool",
    "Tool",
    "ToolCall",
    "ToolContext",
    "ToolDefinition",
    "ToolExecutor",
    "ToolFormat",
    "ToolRegistry",
    "ToolResult",
    "build_chat_tools",
    "build_wakeup_tools",
    "select_tool_format",
]
