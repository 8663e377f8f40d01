"""Tool-calling wire formats and per-model format selection."""

from collections.abc import Callable
from enum import StrEnum


class ToolFormat(StrEnum):
    """How tools are offered to a model and how its calls come back."""

    NATIVE = "native"  # structured `tools` field, structured `tool_calls` in the response
    TAGGED = "tagged"  # tools described in the system prompt, calls embedded as <tool_call> JSON


def _contains(marker: str) -> Callable[[str], bool]:
    return lambda model: marker in model.lower()


# Checked in order; first match wins. Families listed here lack reliable
# structured tool calling through OpenRouter.
FORMAT_RULES: list[tuple[Callable[[str], bool], ToolFormat]] = [
    (_contains("gemma"), ToolFormat.TAGGED),
    (_contains("deepseek-r1"), ToolFormat.TAGGED),
    (_contains("hermes"), ToolFormat.TAGGED),
]

DEFAULT_FORMAT = ToolFormat.NATIVE


def select_tool_format(
    model: str,
    rules: list[tuple[Callable[[str], bool], ToolFormat]] | None = None,
) -> ToolFormat:
    """Resolve the tool format for a model id from the rule table."""
    for predicate, tool_format in rules if rules is not None else FORMAT_RULES:
        if predicate(model):
            return tool_format
    return DEFAULT_FORMAT
