"""Normalize model responses into tool calls and decode their arguments.

Native responses carry structured ``tool_calls``. Tagged responses embed
``<tool_call>{"name": ..., "arguments": {...}}</tool_call>`` blocks in the
message content.
"""

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from orien.errors import ToolArgumentParseError
from orien.openrouter.models import ChatResponseMessage
from orien.tools.formats import ToolFormat
from orien.tools.models import ToolCall

logger = logging.getLogger(__name__)

TOOL_CALL_PATTERN = re.compile(r"<tool_call>(.*?)</tool_call>", re.DOTALL)


class ParsedResponse(BaseModel):
    """Tool calls found in one model turn, plus the text meant for the user."""

    calls: list[ToolCall] = Field(default_factory=list)
    text: str = ""
    # Raw content up to the last closing tag; replayed to tagged models on follow-up
    transcript: str = ""


def parse_tagged_content(content: str) -> ParsedResponse:
    """Extract every <tool_call> block from free text.

    Blocks whose body is not valid JSON are logged and dropped. Anything after
    the last closing tag is discarded; the visible text is what remains before
    it with the blocks removed.
    """
    matches = list(TOOL_CALL_PATTERN.finditer(content))
    if not matches:
        return ParsedResponse(text=content.strip(), transcript=content)

    calls: list[ToolCall] = []
    for index, match in enumerate(matches):
        body = match.group(1).strip()
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            logger.warning("Dropping unparseable <tool_call> block: %s (%s)", body[:200], e)
            continue
        if not isinstance(payload, dict) or not payload.get("name"):
            logger.warning("Dropping <tool_call> block without a name: %s", body[:200])
            continue
        arguments = payload.get("arguments", payload.get("parameters", {}))
        calls.append(
            ToolCall(tool=str(payload["name"]), arguments=arguments or {}, id=f"tag_{index}")
        )

    last_end = matches[-1].end()
    trailing = content[last_end:].strip()
    if trailing:
        logger.info("Model kept talking after its tool call; discarding: %s", trailing[:200])

    visible = TOOL_CALL_PATTERN.sub("", content[:last_end])
    return ParsedResponse(calls=calls, text=visible.strip(), transcript=content[:last_end])


def parse_native_message(message: ChatResponseMessage) -> ParsedResponse:
    """Normalize structured tool calls from a completion message."""
    calls = [
        ToolCall(tool=tc.function.name, arguments=tc.function.arguments, id=tc.id)
        for tc in message.tool_calls or []
        if tc.function.name
    ]
    content = message.content or ""
    return ParsedResponse(calls=calls, text=content.strip(), transcript=content)


def parse_response(message: ChatResponseMessage, tool_format: ToolFormat) -> ParsedResponse:
    """Parse a model turn according to the tool format in use."""
    if tool_format == ToolFormat.TAGGED:
        return parse_tagged_content(message.content or "")
    return parse_native_message(message)


def _salvage_string_field(raw: str, field: str) -> str | None:
    """Pull a single string field out of malformed JSON."""
    match = re.search(rf'"{re.escape(field)}"\s*:\s*"((?:[^"\\]|\\.)*)', raw, re.DOTALL)
    if not match:
        return None
    value = match.group(1)
    try:
        value = json.loads(f'"{value}"')
    except json.JSONDecodeError:
        value = value.replace('\\"', '"')
    return value.strip() or None


def decode_arguments(
    tool_name: str,
    raw: str | dict[str, Any],
    args_model: type[BaseModel],
    salvage_field: str | None = None,
) -> BaseModel:
    """Decode and validate tool arguments into the tool's typed model.

    Raises:
        ToolArgumentParseError: If the arguments cannot be decoded or validated.
    """
    if isinstance(raw, dict):
        payload: Any = raw
    elif not raw.strip():
        payload = {}
    else:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            salvaged = _salvage_string_field(raw, salvage_field) if salvage_field else None
            if salvaged is None:
                raise ToolArgumentParseError(tool_name, f"invalid JSON arguments ({e})") from e
            logger.warning("Salvaged '%s' from malformed %s arguments", salvage_field, tool_name)
            payload = {salvage_field: salvaged}

    if not isinstance(payload, dict):
        raise ToolArgumentParseError(tool_name, "arguments must be a JSON object")

    try:
        return args_model.model_validate(payload)
    except ValidationError as e:
        raise ToolArgumentParseError(
            tool_name, f"invalid arguments ({e.error_count()} error(s))"
        ) from e
