"""Pydantic models for OpenRouter chat-completion structures."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolCallFunction(BaseModel):
    """Function details within a native tool call."""

    name: str = ""
    # JSON-encoded string per the OpenAI schema; some providers send an object
    arguments: str | dict[str, Any] = ""


class ProviderToolCall(BaseModel):
    """A structured tool call from the completion response."""

    id: str | None = None
    type: str = "function"
    function: ToolCallFunction = Field(default_factory=ToolCallFunction)


class ChatResponseMessage(BaseModel):
    """Message object from a completion choice."""

    model_config = ConfigDict(extra="allow")

    role: str = "assistant"
    content: str | None = None
    tool_calls: list[ProviderToolCall] | None = None

    def to_input_message(self) -> dict[str, Any]:
        """Convert to an input message for a follow-up request."""
        msg: dict[str, Any] = {"role": self.role, "content": self.content or ""}
        if self.tool_calls:
            msg["tool_calls"] = [tc.model_dump() for tc in self.tool_calls]
        return msg


class Choice(BaseModel):
    """One completion choice."""

    index: int = 0
    message: ChatResponseMessage = Field(default_factory=ChatResponseMessage)
    finish_reason: str | None = None


class Usage(BaseModel):
    """Token usage reported by the provider; unknown detail fields are kept."""

    model_config = ConfigDict(extra="allow")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


class ChatResponse(BaseModel):
    """Response from the chat-completions endpoint."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    model: str | None = None
    choices: list[Choice] = Field(default_factory=list)
    usage: Usage | None = None

    @property
    def message(self) -> ChatResponseMessage:
        """First choice's message (empty when the provider returned no choices)."""
        if not self.choices:
            return ChatResponseMessage()
        return self.choices[0].message

    @property
    def content(self) -> str:
        """Get message content."""
        return self.message.content or ""

    @property
    def has_tool_calls(self) -> bool:
        """Check if response has native tool calls."""
        return bool(self.message.tool_calls)
