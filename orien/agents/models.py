"""Pydantic models and enums for the chat loop."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from orien.openrouter.models import Usage
from orien.tools.models import KnowledgeSearchResult


class MessageRole(StrEnum):
    """Valid message roles in chat conversations."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class HistoryMessage(BaseModel):
    """A message of the conversation history as sent by the client.

    ``id`` is the persistent message id assigned at autosave; messages that
    have not been saved yet have none.
    """

    model_config = ConfigDict(extra="ignore")

    role: MessageRole
    content: str | list[dict[str, Any]] = ""
    id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        msg: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.id is not None:
            msg["id"] = self.id
        return msg


class ChatRequest(BaseModel):
    """Body of POST /api/chat."""

    model_config = ConfigDict(populate_by_name=True)

    model: str = Field(min_length=1)
    messages: list[HistoryMessage] = Field(min_length=1)
    knowledge_base_ids: list[int] = Field(default_factory=list, alias="knowledgeBaseIds")
    persona_id: int | None = Field(default=None, alias="personaId")
    conversation_id: str | None = Field(default=None, alias="conversationId")

    @field_validator("conversation_id", mode="before")
    @classmethod
    def _stringify_conversation_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("knowledge_base_ids", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return value or []

    def last_user_text(self) -> str | None:
        for message in reversed(self.messages):
            if message.role == MessageRole.USER and isinstance(message.content, str):
                return message.content
        return None


class ToolCallRecord(BaseModel):
    """Record of a tool call made during a chat request."""

    tool: str = Field(description="Tool name")
    arguments: dict = Field(default_factory=dict, description="Decoded tool arguments")
    result: str | None = Field(default=None, description="Result text fed to the model")
    error: str | None = None
    skipped: bool = False


class ChatResult(BaseModel):
    """Outcome of one chat request."""

    message: str = ""
    usage: Usage = Field(default_factory=Usage)
    tool_calls: list[ToolCallRecord] = Field(default_factory=list)
    search_results: list[KnowledgeSearchResult] = Field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        """Serialize for the HTTP response body."""
        return {
            "message": self.message,
            "usage": self.usage.model_dump(),
            "toolCalls": [record.model_dump() for record in self.tool_calls],
            "searchResults": [result.model_dump(by_alias=True) for result in self.search_results],
        }
