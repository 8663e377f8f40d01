"""Pydantic models for HTTP request bodies other than chat."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from orien.agents.models import MessageRole


class AutosaveMessage(BaseModel):
    """A message as the client holds it; ``id`` is set once it has been saved."""

    model_config = ConfigDict(extra="ignore")

    role: MessageRole
    content: str = ""
    id: int | None = None
    timestamp: datetime | None = None
    model: str | None = None

    @field_validator("content", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_store_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp,
            "model": self.model,
        }


class AutosaveRequest(BaseModel):
    """Body of POST /api/conversations/autosave."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[AutosaveMessage]
    conversation_id: str | None = Field(default=None, alias="conversationId")
    title: str | None = None
    persona_id: int | None = Field(default=None, alias="personaId")
    model: str | None = None

    @field_validator("conversation_id", mode="before")
    @classmethod
    def _stringify_conversation_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def unsaved(self) -> list[AutosaveMessage]:
        """Messages without an id; earlier autosaves already stored the rest."""
        return [m for m in self.messages if m.id is None]
