"""SQLModel models for Orien's document store."""

import json
from datetime import UTC, datetime

from sqlmodel import Field, SQLModel

from orien.constants import DEFAULT_PERSONA_AVATAR, Urgency


class Persona(SQLModel, table=True):
    """A configured AI identity with its own model, prompt, memory and autonomy."""

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    avatar: str = Field(default=DEFAULT_PERSONA_AVATAR)
    model: str
    system_prompt: str = ""
    knowledge_ids: str = "[]"  # JSON-serialized list of KnowledgeFile ids

    # Autonomy settings
    autonomy_enabled: bool = Field(default=False)
    check_interval_minutes: int = Field(default=60)
    last_check_at: datetime | None = None
    wakeup_prompt: str | None = None  # Template; falls back to Prompt.DEFAULT_WAKEUP_PROMPT

    # Monotonic id counters for MemoryFact.seq / MemorySummary.seq (never decremented)
    fact_counter: int = Field(default=0)
    summary_counter: int = Field(default=0)

    # Legacy memory fields, read-only for the chat path
    manual_facts: str = "[]"  # JSON list of strings
    auto_facts: str = "[]"  # JSON list of {"fact", "timestamp", "conversationId"}
    current_summary: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def get_knowledge_ids(self) -> list[int]:
        return [int(k) for k in json.loads(self.knowledge_ids)]

    def get_manual_facts(self) -> list[str]:
        return json.loads(self.manual_facts)

    def get_auto_facts(self) -> list[dict]:
        return json.loads(self.auto_facts)


class MemoryFact(SQLModel, table=True):
    """A persistent, deduplicated fact. ``seq`` is the per-persona fact id."""

    __tablename__ = "memory_fact"

    id: int | None = Field(default=None, primary_key=True)
    persona_id: int = Field(foreign_key="persona.id", index=True)
    seq: int = Field(index=True)
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source_conversation: str | None = None


class MemorySummary(SQLModel, table=True):
    """An append-only narrative memory entry. ``seq`` is the per-persona summary id."""

    __tablename__ = "memory_summary"

    id: int | None = Field(default=None, primary_key=True)
    persona_id: int = Field(foreign_key="persona.id", index=True)
    seq: int = Field(index=True)
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    conversation_id: str | None = None


class Conversation(SQLModel, table=True):
    """A saved chat conversation, optionally bound to a persona."""

    id: int | None = Field(default=None, primary_key=True)
    title: str = "New Conversation"
    persona_id: int | None = Field(default=None, foreign_key="persona.id", index=True)
    model: str | None = None
    message_counter: int = Field(default=0)  # Last assigned ConversationMessage.seq
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ConversationMessage(SQLModel, table=True):
    """A message in a conversation. ``seq`` is the immutable message id."""

    __tablename__ = "conversation_message"

    id: int | None = Field(default=None, primary_key=True)
    conversation_id: int = Field(foreign_key="conversation.id", index=True)
    seq: int = Field(index=True)
    role: str
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    model: str | None = None


class KnowledgeFile(SQLModel, table=True):
    """An uploaded reference document, addressable by id or title."""

    __tablename__ = "knowledge_file"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    content: str
    size: int = 0
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Notification(SQLModel, table=True):
    """A notification a persona sent to the user."""

    id: int | None = Field(default=None, primary_key=True)
    persona_id: int | None = Field(default=None, foreign_key="persona.id", index=True)
    persona_name: str
    persona_avatar: str = DEFAULT_PERSONA_AVATAR
    message: str
    urgency: str = Field(default=Urgency.LOW)  # Urgency enum value
    read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)


class LoopState(SQLModel, table=True):
    """Global presence state of the user, read by get_loop_state and the wake-up agent."""

    __tablename__ = "loop_state"

    id: int | None = Field(default=None, primary_key=True)
    last_activity: datetime | None = None
    is_online: bool = Field(default=False)
    last_message: str | None = None  # First chars of the latest user message
    status: str = "idle"
    conversation_count: int = Field(default=0)
    last_check: datetime | None = None  # Last autonomy pass
    active_fields: str = "[]"  # JSON list of {"type", "since", "note"}
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def get_active_fields(self) -> list[dict]:
        return json.loads(self.active_fields)


class PromptLog(SQLModel, table=True):
    """Log of every prompt sent to the completion provider and its response."""

    id: int | None = Field(default=None, primary_key=True)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
    model: str
    messages: str  # JSON-serialized list of message dicts
    tools: str | None = None  # JSON-serialized tool definitions
    response: str  # JSON-serialized response dict
    duration_ms: int | None = None  # How long the call took

    def get_messages(self) -> list[dict]:
        return json.loads(self.messages)

    def get_response(self) -> dict:
        return json.loads(self.response)
