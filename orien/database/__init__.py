"""Document store for Orien - personas, memory, conversations and knowledge."""

from orien.database.database import Database
from orien.database.models import (
    Conversation,
    ConversationMessage,
    KnowledgeFile,
    LoopState,
    MemoryFact,
    MemorySummary,
    Notification,
    Persona,
    PromptLog,
)

__all__ = [
    "Conversation",
    "ConversationMessage",
    "Database",
    "KnowledgeFile",
    "LoopState",
    "MemoryFact",
    "MemorySummary",
    "Notification",
    "Persona",
    "PromptLog",
]
