"""Pydantic models for a persona's layered memory."""

from datetime import datetime

from pydantic import BaseModel, Field


class FactEntry(BaseModel):
    """A canonical fact with its per-persona sequence id."""

    id: int
    text: str
    timestamp: datetime
    source_conversation: str | None = None


class SummaryEntry(BaseModel):
    """A canonical summary with its per-persona sequence id."""

    id: int
    text: str
    timestamp: datetime
    conversation_id: str | None = None


class LegacyAutoFact(BaseModel):
    """An entry from the legacy autoFacts list."""

    fact: str
    timestamp: datetime
    conversation_id: str | None = Field(default=None, alias="conversationId")

    model_config = {"populate_by_name": True}


class MemoryView(BaseModel):
    """Everything stored for a persona's memory, canonical and legacy."""

    facts: list[FactEntry] = Field(default_factory=list)
    summaries: list[SummaryEntry] = Field(default_factory=list)
    manual_facts: list[str] = Field(default_factory=list)
    auto_facts: list[LegacyAutoFact] = Field(default_factory=list)
    current_summary: str | None = None

    @property
    def max_fact_id(self) -> int:
        return max((f.id for f in self.facts), default=0)

    @property
    def max_summary_id(self) -> int:
        return max((s.id for s in self.summaries), default=0)


class UnifiedMemory(BaseModel):
    """Read view of memory after merging legacy fields into the canonical schema."""

    facts: list[FactEntry] = Field(default_factory=list)
    summaries: list[SummaryEntry] = Field(default_factory=list)
    manual_notes: list[str] = Field(default_factory=list)
    recent_legacy: list[str] = Field(default_factory=list)
    legacy_summary: str | None = None
