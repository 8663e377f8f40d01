"""Memory store: append-only facts and summaries with per-persona sequence ids."""

import logging
from datetime import UTC, datetime

from sqlmodel import Session, select

from orien.database.models import MemoryFact, MemorySummary, Persona
from orien.memory import (
    FactEntry,
    LegacyAutoFact,
    MemoryView,
    SummaryEntry,
    is_near_duplicate,
)

logger = logging.getLogger(__name__)


class MemoryStore:
    """Manages MemoryFact and MemorySummary records for personas.

    Sequence ids come from counters on the Persona row, bumped in the same
    transaction as the insert, so an id is never handed out twice even if the
    newest entry is later deleted.
    """

    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine)

    def get_memory(self, persona_id: int) -> MemoryView:
        """Load canonical and legacy memory for a persona."""
        with self._session() as session:
            persona = session.get(Persona, persona_id)
            if persona is None:
                return MemoryView()

            facts = session.exec(
                select(MemoryFact)
                .where(MemoryFact.persona_id == persona_id)
                .order_by(MemoryFact.seq.asc())  # type: ignore[union-attr]
            ).all()
            summaries = session.exec(
                select(MemorySummary)
                .where(MemorySummary.persona_id == persona_id)
                .order_by(MemorySummary.seq.asc())  # type: ignore[union-attr]
            ).all()

            return MemoryView(
                facts=[
                    FactEntry(
                        id=f.seq,
                        text=f.text,
                        timestamp=f.timestamp,
                        source_conversation=f.source_conversation,
                    )
                    for f in facts
                ],
                summaries=[
                    SummaryEntry(
                        id=s.seq,
                        text=s.text,
                        timestamp=s.timestamp,
                        conversation_id=s.conversation_id,
                    )
                    for s in summaries
                ],
                manual_facts=persona.get_manual_facts(),
                auto_facts=[LegacyAutoFact.model_validate(f) for f in persona.get_auto_facts()],
                current_summary=persona.current_summary,
            )

    def find_duplicate_fact(self, persona_id: int, text: str) -> MemoryFact | None:
        """Return the stored fact that makes ``text`` a near-duplicate, if any."""
        with self._session() as session:
            facts = session.exec(
                select(MemoryFact).where(MemoryFact.persona_id == persona_id)
            ).all()
        for fact in facts:
            if is_near_duplicate(text, fact.text):
                return fact
        return None

    def add_fact(
        self,
        persona_id: int,
        text: str,
        source_conversation: str | None = None,
    ) -> MemoryFact | None:
        """Append a fact with the next sequence id. Returns None on failure."""
        try:
            with self._session() as session:
                persona = session.get(Persona, persona_id)
                if persona is None:
                    logger.error("Cannot add fact: persona %d not found", persona_id)
                    return None

                persona.fact_counter += 1
                persona.updated_at = datetime.now(UTC)
                fact = MemoryFact(
                    persona_id=persona_id,
                    seq=persona.fact_counter,
                    text=text.strip(),
                    source_conversation=source_conversation,
                )
                session.add(persona)
                session.add(fact)
                session.commit()
                session.refresh(fact)
                logger.debug("Added fact %d to persona %d: %s", fact.seq, persona_id, text[:50])
                return fact
        except Exception as e:
            logger.error("Failed to add fact to persona %d: %s", persona_id, e)
            return None

    def add_summary(
        self,
        persona_id: int,
        text: str,
        conversation_id: str | None = None,
    ) -> MemorySummary | None:
        """Append a summary with the next sequence id. Returns None on failure."""
        try:
            with self._session() as session:
                persona = session.get(Persona, persona_id)
                if persona is None:
                    logger.error("Cannot add summary: persona %d not found", persona_id)
                    return None

                persona.summary_counter += 1
                persona.updated_at = datetime.now(UTC)
                summary = MemorySummary(
                    persona_id=persona_id,
                    seq=persona.summary_counter,
                    text=text.strip(),
                    conversation_id=conversation_id,
                )
                session.add(persona)
                session.add(summary)
                session.commit()
                session.refresh(summary)
                logger.debug("Added summary %d to persona %d", summary.seq, persona_id)
                return summary
        except Exception as e:
            logger.error("Failed to add summary to persona %d: %s", persona_id, e)
            return None

    def delete_fact(self, persona_id: int, fact_id: int) -> bool:
        """Delete a fact by its sequence id. The id is not reused afterwards."""
        with self._session() as session:
            fact = session.exec(
                select(MemoryFact).where(
                    MemoryFact.persona_id == persona_id, MemoryFact.seq == fact_id
                )
            ).first()
            if fact is None:
                return False
            session.delete(fact)
            session.commit()
            return True
