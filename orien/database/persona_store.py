"""Persona store: lookup and autonomy bookkeeping for personas."""

import json
import logging
from datetime import UTC, datetime

from sqlmodel import Session, select

from orien.database.models import Persona

logger = logging.getLogger(__name__)


class PersonaStore:
    """Manages Persona records."""

    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine)

    def create(
        self,
        name: str,
        model: str,
        system_prompt: str = "",
        avatar: str | None = None,
        knowledge_ids: list[int] | None = None,
        autonomy_enabled: bool = False,
        check_interval_minutes: int = 60,
        wakeup_prompt: str | None = None,
        manual_facts: list[str] | None = None,
        auto_facts: list[dict] | None = None,
        current_summary: str | None = None,
    ) -> Persona:
        """Create a persona. Legacy memory fields are accepted for imported personas."""
        with self._session() as session:
            persona = Persona(
                name=name,
                model=model,
                system_prompt=system_prompt,
                knowledge_ids=json.dumps(knowledge_ids or []),
                autonomy_enabled=autonomy_enabled,
                check_interval_minutes=check_interval_minutes,
                wakeup_prompt=wakeup_prompt,
                manual_facts=json.dumps(manual_facts or []),
                auto_facts=json.dumps(auto_facts or [], default=str),
                current_summary=current_summary,
            )
            if avatar:
                persona.avatar = avatar
            session.add(persona)
            session.commit()
            session.refresh(persona)
            logger.info("Created persona %d (%s)", persona.id, name)
            return persona

    def get(self, persona_id: int) -> Persona | None:
        """Get a persona by id."""
        with self._session() as session:
            return session.get(Persona, persona_id)

    def get_autonomous(self) -> list[Persona]:
        """Get all personas with autonomy enabled."""
        with self._session() as session:
            return list(
                session.exec(
                    select(Persona)
                    .where(Persona.autonomy_enabled == True)  # noqa: E712
                    .order_by(Persona.id.asc())  # type: ignore[union-attr]
                ).all()
            )

    def mark_checked(self, persona_id: int, checked_at: datetime | None = None) -> None:
        """Record that the wake-up agent checked this persona."""
        try:
            with self._session() as session:
                persona = session.get(Persona, persona_id)
                if persona:
                    persona.last_check_at = checked_at or datetime.now(UTC)
                    session.add(persona)
                    session.commit()
        except Exception as e:
            logger.error("Failed to mark persona %d as checked: %s", persona_id, e)
