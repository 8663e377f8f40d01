"""Loop state store: the user's presence as seen by personas."""

import logging
from datetime import UTC, datetime

from sqlmodel import Session, select

from orien.constants import LOOP_STATE_LAST_MESSAGE_CHARS
from orien.database.models import LoopState

logger = logging.getLogger(__name__)


class StateStore:
    """Manages the single global LoopState row."""

    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine)

    def _get_or_create(self, session: Session) -> LoopState:
        state = session.exec(select(LoopState)).first()
        if state is None:
            state = LoopState()
            session.add(state)
        return state

    def get(self) -> LoopState:
        """Get the current state (an unsaved default when none exists yet)."""
        with self._session() as session:
            return session.exec(select(LoopState)).first() or LoopState()

    def record_activity(self, last_message: str | None) -> None:
        """Mark the user as active; called on every chat request."""
        now = datetime.now(UTC)
        with self._session() as session:
            state = self._get_or_create(session)
            state.last_activity = now
            state.is_online = True
            state.status = "active"
            state.last_message = (
                last_message[:LOOP_STATE_LAST_MESSAGE_CHARS] if last_message else None
            )
            state.conversation_count += 1
            state.updated_at = now
            session.add(state)
            session.commit()

    def record_check(self) -> None:
        """Stamp the time of the latest autonomy pass."""
        now = datetime.now(UTC)
        with self._session() as session:
            state = self._get_or_create(session)
            state.last_check = now
            state.updated_at = now
            session.add(state)
            session.commit()
