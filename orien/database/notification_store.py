"""Notification store: messages personas send to the user."""

import logging

from sqlmodel import Session, select

from orien.constants import Urgency
from orien.database.models import Notification

logger = logging.getLogger(__name__)


class NotificationStore:
    """Manages Notification records."""

    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine)

    def add(
        self,
        persona_id: int | None,
        persona_name: str,
        persona_avatar: str,
        message: str,
        urgency: Urgency = Urgency.LOW,
    ) -> Notification:
        """Create an unread notification."""
        with self._session() as session:
            notification = Notification(
                persona_id=persona_id,
                persona_name=persona_name,
                persona_avatar=persona_avatar,
                message=message,
                urgency=urgency,
            )
            session.add(notification)
            session.commit()
            session.refresh(notification)
            logger.info("Notification %d from %s (%s)", notification.id, persona_name, urgency)
            return notification

    def get_unread(self) -> list[Notification]:
        """Get unread notifications, newest first."""
        with self._session() as session:
            return list(
                session.exec(
                    select(Notification)
                    .where(Notification.read == False)  # noqa: E712
                    .order_by(Notification.created_at.desc())  # type: ignore[attr-defined]
                ).all()
            )
