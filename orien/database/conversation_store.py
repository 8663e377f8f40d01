"""Conversation store: conversations and their persistently numbered messages."""

import logging
from datetime import UTC, datetime

from sqlmodel import Session, select

from orien.database.models import Conversation, ConversationMessage

logger = logging.getLogger(__name__)


class ConversationStore:
    """Manages Conversation and ConversationMessage records.

    Message ids (``seq``) are assigned from the conversation's counter at
    persistence time; they are contiguous and never change afterwards.
    """

    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine)

    def create(
        self,
        title: str = "New Conversation",
        persona_id: int | None = None,
        model: str | None = None,
    ) -> Conversation:
        """Create an empty conversation."""
        with self._session() as session:
            conversation = Conversation(title=title, persona_id=persona_id, model=model)
            session.add(conversation)
            session.commit()
            session.refresh(conversation)
            logger.debug("Created conversation %d", conversation.id)
            return conversation

    def get(self, conversation_id: int) -> Conversation | None:
        """Get a conversation by id."""
        with self._session() as session:
            return session.get(Conversation, conversation_id)

    def append_messages(
        self,
        conversation_id: int,
        messages: list[dict],
    ) -> list[ConversationMessage]:
        """Persist new messages, assigning the next contiguous ids.

        Each dict needs ``role`` and ``content``; ``model`` and ``timestamp``
        are optional. Returns the stored messages, or [] if the conversation
        does not exist.
        """
        with self._session() as session:
            conversation = session.get(Conversation, conversation_id)
            if conversation is None:
                logger.error("Cannot append: conversation %d not found", conversation_id)
                return []

            stored: list[ConversationMessage] = []
            for message in messages:
                conversation.message_counter += 1
                row = ConversationMessage(
                    conversation_id=conversation_id,
                    seq=conversation.message_counter,
                    role=message["role"],
                    content=message.get("content") or "",
                    model=message.get("model"),
                )
                timestamp = message.get("timestamp")
                if isinstance(timestamp, str):
                    timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
                if timestamp:
                    row.timestamp = timestamp
                session.add(row)
                stored.append(row)

            conversation.updated_at = datetime.now(UTC)
            session.add(conversation)
            session.commit()
            for row in stored:
                session.refresh(row)
            logger.debug(
                "Appended %d message(s) to conversation %d", len(stored), conversation_id
            )
            return stored

    def get_messages(self, conversation_id: int) -> list[ConversationMessage]:
        """Get a conversation's messages in id order."""
        with self._session() as session:
            return list(
                session.exec(
                    select(ConversationMessage)
                    .where(ConversationMessage.conversation_id == conversation_id)
                    .order_by(ConversationMessage.seq.asc())  # type: ignore[union-attr]
                ).all()
            )
