"""Database connection and session management."""

import json
import logging
from pathlib import Path

from sqlmodel import Session, SQLModel, create_engine, select

from orien.database.conversation_store import ConversationStore
from orien.database.knowledge_store import KnowledgeStore
from orien.database.memory_store import MemoryStore
from orien.database.models import LoopState, PromptLog
from orien.database.notification_store import NotificationStore
from orien.database.persona_store import PersonaStore
from orien.database.state_store import StateStore

logger = logging.getLogger(__name__)


class Database:
    """Database manager for Orien's document store."""

    def __init__(self, db_path: str):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

        # Ensure directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(f"sqlite:///{db_path}")

        self.personas = PersonaStore(self.engine)
        self.memory = MemoryStore(self.engine)
        self.conversations = ConversationStore(self.engine)
        self.knowledge = KnowledgeStore(self.engine)
        self.notifications = NotificationStore(self.engine)
        self.state = StateStore(self.engine)

        logger.info("Database initialized: %s", db_path)

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        SQLModel.metadata.create_all(self.engine)
        logger.info("Database tables created")

    def get_session(self) -> Session:
        """Get a database session."""
        return Session(self.engine)

    def ping(self) -> bool:
        """Check that the store answers queries."""
        try:
            with self.get_session() as session:
                session.exec(select(LoopState)).first()
            return True
        except Exception as e:
            logger.error("Database ping failed: %s", e)
            return False

    def log_prompt(
        self,
        model: str,
        messages: list[dict],
        response: dict,
        tools: list[dict] | None = None,
        duration_ms: int | None = None,
    ) -> None:
        """
        Log a prompt/response exchange with the completion provider.

        Args:
            model: Model name used
            messages: Messages sent to the model
            response: Response dict from the model
            tools: Optional tool definitions sent
            duration_ms: Optional call duration in milliseconds
        """
        try:
            with self.get_session() as session:
                log = PromptLog(
                    model=model,
                    messages=json.dumps(messages),
                    tools=json.dumps(tools) if tools else None,
                    response=json.dumps(response),
                    duration_ms=duration_ms,
                )
                session.add(log)
                session.commit()
                logger.debug("Logged prompt exchange (model=%s)", model)
        except Exception as e:
            logger.error("Failed to log prompt: %s", e)
