"""Knowledge store: reference documents addressed by id or title."""

import logging

from sqlmodel import Session, func, select

from orien.database.models import KnowledgeFile

logger = logging.getLogger(__name__)


class KnowledgeStore:
    """Manages KnowledgeFile records."""

    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine)

    def add(self, title: str, content: str) -> KnowledgeFile:
        """Store a knowledge file."""
        with self._session() as session:
            file = KnowledgeFile(
                title=title.strip(), content=content, size=len(content.encode("utf-8"))
            )
            session.add(file)
            session.commit()
            session.refresh(file)
            logger.debug("Added knowledge file %d: %s", file.id, title)
            return file

    def get(self, file_id: int) -> KnowledgeFile | None:
        """Get a knowledge file by id."""
        with self._session() as session:
            return session.get(KnowledgeFile, file_id)

    def get_many(self, file_ids: list[int]) -> list[KnowledgeFile]:
        """Get knowledge files by id, preserving the given order and skipping unknown ids."""
        files = []
        for file_id in file_ids:
            file = self.get(file_id)
            if file is None:
                logger.warning("Knowledge file %d not found", file_id)
                continue
            files.append(file)
        return files

    def find_by_titles(self, titles: list[str]) -> list[KnowledgeFile]:
        """Case-insensitive exact-title lookup."""
        wanted = {t.strip().lower() for t in titles if t.strip()}
        if not wanted:
            return []
        title_lower = func.lower(KnowledgeFile.title)
        with self._session() as session:
            return list(
                session.exec(
                    select(KnowledgeFile).where(title_lower.in_(sorted(wanted)))
                ).all()
            )

    def list_all(self) -> list[KnowledgeFile]:
        """Get the whole catalog ordered by upload time."""
        with self._session() as session:
            return list(
                session.exec(
                    select(KnowledgeFile).order_by(KnowledgeFile.uploaded_at.asc())  # type: ignore[attr-defined]
                ).all()
            )

    def list_titles(self) -> list[str]:
        """Titles of every knowledge file, in upload order."""
        return [file.title for file in self.list_all()]
