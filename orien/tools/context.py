"""Per-request state shared by the tools of one chat or wake-up pass."""

from dataclasses import dataclass, field

from orien.database.models import Persona
from orien.tools.models import KnowledgeSearchResult


@dataclass
class ToolContext:
    """Mutable state scoped to a single request.

    Holds the per-request dedup guards and collects search results so the
    caller can return them alongside the reply.
    """

    persona: Persona
    conversation_id: str | None = None
    saved_fact_keys: set[str] = field(default_factory=set)
    summary_saved: bool = False
    search_results: list[KnowledgeSearchResult] = field(default_factory=list)
