"""Memory tools: save_fact and save_summary."""

import logging

from orien.constants import ToolName
from orien.errors import ToolExecutionError
from orien.memory import fact_key
from orien.responses import OrienResponse
from orien.tools.base import Tool
from orien.tools.context import ToolContext
from orien.tools.models import DuplicateSkipped, SaveFactArgs, SaveSummaryArgs

logger = logging.getLogger(__name__)


class SaveFactTool(Tool):
    """Append a fact to the persona's memory unless it is a near-duplicate."""

    name = ToolName.SAVE_FACT
    description = (
        "Save a durable fact about the user or your relationship with them. "
        "Keep each fact short and self-contained. Near-duplicates of stored facts are ignored."
    )
    parameters = {
        "type": "object",
        "properties": {
            "fact": {"type": "string", "description": "The fact to remember"},
        },
        "required": ["fact"],
    }
    args_model = SaveFactArgs
    salvage_field = "fact"

    def __init__(self, db, context: ToolContext):
        self.db = db
        self.context = context

    async def execute(self, args: SaveFactArgs) -> str | DuplicateSkipped:
        key = fact_key(args.fact)
        if key in self.context.saved_fact_keys:
            return DuplicateSkipped(kind="fact", reason=OrienResponse.FACT_DUPLICATE)

        persona_id = self.context.persona.id
        existing = self.db.memory.find_duplicate_fact(persona_id, args.fact)
        if existing is not None:
            logger.debug("Fact '%s' duplicates stored fact %d", args.fact[:50], existing.seq)
            return DuplicateSkipped(kind="fact", reason=OrienResponse.FACT_DUPLICATE)

        fact = self.db.memory.add_fact(persona_id, args.fact, self.context.conversation_id)
        if fact is None:
            raise ToolExecutionError(f"could not store fact for persona {persona_id}")

        self.context.saved_fact_keys.add(key)
        return OrienResponse.FACT_SAVED.format(fact_id=fact.seq)


class SaveSummaryTool(Tool):
    """Append a summary of the conversation so far. Honoured once per request."""

    name = ToolName.SAVE_SUMMARY
    description = (
        "Save a short narrative summary of what happened in this conversation. "
        "Only one summary is kept per message."
    )
    parameters = {
        "type": "object",
        "properties": {
            "summary": {"type": "string", "description": "The summary to store"},
        },
        "required": ["summary"],
    }
    args_model = SaveSummaryArgs

    def __init__(self, db, context: ToolContext):
        self.db = db
        self.context = context

    async def execute(self, args: SaveSummaryArgs) -> str | DuplicateSkipped:
        if self.context.summary_saved:
            return DuplicateSkipped(kind="summary", reason=OrienResponse.SUMMARY_DUPLICATE)

        persona_id = self.context.persona.id
        summary = self.db.memory.add_summary(persona_id, args.summary, self.context.conversation_id)
        if summary is None:
            raise ToolExecutionError(f"could not store summary for persona {persona_id}")

        self.context.summary_saved = True
        return OrienResponse.SUMMARY_SAVED.format(summary_id=summary.seq)
