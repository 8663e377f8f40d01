"""Builds the single system message sent ahead of the chat history."""

import copy
import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from orien.constants import CONTEXT_BLOCK_SEPARATOR, RECENT_SUMMARIES_LIMIT
from orien.context.cache import BreakpointState
from orien.database.models import Persona
from orien.datetime_utils import format_now
from orien.memory import MemoryView, merge_legacy_and_canonical
from orien.prompts import Prompt

logger = logging.getLogger(__name__)


class AssembledContext(BaseModel):
    """Ordered system blocks plus the memory maxima seen while assembling them."""

    blocks: list[str] = Field(default_factory=list)
    max_fact_id: int = 0
    max_summary_id: int = 0

    @property
    def system_message(self) -> str:
        return CONTEXT_BLOCK_SEPARATOR.join(self.blocks)

    def to_message(self) -> dict[str, Any]:
        return {"role": "system", "content": self.system_message}


def _bulleted(title: str, lines: list[str]) -> str:
    return f"{title}\n" + "\n".join(f"- {line}" for line in lines)


class ContextAssembler:
    """Turns a persona, its memory and knowledge selections into system blocks.

    Block order is fixed so that, for the same inputs, the output is
    byte-identical; the cache breakpoint relies on that.
    """

    def __init__(self, knowledge_store):
        self.knowledge = knowledge_store

    def assemble(
        self,
        persona: Persona | None,
        memory: MemoryView | None,
        requested_knowledge_ids: list[int] | None = None,
        breakpoint: BreakpointState | None = None,
        tool_block: str | None = None,
    ) -> AssembledContext:
        """
        Assemble the system context.

        Args:
            persona: Persona for the chat, or None for a direct-model chat
            memory: The persona's stored memory (ignored without a persona)
            requested_knowledge_ids: Knowledge files requested for this chat only
            breakpoint: Valid cache breakpoint whose maxima bound the memory shown
            tool_block: Rendered tagged-format tool block, appended last

        Returns:
            AssembledContext with blocks and the true memory maxima
        """
        memory = memory if memory is not None else MemoryView()
        context = AssembledContext(
            max_fact_id=memory.max_fact_id,
            max_summary_id=memory.max_summary_id,
        )
        blocks = context.blocks

        if persona is not None:
            if persona.system_prompt.strip():
                blocks.append(persona.system_prompt.strip())
            blocks.extend(self._memory_blocks(memory, breakpoint))

            titles = self.knowledge.list_titles()
            if titles:
                blocks.append(_bulleted("Available Knowledge Files:", titles))

        seen: set[int] = set()
        attached_ids = persona.get_knowledge_ids() if persona is not None else []
        for file in self.knowledge.get_many(attached_ids):
            if file.id in seen:
                continue
            seen.add(file.id)
            blocks.append(f'[Attached Knowledge] "{file.title}":\n\n{file.content}')

        for file in self.knowledge.get_many(requested_knowledge_ids or []):
            if file.id in seen:
                continue
            seen.add(file.id)
            blocks.append(f'Reference document "{file.title}":\n\n{file.content}')

        if tool_block:
            blocks.append(tool_block)

        context.blocks = [block for block in blocks if block.strip()]
        logger.debug(
            "Assembled %d context block(s) (%d chars)",
            len(context.blocks),
            len(context.system_message),
        )
        return context

    def _memory_blocks(self, memory: MemoryView, breakpoint: BreakpointState | None) -> list[str]:
        if breakpoint is not None:
            # Filter before merging so legacy blocks follow the pinned view
            memory = memory.model_copy(
                update={
                    "facts": [f for f in memory.facts if f.id <= breakpoint.max_fact_id],
                    "summaries": [
                        s for s in memory.summaries if s.id <= breakpoint.max_summary_id
                    ],
                }
            )
        unified = merge_legacy_and_canonical(memory)
        facts = unified.facts
        summaries = unified.summaries

        blocks: list[str] = []
        if facts:
            blocks.append(_bulleted("Facts:", [f.text for f in facts]))
        if summaries:
            recent = sorted(summaries, key=lambda s: s.timestamp)[-RECENT_SUMMARIES_LIMIT:]
            blocks.append(_bulleted("Recent Summaries:", [s.text for s in recent]))
        if unified.legacy_summary:
            blocks.append(f"Current Summary (legacy):\n{unified.legacy_summary}")
        if unified.manual_notes:
            blocks.append(_bulleted("Manual Notes:", unified.manual_notes))
        if unified.recent_legacy:
            blocks.append(_bulleted("Recent (legacy):", unified.recent_legacy))
        return blocks


def annotate_current_time(
    messages: list[dict[str, Any]], now: datetime | None = None
) -> list[dict[str, Any]]:
    """Append the current time to the last user message, on a copy of the history."""
    annotated = copy.deepcopy(messages)
    annotation = Prompt.CURRENT_TIME_ANNOTATION.format(now=format_now(now))
    for message in reversed(annotated):
        if message.get("role") != "user":
            continue
        content = message.get("content")
        if isinstance(content, str):
            message["content"] = f"{content}\n\n{annotation}" if content else annotation
        elif isinstance(content, list):
            content.append({"type": "text", "text": annotation})
        break
    return annotated
