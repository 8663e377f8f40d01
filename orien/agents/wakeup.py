"""WakeupAgent: lets autonomous personas decide whether to reach out."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta

from orien.agents.base import Agent
from orien.agents.models import ToolCallRecord
from orien.context import ContextAssembler
from orien.database.models import Persona
from orien.datetime_utils import ensure_utc, format_elapsed
from orien.errors import ProviderError
from orien.prompts import Prompt
from orien.tools import ToolContext, ToolFormat, build_wakeup_tools, select_tool_format
from orien.tools.parser import parse_response

logger = logging.getLogger(__name__)


class WakeupAgent(Agent):
    """Checks every autonomous persona whose interval has elapsed.

    Each due persona gets one model call with its usual context plus a
    wake-up prompt, and may call send_notification, save_fact or
    get_loop_state. A failed call for one persona does not stop the others.
    """

    @property
    def name(self) -> str:
        """Task name for logging."""
        return "wakeup"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.assembler = ContextAssembler(self.db.knowledge)
        self._pass_lock = asyncio.Lock()

    async def execute(self) -> bool:
        """
        Run one autonomy pass.

        Returns:
            True if any persona was checked, False otherwise
        """
        # The scheduler and POST /api/agent/check can both start a pass
        if self._pass_lock.locked():
            logger.info("Wake-up pass already running; skipping")
            return False
        async with self._pass_lock:
            return await self._run_pass()

    async def _run_pass(self) -> bool:
        now = datetime.now(UTC)
        due = [p for p in self.db.personas.get_autonomous() if self._is_due(p, now)]
        if not due:
            return False

        self.db.state.record_check()
        for persona in due:
            self.db.personas.mark_checked(persona.id, now)
            try:
                await self.check_persona(persona, now)
            except ProviderError as e:
                logger.error("Wake-up call failed for persona %s: %s", persona.name, e)

        return True

    @staticmethod
    def _is_due(persona: Persona, now: datetime) -> bool:
        if persona.last_check_at is None:
            return True
        next_check = ensure_utc(persona.last_check_at) + timedelta(
            minutes=persona.check_interval_minutes
        )
        return now >= next_check

    def _wakeup_prompt(self, persona: Persona, now: datetime) -> str:
        state = self.db.state.get()
        elapsed = (
            (now - ensure_utc(state.last_activity)).total_seconds()
            if state.last_activity
            else None
        )
        template = persona.wakeup_prompt or Prompt.DEFAULT_WAKEUP_PROMPT
        # Persona prompts are user-written; only the known placeholders are filled
        values = {
            "hours_since_activity": format_elapsed(elapsed),
            "is_online": str(state.is_online),
        }
        for key, value in values.items():
            template = template.replace(f"{{{key}}}", value)
        return template

    async def check_persona(self, persona: Persona, now: datetime) -> list[ToolCallRecord]:
        """Give one persona its wake-up turn and apply whatever it decides."""
        logger.info("Wake-up check for persona %s", persona.name)

        tool_format = select_tool_format(persona.model)
        context = ToolContext(persona=persona)
        registry = build_wakeup_tools(self.db, context)

        assembled = self.assembler.assemble(
            persona,
            self.db.memory.get_memory(persona.id),
            tool_block=(
                registry.render_tagged_block() if tool_format == ToolFormat.TAGGED else None
            ),
        )
        messages = [
            assembled.to_message(),
            {"role": "user", "content": self._wakeup_prompt(persona, now)},
        ]

        response = await self.client.chat(
            messages=messages,
            model=persona.model,
            tools=registry.get_native_tools() if tool_format == ToolFormat.NATIVE else None,
            max_tokens=self.config.wakeup_max_tokens,
        )

        parsed = parse_response(response.message, tool_format)
        records: list[ToolCallRecord] = []
        if parsed.calls:
            await self._dispatch(parsed.calls, registry, records)
        else:
            logger.info("Persona %s chose not to act", persona.name)
        return records
