"""ChatAgent: the context-assembly and tool-calling loop behind POST /api/chat."""

from __future__ import annotations

import logging
from typing import Any

from orien.agents.base import Agent
from orien.agents.models import ChatRequest, ChatResult, ToolCallRecord
from orien.config import Config
from orien.constants import FOLLOW_UP_TOOLS, MAX_HISTORY_MESSAGES, MAX_TOOL_ITERATIONS
from orien.context import (
    CacheBreakpointTracker,
    ContextAssembler,
    annotate_current_time,
    apply_cache_control,
)
from orien.database import Database
from orien.memory import MemoryView
from orien.openrouter import OpenRouterClient, Usage
from orien.tools import (
    ToolContext,
    ToolFormat,
    ToolRegistry,
    build_chat_tools,
    select_tool_format,
)
from orien.tools.parser import parse_response

logger = logging.getLogger(__name__)


def _to_provider_message(message: dict[str, Any]) -> dict[str, Any]:
    """Drop bookkeeping keys the completion endpoint does not accept."""
    return {"role": message["role"], "content": message["content"]}


class ChatAgent(Agent):
    """Answers one chat request.

    Steps: record presence, trim history, load persona and memory, resolve
    the cache breakpoint, assemble context, then call the model up to
    MAX_TOOL_ITERATIONS times. Only search_knowledge results are fed back for
    another turn; every other tool is applied and the loop ends on that turn's
    prose. Provider errors propagate; tool failures never do.
    """

    def __init__(
        self,
        db: Database,
        client: OpenRouterClient,
        config: Config,
        tracker: CacheBreakpointTracker,
        max_history_messages: int = MAX_HISTORY_MESSAGES,
        max_iterations: int = MAX_TOOL_ITERATIONS,
    ):
        super().__init__(db, client, config)
        self.tracker = tracker
        self.assembler = ContextAssembler(db.knowledge)
        self.max_history_messages = max_history_messages
        self.max_iterations = max_iterations

    async def chat(self, request: ChatRequest) -> ChatResult:
        """
        Run the chat loop for a request.

        Raises:
            ProviderError: If a completion call fails
        """
        self._record_presence(request)

        history = [m.to_dict() for m in request.messages[-self.max_history_messages :]]

        persona = self.db.personas.get(request.persona_id) if request.persona_id else None
        if request.persona_id and persona is None:
            logger.warning("Persona %d not found; answering without one", request.persona_id)
        memory = self.db.memory.get_memory(persona.id) if persona else MemoryView()

        tool_format = ToolFormat.NATIVE
        registry: ToolRegistry | None = None
        context: ToolContext | None = None
        if persona is not None:
            tool_format = self._select_format(request.model)
            context = ToolContext(persona=persona, conversation_id=request.conversation_id)
            registry = build_chat_tools(self.db, context)

        plan = self.tracker.resolve(request.conversation_id, history)
        assembled = self.assembler.assemble(
            persona,
            memory,
            request.knowledge_base_ids,
            breakpoint=plan.breakpoint if plan else None,
            tool_block=(
                registry.render_tagged_block()
                if registry and tool_format == ToolFormat.TAGGED
                else None
            ),
        )
        if plan is not None:
            self.tracker.commit(plan, assembled.max_fact_id, assembled.max_summary_id)

        system_message = assembled.to_message()
        history = annotate_current_time(history)
        if plan is not None:
            history = apply_cache_control(
                system_message, history, plan.anchor_message_id, request.model
            )

        messages = [_to_provider_message(m) for m in history]
        if assembled.blocks:
            messages.insert(0, system_message)

        native_tools = (
            registry.get_native_tools() if registry and tool_format == ToolFormat.NATIVE else None
        )
        result = await self._run_loop(request.model, messages, native_tools, registry, tool_format)
        if context is not None:
            result.search_results = list(context.search_results)
        return result

    def _select_format(self, model: str) -> ToolFormat:
        tool_format = select_tool_format(model)
        logger.debug("Tool format for %s: %s", model, tool_format)
        return tool_format

    def _record_presence(self, request: ChatRequest) -> None:
        try:
            self.db.state.record_activity(request.last_user_text())
        except Exception as e:
            logger.warning("Failed to record user activity: %s", e)

    async def _run_loop(
        self,
        model: str,
        messages: list[dict[str, Any]],
        native_tools: list[dict] | None,
        registry: ToolRegistry | None,
        tool_format: ToolFormat,
    ) -> ChatResult:
        """Call the model, dispatch tools, and decide whether to go around again."""
        usage = Usage()
        records: list[ToolCallRecord] = []
        text = ""

        for iteration in range(self.max_iterations):
            logger.info("Chat iteration %d/%d", iteration + 1, self.max_iterations)
            response = await self.client.chat(
                messages=messages,
                model=model,
                tools=native_tools,
                max_tokens=self.config.chat_max_tokens,
            )
            if response.usage:
                usage = usage + response.usage

            if registry is None:
                text = response.content.strip()
                break

            parsed = parse_response(response.message, tool_format)
            text = parsed.text
            if not parsed.calls:
                break

            results = await self._dispatch(parsed.calls, registry, records)
            wants_follow_up = any(
                call.tool in FOLLOW_UP_TOOLS and result.error is None and not result.skipped
                for call, result in zip(parsed.calls, results, strict=True)
            )
            if not wants_follow_up:
                break
            if iteration == self.max_iterations - 1:
                logger.warning("Reached %d iterations; returning last turn", self.max_iterations)
                break

            messages.extend(
                self._tool_turn_messages(
                    tool_format,
                    response.message.to_input_message(),
                    parsed.transcript,
                    parsed.calls,
                    results,
                )
            )

        logger.info("Chat done: %d tool call(s), reply length %d", len(records), len(text))
        return ChatResult(message=text, usage=usage, tool_calls=records)
