"""Prompt-cache breakpoint tracking.

A breakpoint pins the cacheable prefix of a conversation to a persistent
message id, together with the memory high-water marks that were visible when
it was set. While the breakpoint is valid the assembler filters memory to
those marks, so the system prefix stays byte-identical across calls even as
new facts and summaries are saved.
"""

import copy
import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

from pydantic import BaseModel

from orien.constants import (
    CACHE_CHARS_PER_TOKEN,
    CACHE_CONTROL_MODEL_MARKERS,
    CACHE_DEFAULT_MIN_TOKENS,
    CACHE_MIN_TOKENS_BY_MARKER,
    CACHE_MIN_UNCACHED_TAIL,
    CACHE_TTL_SECONDS,
    NEW_CONVERSATION_ID,
)

logger = logging.getLogger(__name__)


class BreakpointState(BaseModel):
    """Cache anchor for one conversation."""

    anchor_message_id: int
    max_fact_id: int
    max_summary_id: int
    timestamp: float


class BreakpointPlan(BaseModel):
    """Outcome of resolving a conversation's breakpoint for one request.

    ``breakpoint`` is set when a stored, still-valid entry is reused; a plan
    without one is a fresh anchor waiting for ``commit``.
    """

    conversation_id: str
    anchor_message_id: int
    breakpoint: BreakpointState | None = None

    @property
    def reused(self) -> bool:
        return self.breakpoint is not None


class BreakpointStore(Protocol):
    """Keyed storage for breakpoint state."""

    def get(self, key: str) -> BreakpointState | None: ...

    def set(self, key: str, state: BreakpointState) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryBreakpointStore:
    """Process-local breakpoint map. Not shared between server instances."""

    def __init__(self):
        self._states: dict[str, BreakpointState] = {}

    def get(self, key: str) -> BreakpointState | None:
        return self._states.get(key)

    def set(self, key: str, state: BreakpointState) -> None:
        self._states[key] = state

    def delete(self, key: str) -> None:
        self._states.pop(key, None)

    def __len__(self) -> int:
        return len(self._states)


def message_id(message: dict[str, Any]) -> int | None:
    """Persistent id of a history message, or None if it has not been saved yet."""
    value = message.get("id")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


class CacheBreakpointTracker:
    """Decides, per conversation, whether to reuse or plan a cache anchor."""

    def __init__(
        self,
        store: BreakpointStore,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        min_uncached_tail: int = CACHE_MIN_UNCACHED_TAIL,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.min_uncached_tail = min_uncached_tail
        self.clock = clock

    def resolve(
        self, conversation_id: str | None, messages: list[dict[str, Any]]
    ) -> BreakpointPlan | None:
        """Reuse a valid breakpoint or plan a fresh one.

        Returns None when caching does not apply: no persisted conversation,
        too few messages, or a message without a persistent id.
        """
        if not conversation_id or conversation_id == NEW_CONVERSATION_ID:
            return None
        if len(messages) <= self.min_uncached_tail:
            return None

        ids = [message_id(m) for m in messages]
        if any(i is None for i in ids):
            logger.debug("Skipping cache for %s: unsaved messages", conversation_id)
            return None

        state = self.store.get(conversation_id)
        if state is not None:
            age = self.clock() - state.timestamp
            if age > self.ttl_seconds:
                logger.debug("Breakpoint for %s expired (%.0fs old)", conversation_id, age)
                self.store.delete(conversation_id)
            elif state.anchor_message_id not in ids:
                logger.debug("Breakpoint anchor for %s left the window", conversation_id)
                self.store.delete(conversation_id)
            else:
                logger.debug(
                    "Reusing breakpoint for %s at message %d",
                    conversation_id,
                    state.anchor_message_id,
                )
                return BreakpointPlan(
                    conversation_id=conversation_id,
                    anchor_message_id=state.anchor_message_id,
                    breakpoint=state,
                )

        anchor = ids[len(ids) - self.min_uncached_tail - 1]
        assert anchor is not None
        return BreakpointPlan(conversation_id=conversation_id, anchor_message_id=anchor)

    def commit(
        self, plan: BreakpointPlan, max_fact_id: int, max_summary_id: int
    ) -> BreakpointState:
        """Store a planned anchor with the true memory maxima. Reused entries are left as-is."""
        if plan.breakpoint is not None:
            return plan.breakpoint
        state = BreakpointState(
            anchor_message_id=plan.anchor_message_id,
            max_fact_id=max_fact_id,
            max_summary_id=max_summary_id,
            timestamp=self.clock(),
        )
        self.store.set(plan.conversation_id, state)
        logger.debug(
            "New breakpoint for %s at message %d (facts<=%d, summaries<=%d)",
            plan.conversation_id,
            state.anchor_message_id,
            max_fact_id,
            max_summary_id,
        )
        return state


def supports_cache_control(model: str) -> bool:
    """True for model families that honour explicit cache_control markers."""
    lowered = model.lower()
    return any(marker in lowered for marker in CACHE_CONTROL_MODEL_MARKERS)


def min_cacheable_tokens(model: str) -> int:
    """Smallest prefix, in tokens, the model's provider will cache."""
    lowered = model.lower()
    for marker, tokens in CACHE_MIN_TOKENS_BY_MARKER.items():
        if marker in lowered:
            return tokens
    return CACHE_DEFAULT_MIN_TOKENS


def _content_chars(content: Any) -> int:
    if isinstance(content, str):
        return len(content)
    if isinstance(content, list):
        return sum(len(part.get("text", "")) for part in content if isinstance(part, dict))
    return 0


def estimate_prefix_tokens(
    system_message: dict[str, Any], messages: list[dict[str, Any]], anchor_id: int
) -> int:
    """Rough token count of the system message plus history up to and including the anchor."""
    chars = _content_chars(system_message.get("content"))
    for message in messages:
        chars += _content_chars(message.get("content"))
        if message_id(message) == anchor_id:
            break
    return chars // CACHE_CHARS_PER_TOKEN


def apply_cache_control(
    system_message: dict[str, Any],
    messages: list[dict[str, Any]],
    anchor_id: int,
    model: str,
) -> list[dict[str, Any]]:
    """Mark the anchor message as the end of the cacheable prefix.

    Returns a copy of ``messages``; the input list is never modified. The
    marker is added only for models that accept it and when the prefix is
    long enough to be cached.
    """
    if not supports_cache_control(model):
        return messages

    tokens = estimate_prefix_tokens(system_message, messages, anchor_id)
    minimum = min_cacheable_tokens(model)
    if tokens < minimum:
        logger.debug("Prefix too short to cache (%d < %d tokens)", tokens, minimum)
        return messages

    annotated = []
    for message in messages:
        if message_id(message) == anchor_id:
            message = copy.deepcopy(message)
            content = message.get("content")
            text = content if isinstance(content, str) else ""
            if isinstance(content, list):
                text = "".join(p.get("text", "") for p in content if isinstance(p, dict))
            message["content"] = [
                {"type": "text", "text": text, "cache_control": {"type": "ephemeral"}}
            ]
        annotated.append(message)

    logger.debug("Cache breakpoint at message %d (~%d tokens)", anchor_id, tokens)
    return annotated
