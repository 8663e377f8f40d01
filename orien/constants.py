"""Constants for Orien."""

from enum import StrEnum


class ToolName(StrEnum):
    """Names of the tools a persona can call."""

    SAVE_FACT = "save_fact"
    SAVE_SUMMARY = "save_summary"
    SEND_NOTIFICATION = "send_notification"
    LOAD_KNOWLEDGE_BY_TITLE = "load_knowledge_by_title"
    LIST_KNOWLEDGE_FILES = "list_knowledge_files"
    SEARCH_KNOWLEDGE = "search_knowledge"
    GET_LOOP_STATE = "get_loop_state"


class Urgency(StrEnum):
    """Notification urgency levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Sentinel conversation id used by the frontend before the first autosave
NEW_CONVERSATION_ID = "new"

# Hard cap on history messages sent to the model, independent of the cache tail
MAX_HISTORY_MESSAGES = 40

# Model turns per chat request (initial call + follow-ups)
MAX_TOOL_ITERATIONS = 3

# Tools whose result is fed back to the model for another turn.
# Every other tool is fire-and-forget.
FOLLOW_UP_TOOLS = frozenset({ToolName.SEARCH_KNOWLEDGE})

# ── Memory ──────────────────────────────────────────────────────────────────

FACT_KEY_LENGTH = 50
FACT_WORD_OVERLAP_THRESHOLD = 0.8
RECENT_SUMMARIES_LIMIT = 5
LEGACY_RECENT_LIMIT = 5

# ── Knowledge search ────────────────────────────────────────────────────────

SEARCH_DEFAULT_MAX_RESULTS = 5
SEARCH_MAX_RESULTS_CAP = 10
SEARCH_CONTEXT_LINES = 2
SEARCH_CONTEXT_MAX_CHARS = 500

# ── Prompt caching ──────────────────────────────────────────────────────────

CACHE_TTL_SECONDS = 300.0
CACHE_MIN_UNCACHED_TAIL = 3
CACHE_CHARS_PER_TOKEN = 4
CACHE_DEFAULT_MIN_TOKENS = 1024

# Model id markers whose provider requires a larger cacheable prefix
CACHE_MIN_TOKENS_BY_MARKER: dict[str, int] = {
    "claude-opus-4.5": 4096,
    "claude-haiku-4.5": 4096,
}

# Model id markers whose provider honours explicit cache_control breakpoints.
# Other providers cache prefixes automatically or not at all.
CACHE_CONTROL_MODEL_MARKERS = ("anthropic/", "claude", "google/gemini")

# ── Context assembly ────────────────────────────────────────────────────────

CONTEXT_BLOCK_SEPARATOR = "\n\n---\n\n"
LOOP_STATE_LAST_MESSAGE_CHARS = 100
DEFAULT_PERSONA_AVATAR = "🤖"
