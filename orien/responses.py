"""User-facing response strings for Orien.

Parameterized strings use .format() style templates.
"""


class OrienResponse:
    """All user-facing response strings, organized by feature area."""

    # ── Chat ─────────────────────────────────────────────────────────────────

    INVALID_REQUEST = "Invalid request: {error}"
    FACT_NOT_FOUND = "Fact not found"
    PERSONA_NOT_FOUND = "Persona not found"
    CONVERSATION_NOT_FOUND = "Conversation not found"

    # ── Tool results (fed back to the model) ─────────────────────────────────

    FACT_SAVED = "Fact saved (id {fact_id})."
    FACT_DUPLICATE = "Skipped: a similar fact is already stored."
    SUMMARY_SAVED = "Summary saved (id {summary_id})."
    SUMMARY_DUPLICATE = "Skipped: a summary was already saved in this request."
    NOTIFICATION_SENT = "Notification sent ({urgency})."
    KNOWLEDGE_LOADED = "Loaded {count} knowledge file(s): {titles}"
    KNOWLEDGE_LISTED = "{count} knowledge file(s) available."
    SEARCH_NO_MATCHES = "No matches for '{query}'."
    TOOL_ERROR = "Error: {error}"
