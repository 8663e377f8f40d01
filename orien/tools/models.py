"""Pydantic models for tool calling."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from orien.constants import SEARCH_DEFAULT_MAX_RESULTS, Urgency
from orien.responses import OrienResponse


class ToolCall(BaseModel):
    """A normalized tool call, whichever wire format it arrived in."""

    tool: str
    arguments: str | dict[str, Any] = Field(default_factory=dict)
    id: str | None = None


class ToolResult(BaseModel):
    """Result from executing a tool."""

    tool: str
    result: Any = None
    error: str | None = None
    skipped: bool = False
    arguments: dict[str, Any] = Field(default_factory=dict)
    id: str | None = None


class ToolDefinition(BaseModel):
    """Definition of a tool for the model."""

    name: str
    description: str
    parameters: dict[str, Any] = Field(default_factory=dict)


class DuplicateSkipped(BaseModel):
    """Expected no-op outcome: the write was a duplicate within the dedup policy."""

    kind: str  # "fact" or "summary"
    reason: str

    def __str__(self) -> str:
        return self.reason


class SearchMatch(BaseModel):
    """One line-level hit from search_knowledge."""

    model_config = ConfigDict(populate_by_name=True)

    file: str
    line_number: int = Field(alias="lineNumber")
    context: str


class KnowledgeSearchResult(BaseModel):
    """Result of search_knowledge, formatted for the model by __str__."""

    query: str
    matches: list[SearchMatch] = Field(default_factory=list)

    def __str__(self) -> str:
        if not self.matches:
            return OrienResponse.SEARCH_NO_MATCHES.format(query=self.query)
        parts = [f"Found {len(self.matches)} match(es) for '{self.query}':"]
        for match in self.matches:
            parts.append(f"[{match.file}, line {match.line_number}]\n{match.context}")
        return "\n\n".join(parts)


# ── Typed tool arguments ────────────────────────────────────────────────────


class SaveFactArgs(BaseModel):
    fact: str = Field(min_length=1)


class SaveSummaryArgs(BaseModel):
    summary: str = Field(min_length=1)


class SendNotificationArgs(BaseModel):
    message: str = Field(min_length=1)
    urgency: Urgency = Urgency.LOW

    @field_validator("urgency", mode="before")
    @classmethod
    def _default_unknown_urgency(cls, value: Any) -> Any:
        if value is None:
            return Urgency.LOW
        if isinstance(value, str) and value.lower() in {u.value for u in Urgency}:
            return value.lower()
        return Urgency.LOW


class LoadKnowledgeByTitleArgs(BaseModel):
    titles: list[str] = Field(min_length=1)

    @field_validator("titles", mode="before")
    @classmethod
    def _wrap_single_title(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class NoArgs(BaseModel):
    """Arguments for tools that take none; anything sent is ignored."""


class SearchKnowledgeArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(min_length=1)
    files: list[str] | None = None
    max_results: int = Field(default=SEARCH_DEFAULT_MAX_RESULTS, alias="maxResults")
