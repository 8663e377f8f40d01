"""Error types for Orien.

Only ProviderError is fatal to a chat request. Tool errors are logged by the
dispatcher and recorded on the tool result; the conversation continues.
"""


class OrienError(Exception):
    """Base class for Orien errors."""


class ProviderError(OrienError):
    """The completion provider failed (network error or non-2xx response)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ProviderTimeoutError(ProviderError):
    """The completion call exceeded the configured per-call timeout."""


class ToolArgumentParseError(OrienError):
    """Tool arguments could not be decoded, even after salvage."""

    def __init__(self, tool: str, reason: str):
        super().__init__(f"{tool}: {reason}")
        self.tool = tool
        self.reason = reason


class ToolExecutionError(OrienError):
    """A tool's side effect failed (e.g. a store write)."""
