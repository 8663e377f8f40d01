"""OpenRouter completion client."""

from orien.openrouter.client import OpenRouterClient
from orien.openrouter.models import ChatResponse, ChatResponseMessage, ProviderToolCall, Usage

__all__ = [
    "ChatResponse",
    "ChatResponseMessage",
    "OpenRouterClient",
    "ProviderToolCall",
    "Usage",
]
