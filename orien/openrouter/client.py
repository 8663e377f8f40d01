"""OpenRouter API client for LLM inference."""

import asyncio
import logging
import time

import httpx

from orien.errors import ProviderError, ProviderTimeoutError
from orien.openrouter.models import ChatResponse

logger = logging.getLogger(__name__)

# Status codes worth retrying; every other non-2xx fails immediately
_RETRYABLE_STATUS = frozenset({408, 429, 500, 502, 503, 504})


class OpenRouterClient:
    """Client for the OpenRouter chat-completions endpoint."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        db=None,
        *,
        max_retries: int,
        retry_delay: float,
        timeout: float,
        referer: str = "http://localhost:3001",
        title: str = "Orien Chat",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize OpenRouter client.

        Args:
            api_url: Full chat-completions URL
            api_key: OpenRouter API key
            db: Optional Database instance for logging prompts
            max_retries: Number of attempts on transient failure
            retry_delay: Seconds between retries
            timeout: Hard per-call timeout in seconds
            referer: HTTP-Referer attribution header
            title: X-Title attribution header
            transport: Optional httpx transport (tests inject a mock one)
        """
        self.api_url = api_url
        self.db = db
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.timeout = timeout

        self.client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "HTTP-Referer": referer,
                "X-Title": title,
            },
        )

        logger.info("Initialized OpenRouter client: url=%s", api_url)

    async def chat(
        self,
        messages: list[dict],
        model: str,
        tools: list[dict] | None = None,
        max_tokens: int = 2000,
    ) -> ChatResponse:
        """
        Generate a chat completion with optional native tool calling.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: OpenRouter model id (e.g. anthropic/claude-sonnet-4.5)
            tools: Optional tool definitions; omitted from the body when None
            max_tokens: Completion token budget

        Returns:
            ChatResponse with choices and usage

        Raises:
            ProviderTimeoutError: If the last attempt timed out
            ProviderError: On network failure or a non-2xx response
        """
        body: dict = {"model": model, "max_tokens": max_tokens, "messages": messages}
        if tools:
            body["tools"] = tools

        last_error: ProviderError | None = None

        for attempt in range(self.max_retries):
            try:
                logger.debug(
                    "Sending chat request to OpenRouter (attempt %d/%d)",
                    attempt + 1,
                    self.max_retries,
                )
                logger.debug("Prompt messages: %s", messages)

                start = time.time()
                resp = await self.client.post(self.api_url, json=body)
                duration_ms = int((time.time() - start) * 1000)

                if resp.status_code >= 400:
                    error = ProviderError(
                        f"API Error: {resp.status_code} {resp.reason_phrase} - {resp.text}",
                        status_code=resp.status_code,
                    )
                    if resp.status_code not in _RETRYABLE_STATUS:
                        raise error
                    last_error = error
                    logger.warning(
                        "OpenRouter error (attempt %d/%d): %s",
                        attempt + 1,
                        self.max_retries,
                        error,
                    )
                else:
                    raw = resp.json()
                    response = ChatResponse.model_validate(raw)

                    if response.has_tool_calls:
                        logger.info(
                            "Received %d tool call(s)", len(response.message.tool_calls or [])
                        )
                    logger.debug("Response content: %s", response.content)

                    if self.db:
                        self.db.log_prompt(
                            model=model,
                            messages=messages,
                            response=raw,
                            tools=tools,
                            duration_ms=duration_ms,
                        )

                    return response

            except httpx.TimeoutException as e:
                last_error = ProviderTimeoutError(
                    f"Completion call timed out after {self.timeout}s: {e}"
                )
                logger.warning(
                    "OpenRouter timeout (attempt %d/%d)", attempt + 1, self.max_retries
                )
            except httpx.HTTPError as e:
                last_error = ProviderError(f"Network error: {e}")
                logger.warning(
                    "OpenRouter network error (attempt %d/%d): %s",
                    attempt + 1,
                    self.max_retries,
                    e,
                )
            except ValueError as e:
                # Malformed JSON body or unexpected schema
                raise ProviderError(f"Invalid response from provider: {e}") from e

            if attempt < self.max_retries - 1:
                await asyncio.sleep(self.retry_delay)

        logger.error("OpenRouter chat failed after %d attempts: %s", self.max_retries, last_error)
        assert last_error is not None
        raise last_error

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
        logger.info("OpenRouter client closed")
