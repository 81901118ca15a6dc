"""OpenAI-compatible AI gateway client for document generation.

Uses the openai SDK against a configurable base URL. SDK-level retries are
disabled: rate limiting is surfaced to the caller, which owns backoff.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import openai
from openai import AsyncOpenAI

from prodstack.core.config import Settings
from prodstack.core.errors import PAYMENT_REQUIRED_MESSAGE, TOO_MANY_REQUESTS_MESSAGE, ApiError
from prodstack.core.logging import get_logger

logger = get_logger(__name__)

GENERATION_FAILED_MESSAGE = "Couldn't generate document. Please try again."


def upstream_error_to_api_error(exc: Exception) -> ApiError:
    """Map an SDK failure to the error response the proxy sends."""
    if isinstance(exc, openai.APIStatusError):
        status = exc.status_code
        if status == 429:
            return ApiError(429, TOO_MANY_REQUESTS_MESSAGE, code="RATE_LIMIT")
        if status == 402:
            return ApiError(402, PAYMENT_REQUIRED_MESSAGE, code="PAYMENT_REQUIRED")
        if status == 503:
            return ApiError(503, GENERATION_FAILED_MESSAGE, details=f"AI Gateway error: {status}")
        return ApiError(500, GENERATION_FAILED_MESSAGE, details=exc.message or f"AI Gateway error: {status}")
    # Connection refused, DNS, timeouts: the service is unreachable
    return ApiError(503, GENERATION_FAILED_MESSAGE, details=str(exc))


class AIGateway:
    """Chat-completion client bound to one model configuration."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 4000,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> AIGateway:
        """Build a gateway, or fail with 503 when no API key is configured."""
        if not settings.AI_GATEWAY_API_KEY:
            logger.error("AI_GATEWAY_API_KEY not configured")
            raise ApiError(503, "AI service not configured")
        return cls(
            api_key=settings.AI_GATEWAY_API_KEY,
            base_url=settings.AI_GATEWAY_URL,
            model=settings.DOCUMENT_MODEL,
            temperature=settings.DOCUMENT_TEMPERATURE,
            max_tokens=settings.DOCUMENT_MAX_TOKENS,
        )

    async def open_stream(self, messages: list[dict[str, str]]) -> AsyncIterator[str]:
        """
        Start a streaming completion.

        The request is issued before this coroutine returns, so an upstream
        refusal (429, 402, 5xx) raises here and no stream is ever opened.

        Returns:
            Async iterator of text deltas

        Raises:
            ApiError: If the upstream call fails to start
        """
        try:
            stream = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                stream=True,
            )
        except (openai.APIStatusError, openai.APIConnectionError) as e:
            logger.error(f"AI gateway refused stream: {e}")
            raise upstream_error_to_api_error(e) from e

        return self._iter_deltas(stream)

    async def _iter_deltas(self, stream) -> AsyncIterator[str]:
        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        finally:
            await stream.close()

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Run a single non-streaming completion and return its text."""
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except (openai.APIStatusError, openai.APIConnectionError) as e:
            logger.error(f"AI gateway completion failed: {e}")
            raise upstream_error_to_api_error(e) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
