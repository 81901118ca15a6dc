"""Tests for the AI gateway wrapper and upstream error mapping."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from prodstack.core.errors import PAYMENT_REQUIRED_MESSAGE, TOO_MANY_REQUESTS_MESSAGE, ApiError
from prodstack.services.ai_gateway import AIGateway, upstream_error_to_api_error

REQUEST = httpx.Request("POST", "https://gateway.test/v1/chat/completions")
MESSAGES = [{"role": "system", "content": "sys"}, {"role": "user", "content": "go"}]


def _status_error(status: int) -> openai.APIStatusError:
    response = httpx.Response(status, request=REQUEST)
    return openai.APIStatusError(f"status {status}", response=response, body=None)


def _chunk(content):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class FakeStream:
    def __init__(self, chunks):
        self._chunks = list(chunks)
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._chunks:
            raise StopAsyncIteration
        return self._chunks.pop(0)

    async def close(self):
        self.closed = True


def _gateway(create: AsyncMock) -> AIGateway:
    client = MagicMock()
    client.chat.completions.create = create
    return AIGateway(api_key="k", base_url="https://gateway.test/v1", model="test-model", client=client)


class TestUpstreamErrorMapping:
    def test_rate_limit(self) -> None:
        error = upstream_error_to_api_error(_status_error(429))
        assert error.status_code == 429
        assert error.code == "RATE_LIMIT"
        assert error.error == TOO_MANY_REQUESTS_MESSAGE

    def test_payment_required(self) -> None:
        error = upstream_error_to_api_error(_status_error(402))
        assert error.status_code == 402
        assert error.code == "PAYMENT_REQUIRED"
        assert error.error == PAYMENT_REQUIRED_MESSAGE

    def test_unavailable(self) -> None:
        assert upstream_error_to_api_error(_status_error(503)).status_code == 503

    def test_other_status_is_internal(self) -> None:
        error = upstream_error_to_api_error(_status_error(400))
        assert error.status_code == 500
        assert error.code is None

    def test_connection_error(self) -> None:
        error = upstream_error_to_api_error(openai.APIConnectionError(request=REQUEST))
        assert error.status_code == 503


class TestFromSettings:
    def test_missing_key(self) -> None:
        settings = MagicMock()
        settings.AI_GATEWAY_API_KEY = None

        with pytest.raises(ApiError) as exc_info:
            AIGateway.from_settings(settings)

        assert exc_info.value.status_code == 503


class TestOpenStream:
    @pytest.mark.asyncio
    async def test_yields_non_empty_deltas_and_closes(self) -> None:
        stream = FakeStream([_chunk("Hel"), SimpleNamespace(choices=[]), _chunk(None), _chunk("lo")])
        create = AsyncMock(return_value=stream)
        gateway = _gateway(create)

        deltas = await gateway.open_stream(MESSAGES)
        received = [d async for d in deltas]

        assert received == ["Hel", "lo"]
        assert stream.closed is True
        kwargs = create.call_args.kwargs
        assert kwargs["stream"] is True
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"] == MESSAGES
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 4000

    @pytest.mark.asyncio
    async def test_refusal_raises_before_streaming(self) -> None:
        gateway = _gateway(AsyncMock(side_effect=_status_error(429)))

        with pytest.raises(ApiError) as exc_info:
            await gateway.open_stream(MESSAGES)

        assert exc_info.value.status_code == 429


class TestComplete:
    @pytest.mark.asyncio
    async def test_returns_message_content(self) -> None:
        response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="# PRD"))])
        create = AsyncMock(return_value=response)

        content = await _gateway(create).complete(MESSAGES)

        assert content == "# PRD"
        assert "stream" not in create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_no_choices(self) -> None:
        create = AsyncMock(return_value=SimpleNamespace(choices=[]))
        assert await _gateway(create).complete(MESSAGES) == ""

    @pytest.mark.asyncio
    async def test_payment_required(self) -> None:
        gateway = _gateway(AsyncMock(side_effect=_status_error(402)))

        with pytest.raises(ApiError) as exc_info:
            await gateway.complete(MESSAGES)

        assert exc_info.value.status_code == 402
