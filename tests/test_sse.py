"""Tests for SSE frame encoding and incremental decoding."""

import pytest

from prodstack.core.sse import DONE_FRAME, SSEDecoder, content_frame, iter_sse_deltas

STREAM = b'data: {"content":"A"}\n\ndata: {"content":"B"}\n\ndata: [DONE]\n\n'


async def _chunks(*parts: bytes):
    for part in parts:
        yield part


async def _collect(*parts: bytes) -> list[str]:
    return [delta async for delta in iter_sse_deltas(_chunks(*parts))]


class TestSSEDecoder:
    def test_single_chunk(self) -> None:
        decoder = SSEDecoder()
        assert decoder.feed(STREAM) == ["A", "B"]
        assert decoder.done is True

    def test_every_split_point(self) -> None:
        """Any two-way split of the stream yields the same deltas."""
        for i in range(len(STREAM) + 1):
            decoder = SSEDecoder()
            deltas = decoder.feed(STREAM[:i]) + decoder.feed(STREAM[i:])
            assert deltas == ["A", "B"], f"split at {i}"
            assert decoder.done is True

    def test_byte_at_a_time(self) -> None:
        decoder = SSEDecoder()
        deltas = []
        for i in range(len(STREAM)):
            deltas.extend(decoder.feed(STREAM[i : i + 1]))
        assert deltas == ["A", "B"]

    def test_multibyte_character_split(self) -> None:
        raw = 'data: {"content": "café"}\n\n'.encode()
        cut = raw.index("é".encode()) + 1
        decoder = SSEDecoder()
        assert decoder.feed(raw[:cut]) + decoder.feed(raw[cut:]) == ["café"]

    def test_nothing_after_done(self) -> None:
        decoder = SSEDecoder()
        decoder.feed(b'data: [DONE]\n\ndata: {"content":"late"}\n\n')
        assert decoder.feed(b'data: {"content":"later"}\n\n') == []

    def test_malformed_json_skipped(self) -> None:
        decoder = SSEDecoder()
        deltas = decoder.feed(b'data: {"content":\n\ndata: {"content":"ok"}\n\n')
        assert deltas == ["ok"]

    def test_non_data_lines_ignored(self) -> None:
        decoder = SSEDecoder()
        deltas = decoder.feed(b': keep-alive\nevent: message\ndata: {"content":"x"}\r\n\r\n')
        assert deltas == ["x"]

    def test_payload_without_content(self) -> None:
        decoder = SSEDecoder()
        assert decoder.feed(b'data: {"type":"ping"}\n\ndata: []\n\n') == []

    def test_close_flushes_unterminated_line(self) -> None:
        decoder = SSEDecoder()
        assert decoder.feed(b'data: {"content":"tail"}') == []
        assert decoder.close() == ["tail"]


class TestFrames:
    def test_content_frame_round_trips(self) -> None:
        frame = content_frame('line "one"\nline two')
        assert frame.endswith("\n\n")
        assert SSEDecoder().feed(frame.encode()) == ['line "one"\nline two']

    def test_done_frame(self) -> None:
        assert DONE_FRAME == "data: [DONE]\n\n"


class TestIterSSEDeltas:
    @pytest.mark.asyncio
    async def test_arbitrary_chunking(self) -> None:
        assert await _collect(STREAM[:3], STREAM[3:25], STREAM[25:40], STREAM[40:]) == ["A", "B"]

    @pytest.mark.asyncio
    async def test_stops_at_done_without_reading_further(self) -> None:
        pulled = []

        async def chunks():
            for part in (b'data: {"content":"A"}\n\n', b"data: [DONE]\n\n", b'data: {"content":"Z"}\n\n'):
                pulled.append(part)
                yield part

        deltas = [d async for d in iter_sse_deltas(chunks())]
        assert deltas == ["A"]
        assert len(pulled) == 2

    @pytest.mark.asyncio
    async def test_stream_ending_without_done(self) -> None:
        assert await _collect(b'data: {"content":"A"}\n\n', b'data: {"content":"B"}') == ["A", "B"]

    @pytest.mark.asyncio
    async def test_empty_stream(self) -> None:
        assert await _collect(b"data: [DONE]\n\n") == []
