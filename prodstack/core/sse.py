"""Server-sent-event framing for generated document deltas.

Frames look like ``data: {"content": "..."}\\n\\n`` and the stream ends with
``data: [DONE]\\n\\n``.
"""

import codecs
import json
from collections.abc import AsyncIterable, AsyncIterator

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"
DONE_FRAME = f"{DATA_PREFIX}{DONE_SENTINEL}\n\n"


def sse_event(data: dict) -> str:
    """Format a dict as an SSE data frame."""
    return f"{DATA_PREFIX}{json.dumps(data)}\n\n"


def content_frame(delta: str) -> str:
    return sse_event({"content": delta})


class SSEDecoder:
    """Incremental decoder turning raw stream chunks into content deltas.

    Bytes that do not yet form a complete line are kept in ``_buffer`` until
    the next ``feed`` call, so frames split at any chunk boundary (including
    inside a multi-byte character) decode the same as unsplit ones.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.done = False

    def feed(self, chunk: bytes) -> list[str]:
        """Consume one chunk and return the deltas it completed, in order."""
        if self.done:
            return []
        self._buffer += self._decoder.decode(chunk)
        return self._drain(final=False)

    def close(self) -> list[str]:
        """Flush a trailing line that arrived without a newline."""
        if self.done:
            return []
        self._buffer += self._decoder.decode(b"", final=True)
        return self._drain(final=True)

    def _drain(self, final: bool) -> list[str]:
        lines = self._buffer.split("\n")
        self._buffer = "" if final else lines.pop()

        deltas: list[str] = []
        for line in lines:
            line = line.rstrip("\r")
            if not line.startswith(DATA_PREFIX):
                continue
            payload = line[len(DATA_PREFIX):]
            if payload == DONE_SENTINEL:
                self.done = True
                self._buffer = ""
                break
            try:
                parsed = json.loads(payload)
            except json.JSONDecodeError:
                # Half a frame or a keep-alive; the stream carries on
                continue
            content = parsed.get("content") if isinstance(parsed, dict) else None
            if isinstance(content, str) and content:
                deltas.append(content)
        return deltas


async def iter_sse_deltas(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield content deltas from a chunked byte stream until ``[DONE]``.

    Each chunk is fully decoded and its deltas handed to the consumer before
    the next chunk is requested from the transport.
    """
    decoder = SSEDecoder()
    async for chunk in chunks:
        for delta in decoder.feed(chunk):
            yield delta
        if decoder.done:
            return
    for delta in decoder.close():
        yield delta
