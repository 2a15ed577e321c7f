from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
import json
from typing import Any, Literal, TypedDict


class StartChunk(TypedDict):
    type: Literal["start"]
    messageId: str


class TextStartChunk(TypedDict):
    type: Literal["text-start"]
    id: str


class TextDeltaChunk(TypedDict):
    type: Literal["text-delta"]
    id: str
    delta: str


class TextEndChunk(TypedDict):
    type: Literal["text-end"]
    id: str


class ToolInputAvailableChunk(TypedDict):
    type: Literal["tool-input-available"]
    toolCallId: str
    toolName: str
    input: dict[str, Any]


class ToolOutputAvailableChunk(TypedDict):
    type: Literal["tool-output-available"]
    toolCallId: str
    output: Any


class ToolOutputErrorChunk(TypedDict):
    type: Literal["tool-output-error"]
    toolCallId: str
    errorText: str


class FinishChunk(TypedDict):
    type: Literal["finish"]


class ErrorChunk(TypedDict):
    type: Literal["error"]
    errorText: str


UIMessageChunk = (
    StartChunk
    | TextStartChunk
    | TextDeltaChunk
    | TextEndChunk
    | ToolInputAvailableChunk
    | ToolOutputAvailableChunk
    | ToolOutputErrorChunk
    | FinishChunk
    | ErrorChunk
)

UI_MESSAGE_STREAM_MEDIA_TYPE = "text/event-stream"
UI_MESSAGE_STREAM_HEADERS = {
    "x-vercel-ai-ui-message-stream": "v1",
    "cache-control": "no-cache",
    "connection": "keep-alive",
    "x-accel-buffering": "no",
}
SSE_DONE = "data: [DONE]\n\n"


def encode_sse_chunk(chunk: UIMessageChunk) -> str:
    return f"data: {json.dumps(chunk, separators=(',', ':'))}\n\n"


class ChunkStreamClosedError(RuntimeError):
    """Raised when a chunk is written after the stream was closed or its reader went away."""


_CLOSED = object()


class ChunkStream:
    """Bounded hand-off channel between one chunk producer and one reader.

    ``write`` waits while the buffer is full so a slow reader applies backpressure
    to the producer. ``close`` is idempotent and wakes the reader after every
    buffered chunk has been delivered. ``abandon`` is called from the reader side
    when it stops consuming (for example on client disconnect); further writes fail.
    """

    def __init__(self, maxsize: int = 64) -> None:
        self._queue: asyncio.Queue[UIMessageChunk | object] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._abandoned = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, chunk: UIMessageChunk) -> None:
        if self._closed or self._abandoned:
            raise ChunkStreamClosedError(f"cannot write {chunk['type']!r} chunk to a closed stream")
        await self._queue.put(chunk)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._abandoned:
            return
        await self._queue.put(_CLOSED)

    def abandon(self) -> None:
        self._abandoned = True

    async def __aiter__(self) -> AsyncIterator[UIMessageChunk]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]
