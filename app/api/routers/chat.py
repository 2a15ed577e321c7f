from collections.abc import AsyncIterator
import logging

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from app.api.schemas.chat import ChatRequest
from app.dependency_injection import get_container
from app.services.chat_service import ChatStreamHandle
from app.services.contracts import ChatServiceProtocol
from app.services.ui_message_stream import (
    SSE_DONE,
    UI_MESSAGE_STREAM_HEADERS,
    UI_MESSAGE_STREAM_MEDIA_TYPE,
    encode_sse_chunk,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["chat"])


async def _sse_body(handle: ChatStreamHandle) -> AsyncIterator[str]:
    try:
        async for chunk in handle:
            yield encode_sse_chunk(chunk)
        yield SSE_DONE
    finally:
        # Runs on normal completion and when the client disconnects mid-stream.
        await handle.aclose()


@router.post(
    "/ai",
    summary="Stream an assistant reply as a UI message stream",
    description=(
        "Formats the conversation into a prompt, runs the Claude agent and streams typed UI chunks "
        "(start, text-*, tool-*, finish/error) as server-sent events terminated by `[DONE]`."
    ),
)
async def chat(payload: ChatRequest, request: Request) -> StreamingResponse:
    chat_service = get_container(request).resolve(ChatServiceProtocol)
    handle = chat_service.start_stream(payload.messages)
    logger.info(
        "assistant chat request",
        extra={"message_id": handle.message_id, "history_length": len(payload.messages)},
    )
    return StreamingResponse(
        _sse_body(handle),
        media_type=UI_MESSAGE_STREAM_MEDIA_TYPE,
        headers=UI_MESSAGE_STREAM_HEADERS,
    )
