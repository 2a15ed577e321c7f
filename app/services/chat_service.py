from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Mapping, Sequence
import logging
import secrets
import string
import time
from typing import Any

from claude_agent_sdk import ClaudeAgentOptions

from app.agents.base import AgentQuery
from app.agents.factory import merge_agent_options
from app.agents.message_mapper import map_agent_message
from app.agents.prompt import format_messages_to_prompt
from app.api.schemas.chat import UIMessage
from app.services.text_runs import TextRunLifecycle
from app.services.ui_message_stream import ChunkStream, ChunkStreamClosedError, UIMessageChunk

logger = logging.getLogger(__name__)

STREAM_FAILED_FALLBACK = "Stream failed"
_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_message_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"msg_{int(time.time() * 1000)}_{suffix}"


class ChatStreamHandle:
    """Read half of one response stream plus the task producing it."""

    def __init__(self, *, message_id: str, stream: ChunkStream, task: asyncio.Task[None]) -> None:
        self.message_id = message_id
        self._stream = stream
        self._task = task

    @property
    def task(self) -> asyncio.Task[None]:
        return self._task

    async def __aiter__(self) -> AsyncIterator[UIMessageChunk]:
        async for chunk in self._stream:
            yield chunk

    async def aclose(self) -> None:
        """Stop reading; the producer is cancelled if it is still running."""

        self._stream.abandon()
        if not self._task.done():
            self._task.cancel()


class ChatService:
    """Use-case service streaming Claude agent responses as UI message chunks."""

    def __init__(
        self,
        agent: AgentQuery,
        default_options: ClaudeAgentOptions,
        *,
        max_duration_seconds: float | None = 30.0,
        buffer_size: int = 64,
    ) -> None:
        self._agent = agent
        self._default_options = default_options
        self._max_duration_seconds = max_duration_seconds
        self._buffer_size = buffer_size

    def start_stream(
        self,
        messages: Sequence[UIMessage],
        overrides: Mapping[str, Any] | None = None,
    ) -> ChatStreamHandle:
        message_id = generate_message_id()
        stream = ChunkStream(maxsize=self._buffer_size)
        task = asyncio.create_task(
            self._produce(message_id=message_id, messages=messages, overrides=overrides, stream=stream),
            name=f"chat-stream-{message_id}",
        )
        return ChatStreamHandle(message_id=message_id, stream=stream, task=task)

    async def _produce(
        self,
        *,
        message_id: str,
        messages: Sequence[UIMessage],
        overrides: Mapping[str, Any] | None,
        stream: ChunkStream,
    ) -> None:
        text_runs = TextRunLifecycle(message_id)
        upstream: AsyncIterator[Any] | None = None
        deadline = asyncio.timeout(self._max_duration_seconds)
        try:
            await stream.write({"type": "start", "messageId": message_id})
            prompt = format_messages_to_prompt(messages)
            options = merge_agent_options(self._default_options, overrides)
            logger.info(
                "starting chat stream",
                extra={"message_id": message_id, "history_length": len(messages), "model": options.model},
            )

            upstream = aiter(self._agent.query(prompt=prompt, options=options))
            async with deadline:
                async for message in upstream:
                    for chunk in map_agent_message(message, message_id):
                        for forwarded in text_runs.apply(chunk):
                            await stream.write(forwarded)

            for chunk in text_runs.close():
                await stream.write(chunk)
            await stream.write({"type": "finish"})
            logger.debug("chat stream finished", extra={"message_id": message_id})
        except ChunkStreamClosedError:
            logger.info("chat stream reader went away", extra={"message_id": message_id})
        except asyncio.CancelledError:
            logger.info("chat stream cancelled", extra={"message_id": message_id})
        except Exception as exc:
            logger.exception("chat stream failed", extra={"message_id": message_id})
            await self._write_failure(stream, text_runs, exc, deadline_expired=deadline.expired())
        finally:
            await _close_upstream(upstream)
            await stream.close()

    async def _write_failure(
        self,
        stream: ChunkStream,
        text_runs: TextRunLifecycle,
        exc: Exception,
        *,
        deadline_expired: bool,
    ) -> None:
        error_text = str(exc) or STREAM_FAILED_FALLBACK
        if deadline_expired:
            error_text = f"Assistant response exceeded {self._max_duration_seconds:g} seconds"
        try:
            for chunk in text_runs.close():
                await stream.write(chunk)
            await stream.write({"type": "error", "errorText": error_text})
        except ChunkStreamClosedError:
            logger.info("chat stream reader went away before error was delivered")


async def _close_upstream(upstream: AsyncIterator[Any] | None) -> None:
    aclose = getattr(upstream, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception:
        logger.warning("closing agent message stream failed", exc_info=True)
