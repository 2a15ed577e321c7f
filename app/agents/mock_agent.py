from __future__ import annotations

from collections.abc import AsyncIterator
import logging
from pathlib import Path
import re
from typing import Any
import uuid

from claude_agent_sdk import AssistantMessage, ClaudeAgentOptions, ResultMessage, TextBlock
from claude_agent_sdk.types import StreamEvent

from app.agents.base import AgentQuery

logger = logging.getLogger(__name__)

MOCK_MESSAGE_DELIMITER = "\n\n--- message ---\n\n"
_MOCK_MODEL = "mock-agent"
_MOCK_SESSION_ID = "mock-session"


def load_mock_messages(messages_file: str) -> list[str]:
    path = Path(messages_file)
    raw_content = path.read_text(encoding="utf-8")
    parsed_messages = [chunk.strip() for chunk in raw_content.split(MOCK_MESSAGE_DELIMITER)]
    messages = [message for message in parsed_messages if message]
    if not messages:
        raise ValueError(
            f"No mock messages found in {path}. Use delimiter {MOCK_MESSAGE_DELIMITER!r} between messages."
        )
    return messages


class MockAgentQuery(AgentQuery):
    """File-driven mock agent that cycles through predefined responses.

    With partial messages enabled each response is streamed word by word as
    ``content_block_delta`` events; otherwise it arrives as one assistant message.
    """

    def __init__(self, responses: list[str]) -> None:
        if not responses:
            raise ValueError("MockAgentQuery requires at least one response")
        self._responses = responses
        self._next_index = 0

    @classmethod
    def from_file(cls, messages_file: str) -> MockAgentQuery:
        responses = load_mock_messages(messages_file)
        logger.info("loaded mock agent messages", extra={"messages_count": len(responses)})
        return cls(responses)

    async def query(self, *, prompt: str, options: ClaudeAgentOptions) -> AsyncIterator[Any]:
        logger.debug("serving mock agent response", extra={"prompt_length": len(prompt)})
        response = self._responses[self._next_index]
        self._next_index = (self._next_index + 1) % len(self._responses)

        if options.include_partial_messages:
            for piece in re.findall(r"\S+\s*|\s+", response):
                yield StreamEvent(
                    uuid=str(uuid.uuid4()),
                    session_id=_MOCK_SESSION_ID,
                    event={"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": piece}},
                )
        else:
            yield AssistantMessage(content=[TextBlock(text=response)], model=_MOCK_MODEL)

        yield ResultMessage(
            subtype="success",
            duration_ms=0,
            duration_api_ms=0,
            is_error=False,
            num_turns=1,
            session_id=_MOCK_SESSION_ID,
            result=response,
        )
