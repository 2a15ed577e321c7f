from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing
import logging
from typing import Any

from claude_agent_sdk import ClaudeAgentOptions
from claude_agent_sdk import query as claude_query

from app.agents.base import AgentQuery

logger = logging.getLogger(__name__)


class ClaudeAgentQuery(AgentQuery):
    """Agent backed by the Claude Agent SDK (spawns the Claude Code CLI per query)."""

    async def query(self, *, prompt: str, options: ClaudeAgentOptions) -> AsyncIterator[Any]:
        logger.debug(
            "starting claude agent query",
            extra={"prompt_length": len(prompt), "model": options.model, "max_turns": options.max_turns},
        )
        async with aclosing(claude_query(prompt=prompt, options=options)) as messages:
            async for message in messages:
                yield message
