from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

from claude_agent_sdk import ClaudeAgentOptions

from app.agents.base import AgentQuery
from app.agents.claude_agent import ClaudeAgentQuery
from app.agents.mock_agent import MockAgentQuery
from app.core.settings import Settings

logger = logging.getLogger(__name__)


def default_agent_options(settings: Settings) -> ClaudeAgentOptions:
    """Options every chat query starts from before per-request overrides."""

    options = ClaudeAgentOptions(
        model=settings.claude_model,
        max_turns=settings.claude_max_turns,
        allowed_tools=list(settings.claude_allowed_tools),
        include_partial_messages=True,
    )
    if settings.claude_system_prompt:
        options.system_prompt = settings.claude_system_prompt
    if settings.claude_cwd:
        options.cwd = settings.claude_cwd
    return options


def merge_agent_options(defaults: ClaudeAgentOptions, overrides: Mapping[str, Any] | None) -> ClaudeAgentOptions:
    """Shallow per-field merge; override values win, unknown field names raise ``TypeError``."""

    if not overrides:
        return dataclasses.replace(defaults)
    return dataclasses.replace(defaults, **dict(overrides))


def build_agent_query(settings: Settings) -> AgentQuery:
    """Create the chat agent with a real or file-driven mock backend."""

    if settings.chat_agent_use_mock:
        logger.info("using MockAgentQuery chat agent", extra={"messages_file": settings.chat_agent_mock_messages_file})
        return MockAgentQuery.from_file(settings.chat_agent_mock_messages_file)

    logger.info("using ClaudeAgentQuery chat agent", extra={"model": settings.claude_model})
    return ClaudeAgentQuery()
