from collections.abc import AsyncIterator
from typing import Any, Protocol

from claude_agent_sdk import ClaudeAgentOptions


class AgentQuery(Protocol):
    """Contract for agents that stream Claude Agent SDK messages for a prompt."""

    def query(self, *, prompt: str, options: ClaudeAgentOptions) -> AsyncIterator[Any]:
        """Stream agent messages (assistant, user, stream events, system, result) in arrival order."""
