from __future__ import annotations

from collections.abc import Sequence

from app.api.schemas.chat import UIMessage


def format_messages_to_prompt(messages: Sequence[UIMessage]) -> str:
    """Flatten the chat history into a single ``Human:``/``Assistant:`` transcript."""

    lines: list[str] = []
    for message in messages:
        role = "Human" if message.role == "user" else "Assistant"
        text = "".join(part.text or "" for part in message.parts if part.type == "text")
        if text:
            lines.append(f"{role}: {text}")
    return "\n\n".join(lines)
