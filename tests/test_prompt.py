from __future__ import annotations

from app.agents.prompt import format_messages_to_prompt
from app.api.schemas.chat import UIMessage


def _message(role: str, *parts: dict) -> UIMessage:
    return UIMessage.model_validate({"id": "m", "role": role, "parts": list(parts)})


def test_single_user_message_renders_human_line() -> None:
    messages = [_message("user", {"type": "text", "text": "hi"})]

    assert format_messages_to_prompt(messages) == "Human: hi"


def test_messages_are_joined_with_blank_lines_and_text_parts_concatenated() -> None:
    messages = [
        _message("user", {"type": "text", "text": "Summarize "}, {"type": "text", "text": "slide 2"}),
        _message(
            "assistant",
            {"type": "step-start"},
            {"type": "tool-Read", "toolCallId": "t1", "state": "output-available", "input": {}, "output": "x"},
            {"type": "text", "text": "Slide 2 covers pricing."},
        ),
        _message("system", {"type": "text", "text": "be brief"}),
    ]

    assert format_messages_to_prompt(messages) == (
        "Human: Summarize slide 2\n\nAssistant: Slide 2 covers pricing.\n\nAssistant: be brief"
    )


def test_messages_without_text_are_skipped() -> None:
    messages = [
        _message("user", {"type": "text", "text": ""}),
        _message("assistant", {"type": "reasoning", "text": "thinking"}),
        _message("user", {"type": "text", "text": "next"}),
    ]

    assert format_messages_to_prompt(messages) == "Human: next"


def test_empty_history_yields_empty_prompt() -> None:
    assert format_messages_to_prompt([]) == ""
