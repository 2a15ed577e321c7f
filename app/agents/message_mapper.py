"""Translate Claude Agent SDK messages into AI SDK UI message chunks.

Every function here is pure: the same upstream message always maps to the
same chunks. Text-run bracketing (``text-start``/``text-end``) is not decided
here; see ``app.services.text_runs``.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from claude_agent_sdk import (
    AssistantMessage,
    ResultMessage,
    SystemMessage,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)
from claude_agent_sdk.types import StreamEvent

from app.services.ui_message_stream import (
    TextDeltaChunk,
    ToolInputAvailableChunk,
    ToolOutputAvailableChunk,
    ToolOutputErrorChunk,
    UIMessageChunk,
)

logger = logging.getLogger(__name__)

TOOL_ERROR_FALLBACK = "Tool execution failed"


def text_run_id(message_id: str) -> str:
    return f"{message_id}-text"


def map_agent_message(message: Any, message_id: str) -> list[UIMessageChunk]:
    match message:
        case AssistantMessage(content=content):
            return _map_assistant_content(content, message_id)
        case UserMessage(content=content):
            return _map_user_content(content)
        case StreamEvent(event=event):
            return _map_stream_event(event, message_id)
        case ResultMessage() | SystemMessage():
            return []
        case _:
            logger.debug("ignoring unrecognized agent message", extra={"message_type": type(message).__name__})
            return []


def _map_assistant_content(content: Any, message_id: str) -> list[UIMessageChunk]:
    if not isinstance(content, list):
        return []

    chunks: list[UIMessageChunk] = []
    for block in content:
        match block:
            case TextBlock(text=text):
                if text:
                    chunks.append(_text_delta(text, message_id))
            case ToolUseBlock(id=tool_call_id, name=tool_name, input=tool_input):
                chunks.append(_tool_input(tool_call_id, tool_name, tool_input))
            case _:
                logger.debug("ignoring assistant content block", extra={"block_type": type(block).__name__})
    return chunks


def _map_user_content(content: Any) -> list[UIMessageChunk]:
    # Plain-string user content carries no tool results.
    if not isinstance(content, list):
        return []

    chunks: list[UIMessageChunk] = []
    for block in content:
        if isinstance(block, ToolResultBlock):
            chunks.append(_tool_result(block))
    return chunks


def _map_stream_event(event: Any, message_id: str) -> list[UIMessageChunk]:
    if not isinstance(event, Mapping) or event.get("type") != "content_block_delta":
        return []

    delta = event.get("delta")
    if not isinstance(delta, Mapping) or delta.get("type") != "text_delta":
        return []

    return [_text_delta(str(delta.get("text", "")), message_id)]


def _text_delta(text: str, message_id: str) -> TextDeltaChunk:
    return {"type": "text-delta", "id": text_run_id(message_id), "delta": text}


def _tool_input(tool_call_id: str, tool_name: str, tool_input: dict[str, Any] | None) -> ToolInputAvailableChunk:
    return {
        "type": "tool-input-available",
        "toolCallId": tool_call_id,
        "toolName": tool_name,
        "input": tool_input or {},
    }


def _tool_result(block: ToolResultBlock) -> ToolOutputAvailableChunk | ToolOutputErrorChunk:
    if block.is_error:
        return {
            "type": "tool-output-error",
            "toolCallId": block.tool_use_id,
            "errorText": format_tool_error(block.content),
        }
    return {
        "type": "tool-output-available",
        "toolCallId": block.tool_use_id,
        "output": format_tool_output(block.content),
    }


def format_tool_output(content: Any) -> Any:
    return "" if content is None else content


def format_tool_error(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, Mapping) and "error" in content:
        return str(content["error"])
    return TOOL_ERROR_FALLBACK
