from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UIMessagePart(BaseModel):
    """One part of a chat UI message.

    Only ``text`` parts are read by the backend; tool, file, reasoning and data
    parts are accepted as-is so the client can send its full history.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., description="Part discriminator, e.g. `text`, `tool-Read`, `step-start`")
    text: str | None = Field(default=None, description="Text content for `text` and `reasoning` parts")


class UIMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(default="", description="Client-side message identifier")
    role: Literal["system", "user", "assistant"] = Field(..., description="Author of the message")
    parts: list[UIMessagePart] = Field(default_factory=list, description="Ordered message parts")


class ChatRequest(BaseModel):
    """Request body posted by the chat panel; extra client fields such as `id` and `trigger` are ignored."""

    model_config = ConfigDict(extra="ignore")

    messages: list[UIMessage] = Field(..., description="Full conversation history, oldest first")
