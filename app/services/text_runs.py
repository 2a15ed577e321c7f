from __future__ import annotations

from dataclasses import dataclass

from app.agents.message_mapper import text_run_id
from app.services.ui_message_stream import UIMessageChunk


@dataclass(frozen=True)
class NoActiveRun:
    pass


@dataclass(frozen=True)
class ActiveRun:
    text_id: str


TextRunState = NoActiveRun | ActiveRun


class TextRunLifecycle:
    """Brackets consecutive text deltas of one response with text-start/text-end.

    At most one run is open at a time. A run opens on the first ``text-delta``
    and closes when a ``tool-input-available`` chunk interrupts it or when
    ``close`` is called at the end of the stream.
    """

    def __init__(self, message_id: str) -> None:
        self._message_id = message_id
        self._state: TextRunState = NoActiveRun()

    @property
    def state(self) -> TextRunState:
        return self._state

    def apply(self, chunk: UIMessageChunk) -> list[UIMessageChunk]:
        """Return the chunks to forward, in order, for one derived chunk."""

        match self._state, chunk["type"]:
            case NoActiveRun(), "text-delta":
                text_id = text_run_id(self._message_id)
                self._state = ActiveRun(text_id=text_id)
                return [{"type": "text-start", "id": text_id}, {**chunk, "id": text_id}]  # type: ignore[list-item]
            case ActiveRun(text_id=text_id), "text-delta":
                return [{**chunk, "id": text_id}]  # type: ignore[list-item]
            case ActiveRun(text_id=text_id), "tool-input-available":
                self._state = NoActiveRun()
                return [{"type": "text-end", "id": text_id}, chunk]
            case _:
                return [chunk]

    def close(self) -> list[UIMessageChunk]:
        if isinstance(self._state, ActiveRun):
            text_id = self._state.text_id
            self._state = NoActiveRun()
            return [{"type": "text-end", "id": text_id}]
        return []
