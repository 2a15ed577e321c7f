from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import asyncpg

from app.api.schemas.auth import SessionPrincipal
from app.api.schemas.chat import UIMessage
from app.api.schemas.presentations import Presentation
from app.services.chat_service import ChatStreamHandle


class DatabaseServiceProtocol(Protocol):
    """Abstraction for async SQL execution against the application Postgres store."""

    async def connect(self) -> None:
        """Initialize underlying DB resources before request handling begins."""

    async def disconnect(self) -> None:
        """Release open DB resources during application shutdown."""

    async def fetchrow(self, query: str, *args: object) -> asyncpg.Record | None:
        """Execute a query and return a single row, or ``None`` when no row matches."""

    async def ensure_schema(self) -> None:
        """Create the tables this service reads and writes when they are missing."""


class BlobStoreProtocol(Protocol):
    """Opaque binary object store keyed by path."""

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        """Store ``content`` at ``path`` and return the stored object path."""

    async def download(self, path: str) -> bytes:
        """Return the bytes stored at ``path``."""

    async def close(self) -> None:
        """Release underlying network resources during shutdown."""


class PresentationServiceProtocol(Protocol):
    """Uploaded slide-deck records and their stored files."""

    async def create_presentation(self, *, file_path: str, file_name: str) -> Presentation:
        """Insert a presentation record for an already stored file."""

    async def get_presentation(self, presentation_id: str) -> Presentation | None:
        """Load one presentation record, or ``None`` when it does not exist."""

    async def upload_presentation(self, *, file_name: str, content: bytes, content_type: str | None = None) -> Presentation:
        """Store the file in the blob store, then create its record."""

    async def download_presentation(self, presentation_id: str) -> tuple[Presentation, bytes] | None:
        """Return the record and stored bytes, or ``None`` when the record does not exist."""


class SessionStoreProtocol(Protocol):
    """Read access to browser sessions written by the upstream auth provider."""

    async def ping(self) -> bool:
        """Probe store availability during startup checks."""

    async def get_session(self, session_token: str) -> dict[str, Any] | None:
        """Return the stored session payload for a token, or ``None`` if missing/expired."""

    async def close(self) -> None:
        """Release underlying network resources during shutdown."""


class AuthServiceProtocol(Protocol):
    """Resolves the caller's session from request headers."""

    async def session_from_headers(self, headers: Mapping[str, str]) -> SessionPrincipal | None:
        """Return the authenticated principal, or ``None`` for anonymous requests."""


class ChatServiceProtocol(Protocol):
    """Chat orchestration contract used by the streaming chat endpoint."""

    def start_stream(self, messages: Sequence[UIMessage], overrides: Mapping[str, Any] | None = None) -> ChatStreamHandle:
        """Start producing a response in the background and return its readable handle immediately."""
