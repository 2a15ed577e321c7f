"""Shared test utilities and fixtures for backend tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any
import uuid

import pytest
import punq

from app.core.settings import Settings

PRESENTATION_ID = uuid.UUID("5b0f7c43-8a0e-4f7e-9d55-0c1f0e6a2b11")
PRESENTATION_CREATED_AT = datetime(2026, 2, 19, 12, 30, tzinfo=UTC)


class FakeDatabaseService:
    """Shared fake DB service used at the external DB boundary in unit tests."""

    def __init__(self, rows: dict[str, dict[str, Any]] | None = None) -> None:
        self.rows: dict[str, dict[str, Any]] = rows if rows is not None else {}
        self.fetchrow_calls: list[tuple[str, tuple]] = []
        self.schema_ensured = False

    async def fetchrow(self, query: str, *args):
        self.fetchrow_calls.append((query, args))
        if "INSERT INTO powerpoints" in query:
            row = {
                "id": PRESENTATION_ID,
                "file_path": args[0],
                "file_name": args[1],
                "created_at": PRESENTATION_CREATED_AT,
            }
            self.rows[str(row["id"])] = row
            return row
        if "FROM powerpoints WHERE id = $1::uuid" in query:
            return self.rows.get(args[0])
        return None

    async def ensure_schema(self) -> None:
        self.schema_ensured = True


class FakeBlobStore:
    """In-memory blob store keyed by object path."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str | None] = {}

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        self.objects[path] = content
        self.content_types[path] = content_type
        return path

    async def download(self, path: str) -> bytes:
        return self.objects[path]

    async def close(self) -> None:
        return None


class FakeAgentQuery:
    """Agent double that replays a fixed message script and records each query."""

    def __init__(self, messages: list[Any], *, error: Exception | None = None) -> None:
        self._messages = messages
        self._error = error
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    async def query(self, *, prompt: str, options) -> AsyncIterator[Any]:
        self.calls.append((prompt, options))
        try:
            for message in self._messages:
                yield message
            if self._error is not None:
                raise self._error
        finally:
            self.closed = True


@pytest.fixture
def fake_database_service() -> FakeDatabaseService:
    return FakeDatabaseService()


@pytest.fixture
def fake_blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def test_settings() -> Settings:
    return Settings()


def build_test_request(container: punq.Container, *, headers: dict[str, str] | None = None):
    """Build a request-shaped object using a real punq container in app state."""

    return SimpleNamespace(
        app=SimpleNamespace(state=SimpleNamespace(container=container)),
        headers=headers or {},
    )


def build_test_container(bindings: dict[object, object]) -> punq.Container:
    """Create a punq container and bind protocol/service keys to test doubles."""

    container = punq.Container()
    for key, value in bindings.items():
        container.register(key, instance=value)
    return container
