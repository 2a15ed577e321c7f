"""Unit tests for Redis session lookups using a fake Redis client."""

from __future__ import annotations

import json

import pytest

from app.services.session_store import RedisSessionStore


class FakeRedisClient:
    """Small async fake matching Redis methods used by RedisSessionStore."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data = data or {}
        self.get_calls: list[str] = []
        self.closed = False

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> str | None:
        self.get_calls.append(key)
        return self.data.get(key)

    async def aclose(self) -> None:
        self.closed = True


@pytest.mark.asyncio
async def test_get_session_reads_prefixed_json_payload() -> None:
    payload = {"user_id": "user-a", "email": "a@example.com", "name": "A"}
    fake_redis = FakeRedisClient({"tests:sessions:session:tok-1": json.dumps(payload)})
    store = RedisSessionStore(redis_url="redis://unused:6379/0", key_prefix="tests:sessions:", redis_client=fake_redis)  # type: ignore[arg-type]

    assert await store.ping()
    assert await store.get_session("tok-1") == payload
    assert await store.get_session("missing") is None
    assert fake_redis.get_calls == ["tests:sessions:session:tok-1", "tests:sessions:session:missing"]

    await store.close()
    assert fake_redis.closed is True


@pytest.mark.asyncio
async def test_get_session_ignores_malformed_payloads() -> None:
    fake_redis = FakeRedisClient({"auth:sessions:session:bad": "{not json", "auth:sessions:session:list": "[1, 2]"})
    store = RedisSessionStore(redis_url="redis://unused:6379/0", redis_client=fake_redis)  # type: ignore[arg-type]

    assert await store.get_session("bad") is None
    assert await store.get_session("list") is None
