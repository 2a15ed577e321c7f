from __future__ import annotations

import json
import logging
from typing import Any

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class RedisSessionStore:
    """Redis-backed lookup of browser sessions issued by the auth provider.

    Each session is stored under ``<prefix>:session:<token>`` as a JSON object
    with at least ``user_id``, ``email`` and ``name``; expiry is the key TTL.
    """

    def __init__(
        self,
        redis_url: str,
        key_prefix: str = "auth:sessions",
        redis_client: Redis | None = None,
    ) -> None:
        self._redis = redis_client if redis_client is not None else Redis.from_url(redis_url, decode_responses=True)
        self._key_prefix = key_prefix.strip(":")

    async def ping(self) -> bool:
        return bool(await self._redis.ping())

    async def get_session(self, session_token: str) -> dict[str, Any] | None:
        value = await self._redis.get(self._session_key(session_token))
        if not value:
            return None
        try:
            payload = json.loads(value)
        except (TypeError, json.JSONDecodeError):
            logger.warning("stored session payload is not valid JSON")
            return None
        return payload if isinstance(payload, dict) else None

    async def close(self) -> None:
        await self._redis.aclose()

    def _session_key(self, session_token: str) -> str:
        return f"{self._key_prefix}:session:{session_token}"
