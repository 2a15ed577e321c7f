import logging
from typing import Any

import asyncpg

logger = logging.getLogger(__name__)

POWERPOINTS_DDL = """
CREATE TABLE IF NOT EXISTS powerpoints (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    file_path text NOT NULL,
    file_name text NOT NULL,
    created_at timestamptz NOT NULL DEFAULT now()
)
"""


class DatabaseService:
    """asyncpg pool owning the ``powerpoints`` metadata table."""

    def __init__(
        self,
        dsn: str,
        *,
        min_pool_size: int = 1,
        max_pool_size: int = 5,
    ) -> None:
        self._dsn = dsn
        self._min_pool_size = min_pool_size
        self._max_pool_size = max_pool_size
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool is not None:
            return
        logger.info(
            "opening postgres pool",
            extra={"min_size": self._min_pool_size, "max_size": self._max_pool_size},
        )
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn,
            min_size=self._min_pool_size,
            max_size=self._max_pool_size,
        )

    async def disconnect(self) -> None:
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("postgres pool closed")

    async def ensure_schema(self) -> None:
        """Create the ``powerpoints`` table when it does not exist yet."""

        async with self._connection() as connection:
            await connection.execute(POWERPOINTS_DDL)
        logger.debug("powerpoints table ensured")

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        async with self._connection() as connection:
            return await connection.fetchrow(query, *args)

    def _connection(self):
        if self._pool is None:
            raise RuntimeError("database service is not connected")
        return self._pool.acquire()
