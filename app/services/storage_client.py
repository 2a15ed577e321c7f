from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the object store rejects an upload or download."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SupabaseStorageClient:
    """Supabase Storage REST client scoped to one bucket."""

    def __init__(
        self,
        *,
        base_url: str,
        service_key: str,
        bucket: str,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._bucket = bucket
        self._client = client or httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/storage/v1",
            headers={
                "apikey": service_key,
                "authorization": f"Bearer {service_key}",
            },
            timeout=timeout_seconds,
        )

    def _object_url(self, path: str) -> str:
        return f"/object/{quote(self._bucket, safe='')}/{quote(path.lstrip('/'))}"

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        headers = {
            "content-type": content_type or "application/octet-stream",
            "x-upsert": "false",
        }
        try:
            response = await self._client.post(self._object_url(path), content=content, headers=headers)
        except httpx.HTTPError as exc:
            raise StorageError(f"upload to storage failed: {exc}") from exc

        if response.is_error:
            logger.warning(
                "storage upload rejected",
                extra={"path": path, "status_code": response.status_code, "body": response.text[:200]},
            )
            raise StorageError("Upload to storage failed", status_code=response.status_code)

        logger.info("stored object", extra={"path": path, "bytes": len(content)})
        return path

    async def download(self, path: str) -> bytes:
        try:
            response = await self._client.get(self._object_url(path))
        except httpx.HTTPError as exc:
            raise StorageError(f"download from storage failed: {exc}") from exc

        if response.is_error:
            logger.warning("storage download rejected", extra={"path": path, "status_code": response.status_code})
            raise StorageError("Download from storage failed", status_code=response.status_code)
        return response.content

    async def close(self) -> None:
        await self._client.aclose()
