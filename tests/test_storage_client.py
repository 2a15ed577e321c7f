"""Unit tests for the Supabase Storage client using httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from app.services.storage_client import StorageError, SupabaseStorageClient


def _client(handler) -> SupabaseStorageClient:
    http_client = httpx.AsyncClient(
        base_url="http://storage.test/storage/v1",
        headers={"authorization": "Bearer service-key"},
        transport=httpx.MockTransport(handler),
    )
    return SupabaseStorageClient(base_url="http://unused", service_key="unused", bucket="presentation", client=http_client)


@pytest.mark.asyncio
async def test_upload_posts_bytes_to_bucket_object_path() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"Key": "presentation/1700000000000-my deck.pptx"})

    client = _client(handler)

    stored = await client.upload("1700000000000-my deck.pptx", b"deck-bytes", "application/pdf")

    assert stored == "1700000000000-my deck.pptx"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.raw_path == b"/storage/v1/object/presentation/1700000000000-my%20deck.pptx"
    assert request.headers["content-type"] == "application/pdf"
    assert request.headers["authorization"] == "Bearer service-key"
    assert request.content == b"deck-bytes"
    await client.close()


@pytest.mark.asyncio
async def test_upload_raises_storage_error_on_rejection() -> None:
    client = _client(lambda request: httpx.Response(409, json={"error": "Duplicate"}))

    with pytest.raises(StorageError) as exc:
        await client.upload("deck.pptx", b"x")

    assert exc.value.status_code == 409
    await client.close()


@pytest.mark.asyncio
async def test_download_returns_object_bytes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/storage/v1/object/presentation/deck.pptx"
        return httpx.Response(200, content=b"deck-bytes")

    client = _client(handler)

    assert await client.download("deck.pptx") == b"deck-bytes"
    await client.close()


@pytest.mark.asyncio
async def test_download_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(StorageError) as exc:
        await client.download("deck.pptx")

    assert exc.value.status_code is None
    await client.close()
