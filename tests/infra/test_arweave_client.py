"""Tests du client du service d'upload Arweave (transport httpx simulé)."""

import json

import httpx
import pytest

from zodiac_backend.domain.errors import StorageNetworkError
from zodiac_backend.infra.storage.arweave_client import ArweaveUploaderClient

UPLOADER = "http://uploader.test"
HTTP_OK = 200
HTTP_SERVER_ERROR = 500


def _client(handler) -> ArweaveUploaderClient:
    return ArweaveUploaderClient(
        UPLOADER,
        gateway_url="https://gw.test/",
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_submit_posts_multipart_and_returns_tx_id() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["api_key"] = request.headers.get("X-API-Key")
        seen["body"] = request.content
        return httpx.Response(HTTP_OK, json={"tx_id": "abc"})

    client = _client(handler)
    tx_id = await client.submit(b"payload", "image/png", {"App-Name": "ZodiacAvatars"})

    assert tx_id == "abc"
    assert seen["url"] == f"{UPLOADER}/upload"
    assert seen["api_key"] == "secret"
    assert b"payload" in seen["body"]
    assert json.dumps({"App-Name": "ZodiacAvatars"}).encode() in seen["body"]
    assert client.public_url(tx_id) == "https://gw.test/abc"


@pytest.mark.asyncio
async def test_submit_accepts_transaction_id_key() -> None:
    client = _client(lambda request: httpx.Response(HTTP_OK, json={"transaction_id": "xyz"}))
    assert await client.submit(b"{}", "application/json") == "xyz"


@pytest.mark.asyncio
async def test_http_error_raises_storage_network_error() -> None:
    client = _client(lambda request: httpx.Response(HTTP_SERVER_ERROR, text="boom"))
    with pytest.raises(StorageNetworkError) as exc_info:
        await client.submit(b"x", "image/png")
    assert exc_info.value.details == {"status": HTTP_SERVER_ERROR}


@pytest.mark.asyncio
async def test_transport_error_raises_storage_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(StorageNetworkError):
        await _client(handler).submit(b"x", "image/png")


@pytest.mark.asyncio
async def test_missing_tx_id_raises() -> None:
    client = _client(lambda request: httpx.Response(HTTP_OK, json={"status": "queued"}))
    with pytest.raises(StorageNetworkError):
        await client.submit(b"x", "image/png")
