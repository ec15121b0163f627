"""Client du service d'upload Arweave.

Le service interne détient le wallet Arweave et signe les transactions; ce client
poste les octets en multipart et construit l'URL publique à partir de l'identifiant
retourné.
"""

from __future__ import annotations

import json

import httpx
import structlog

from zodiac_backend.domain.errors import StorageNetworkError
from zodiac_backend.infra.storage.base import StorageClient

log = structlog.get_logger(__name__)


class ArweaveUploaderClient(StorageClient):
    def __init__(
        self,
        uploader_url: str,
        gateway_url: str = "https://arweave.net",
        api_key: str | None = None,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.uploader_url = uploader_url.rstrip("/")
        self.gateway_url = gateway_url.rstrip("/")
        headers = {"X-API-Key": api_key} if api_key else {}
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
        )

    async def submit(
        self, data: bytes, content_type: str, tags: dict[str, str] | None = None
    ) -> str:
        files = {"file": ("data", data, content_type)}
        form = {"content_type": content_type}
        if tags:
            form["tags"] = json.dumps(tags)

        try:
            resp = await self._client.post(f"{self.uploader_url}/upload", files=files, data=form)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as exc:
            log.error(
                "arweave_upload_http_error",
                status=exc.response.status_code,
                body=exc.response.text[:200],
            )
            raise StorageNetworkError(
                "Arweave uploader returned an error",
                details={"status": exc.response.status_code},
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            log.error("arweave_upload_failed", error=str(exc))
            raise StorageNetworkError(f"Arweave upload failed: {exc}") from exc

        # Le service renvoie `tx_id` ou `transaction_id` selon sa version
        tx_id = (body.get("tx_id") or body.get("transaction_id")) if isinstance(body, dict) else None
        if not tx_id:
            raise StorageNetworkError("Arweave uploader response has no transaction id")
        log.info("arweave_upload_ok", tx_id=tx_id, size=len(data), content_type=content_type)
        return str(tx_id)

    def public_url(self, transaction_id: str) -> str:
        return f"{self.gateway_url}/{transaction_id}"

    async def aclose(self) -> None:
        await self._client.aclose()
