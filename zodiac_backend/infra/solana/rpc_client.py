"""Client JSON-RPC Solana minimal (httpx).

Seules les méthodes utilisées par le mint sont exposées: solde, envoi d'une
transaction signée et suivi de confirmation. Les erreurs du nœud et du transport
sont remontées en `RpcError` avec le message d'origine, que l'orchestrateur classe
ensuite par sous-chaîne.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Any

import httpx
import structlog

from zodiac_backend.domain.errors import RpcError

log = structlog.get_logger(__name__)

CLUSTER_ENDPOINTS = {
    "devnet": "https://api.devnet.solana.com",
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
}


def cluster_endpoint(network: str, override: str | None = None) -> str:
    """Endpoint RPC: URL explicite si fournie, sinon celle du cluster public."""
    if override:
        return override
    try:
        return CLUSTER_ENDPOINTS[network]
    except KeyError as err:
        raise ValueError(f"Unknown Solana network: {network}") from err


class SolanaRpcClient:
    def __init__(
        self,
        endpoint: str,
        commitment: str = "confirmed",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.commitment = commitment
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            resp = await self._client.post(self.endpoint, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.TimeoutException as exc:
            raise RpcError(f"Solana RPC timeout on {method}") from exc
        except httpx.HTTPError as exc:
            raise RpcError(f"Solana RPC network error on {method}: {exc}") from exc
        except ValueError as exc:
            raise RpcError(f"Invalid JSON-RPC response for {method}") from exc

        if "error" in body:
            error = body["error"] or {}
            message = error.get("message", "unknown RPC error")
            log.warning("solana_rpc_error", method=method, code=error.get("code"), message=message)
            raise RpcError(message, details={"code": error.get("code"), "method": method})
        return body.get("result")

    async def get_balance(self, address: str) -> int:
        """Solde en lamports."""
        result = await self._call("getBalance", [address, {"commitment": self.commitment}])
        return int(result["value"])

    async def send_transaction(self, signed_transaction: str) -> str:
        """Envoie une transaction signée (base64) et retourne sa signature."""
        return await self._call(
            "sendTransaction",
            [
                signed_transaction,
                {"encoding": "base64", "preflightCommitment": self.commitment},
            ],
        )

    async def confirm(self, signature: str, attempts: int = 30, delay: float = 1.0) -> None:
        """Attend la confirmation; lève `RpcError` si la transaction échoue ou expire."""
        for _ in range(attempts):
            result = await self._call(
                "getSignatureStatuses", [[signature], {"searchTransactionHistory": False}]
            )
            status = (result or {}).get("value", [None])[0]
            if status:
                if status.get("err"):
                    raise RpcError(f"Transaction failed: {status['err']}")
                if status.get("confirmationStatus") in ("confirmed", "finalized"):
                    return
            await asyncio.sleep(delay)
        raise RpcError(f"Transaction confirmation timeout for {signature}")

    async def aclose(self) -> None:
        await self._client.aclose()
