"""Construction et soumission de la transaction de création de NFT.

La transaction non signée (comptes mint, metadata et master edition du programme
Token Metadata) est construite par le service mint-builder; le wallet de
l'utilisateur la signe, puis elle est envoyée au nœud RPC.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog

from zodiac_backend.domain.errors import RpcError
from zodiac_backend.infra.solana.rpc_client import SolanaRpcClient

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UnsignedMint:
    transaction: str  # base64, signature du mint déjà apposée par le builder
    mint_address: str
    token_account: str


class NFTProgramClient:
    def __init__(
        self,
        builder_url: str,
        rpc: SolanaRpcClient,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.builder_url = builder_url.rstrip("/")
        self.rpc = rpc
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def build_create_nft(
        self,
        *,
        owner: str,
        uri: str,
        name: str,
        symbol: str,
        seller_fee_basis_points: int,
    ) -> UnsignedMint:
        body = {
            "owner": owner,
            "uri": uri,
            "name": name,
            "symbol": symbol,
            "sellerFeeBasisPoints": seller_fee_basis_points,
            "commitment": self.rpc.commitment,
        }
        try:
            resp = await self._client.post(f"{self.builder_url}/create-nft", json=body)
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException as exc:
            raise RpcError("Mint builder timeout") from exc
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:200]
            raise RpcError(f"Mint builder error: {detail}") from exc
        except httpx.HTTPError as exc:
            raise RpcError(f"Mint builder network error: {exc}") from exc
        except ValueError as exc:
            raise RpcError("Invalid mint builder response") from exc

        try:
            mint_address = data["mint"]
            return UnsignedMint(
                transaction=data["transaction"],
                mint_address=mint_address,
                token_account=data.get("tokenAccount") or mint_address,
            )
        except (KeyError, TypeError) as exc:
            raise RpcError("Mint builder response is missing fields") from exc

    async def submit(self, signed_transaction: str) -> str:
        signature = await self.rpc.send_transaction(signed_transaction)
        log.info("nft_transaction_sent", signature=signature)
        await self.rpc.confirm(signature)
        return signature

    async def aclose(self) -> None:
        await self._client.aclose()
