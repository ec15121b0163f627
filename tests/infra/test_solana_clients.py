"""Tests des clients Solana: JSON-RPC et service mint-builder (transport simulé)."""

import json

import httpx
import pytest

from zodiac_backend.domain.errors import RpcError
from zodiac_backend.infra.solana.nft_program import NFTProgramClient
from zodiac_backend.infra.solana.rpc_client import SolanaRpcClient, cluster_endpoint

RPC_URL = "http://rpc.test"
BUILDER_URL = "http://builder.test"
HTTP_OK = 200
BALANCE = 2_500_000


def _rpc(handler) -> SolanaRpcClient:
    return SolanaRpcClient(RPC_URL, transport=httpx.MockTransport(handler))


def test_cluster_endpoint() -> None:
    assert cluster_endpoint("devnet") == "https://api.devnet.solana.com"
    assert cluster_endpoint("mainnet-beta", "https://my.rpc") == "https://my.rpc"
    with pytest.raises(ValueError):
        cluster_endpoint("testnet-x")


@pytest.mark.asyncio
async def test_get_balance() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert body["method"] == "getBalance"
        return httpx.Response(HTTP_OK, json={"jsonrpc": "2.0", "id": body["id"], "result": {"value": BALANCE}})

    assert await _rpc(handler).get_balance("Wallet1") == BALANCE


@pytest.mark.asyncio
async def test_rpc_error_keeps_node_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            HTTP_OK,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32002, "message": "Blockhash not found"}},
        )

    with pytest.raises(RpcError) as exc_info:
        await _rpc(handler).send_transaction("dHg=")
    assert exc_info.value.message == "Blockhash not found"


@pytest.mark.asyncio
async def test_rpc_timeout_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(RpcError) as exc_info:
        await _rpc(handler).get_balance("Wallet1")
    assert "timeout" in exc_info.value.message


@pytest.mark.asyncio
async def test_confirm_until_confirmed() -> None:
    statuses = iter([None, {"confirmationStatus": "processed", "err": None}, {"confirmationStatus": "confirmed", "err": None}])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(HTTP_OK, json={"jsonrpc": "2.0", "id": 1, "result": {"value": [next(statuses)]}})

    await _rpc(handler).confirm("sig", attempts=5, delay=0)


@pytest.mark.asyncio
async def test_confirm_reports_failed_transaction() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            HTTP_OK,
            json={"jsonrpc": "2.0", "id": 1, "result": {"value": [{"err": {"InstructionError": [0, "Custom"]}}]}},
        )

    with pytest.raises(RpcError):
        await _rpc(handler).confirm("sig", attempts=1, delay=0)


@pytest.mark.asyncio
async def test_confirm_times_out() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(HTTP_OK, json={"jsonrpc": "2.0", "id": 1, "result": {"value": [None]}})

    with pytest.raises(RpcError) as exc_info:
        await _rpc(handler).confirm("sig", attempts=2, delay=0)
    assert "timeout" in exc_info.value.message


@pytest.mark.asyncio
async def test_nft_program_build_and_submit() -> None:
    def builder(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert str(request.url) == f"{BUILDER_URL}/create-nft"
        assert body["symbol"] == "ZODIAC"
        assert body["sellerFeeBasisPoints"] == 500
        return httpx.Response(HTTP_OK, json={"transaction": "dHg=", "mint": "Mint1"})

    def node(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body["method"] == "sendTransaction":
            return httpx.Response(HTTP_OK, json={"jsonrpc": "2.0", "id": 1, "result": "sig1"})
        status = {"confirmationStatus": "finalized", "err": None}
        return httpx.Response(HTTP_OK, json={"jsonrpc": "2.0", "id": 1, "result": {"value": [status]}})

    program = NFTProgramClient(BUILDER_URL, _rpc(node), transport=httpx.MockTransport(builder))
    unsigned = await program.build_create_nft(
        owner="Owner1", uri="https://arweave.net/tx", name="Leo", symbol="ZODIAC", seller_fee_basis_points=500
    )
    assert unsigned.mint_address == "Mint1"
    assert unsigned.token_account == "Mint1"
    assert await program.submit("dHg=:signed") == "sig1"


@pytest.mark.asyncio
async def test_nft_program_incomplete_response() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(HTTP_OK, json={"mint": "Mint1"}))
    program = NFTProgramClient(BUILDER_URL, _rpc(lambda r: httpx.Response(HTTP_OK)), transport=transport)
    with pytest.raises(RpcError):
        await program.build_create_nft(
            owner="o", uri="u", name="n", symbol="s", seller_fee_basis_points=0
        )
