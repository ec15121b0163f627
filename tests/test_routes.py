"""Tests des routes HTTP (TestClient) avec les services branchés sur des fakes."""

import base64

import pytest
from fastapi.testclient import TestClient

from tests.fakes import (
    CHARACTER_JSON,
    VALID_WALLET,
    FakeImageGenerator,
    FakeLLM,
    FakeRpc,
    FakeStorage,
)
from zodiac_backend.api import routes_avatar, routes_mint, routes_publish
from zodiac_backend.app.main import app
from zodiac_backend.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_OK,
)
from zodiac_backend.domain.avatar_generator import AvatarContentGenerator
from zodiac_backend.domain.errors import GenerationFailedError
from zodiac_backend.domain.mint_orchestrator import MintOrchestrator
from zodiac_backend.domain.publisher import MAX_UPLOAD_BYTES, ContentPublisher

LOW_BALANCE = 1_000_000
LEO_DAY_OF_YEAR_1996 = 205


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def fake_storage(monkeypatch) -> FakeStorage:
    storage = FakeStorage()
    monkeypatch.setattr(routes_publish, "publisher", ContentPublisher(storage))
    return storage


@pytest.fixture
def fake_generator(monkeypatch) -> AvatarContentGenerator:
    generator = AvatarContentGenerator(FakeLLM(CHARACTER_JSON, "A cosmic soul."), FakeImageGenerator())
    monkeypatch.setattr(routes_avatar, "generator", generator)
    return generator


def _use_rpc(monkeypatch, rpc: FakeRpc) -> None:
    def orchestrator_for(network):
        return MintOrchestrator(rpc, None, None, None, network=network)  # type: ignore[arg-type]

    monkeypatch.setattr(routes_mint, "orchestrator_for", orchestrator_for)


# --- zodiac ---------------------------------------------------------------


def test_zodiac_endpoint(client) -> None:
    r = client.get("/api/zodiac", params={"date": "1996-07-23"})
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["sign"] == "Leo"
    assert body["modality"] == "Fixed"
    assert body["birthDateMetadata"]["dayOfYear"] == LEO_DAY_OF_YEAR_1996
    assert body["rarityFactors"]["elementBalance"] == pytest.approx(0.7)
    assert body["rarityScore"] == pytest.approx(0.7)


def test_zodiac_endpoint_invalid_date(client) -> None:
    r = client.get("/api/zodiac", params={"date": "1997-02-29"})
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["code"] == "INVALID_DATE"
    assert "error" in r.json()


# --- avatar ---------------------------------------------------------------


def test_generate_avatar_from_sign(client, fake_generator) -> None:
    r = client.post("/api/generate-avatar", json={"zodiacSign": "Leo", "userPreferences": "golden"})
    assert r.status_code == HTTP_OK
    avatar = r.json()["avatar"]
    assert avatar["zodiacSign"] == "Leo"
    assert avatar["rarityScore"] == pytest.approx(48.0)
    assert avatar["characterPrompt"]["mainPrompt"].startswith("A radiant lion")
    assert avatar["attributes"][0] == {"trait_type": "Zodiac Sign", "value": "Leo", "rarity": None}


def test_generate_avatar_with_birth_date(client, fake_generator) -> None:
    r = client.post("/api/generate-avatar", json={"zodiacSign": "Leo", "birthDate": "1996-07-23"})
    assert r.status_code == HTTP_OK
    assert r.json()["avatar"]["rarityScore"] == pytest.approx(64.0)


def test_generate_avatar_sign_date_mismatch(client, fake_generator) -> None:
    r = client.post("/api/generate-avatar", json={"zodiacSign": "Aries", "birthDate": "1996-07-23"})
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["details"]["expected"] == "Leo"


@pytest.mark.parametrize("payload", [{}, {"zodiacSign": "Dragon"}, {"zodiacSign": ""}])
def test_generate_avatar_bad_sign(client, fake_generator, payload) -> None:
    r = client.post("/api/generate-avatar", json=payload)
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["code"] == "INVALID_INPUT"


def test_generate_avatar_failure_is_500(client, monkeypatch) -> None:
    class Broken:
        async def generate_avatar(self, *args, **kwargs):
            raise GenerationFailedError("Failed to generate zodiac avatar")

    monkeypatch.setattr(routes_avatar, "generator", Broken())
    r = client.post("/api/generate-avatar", json={"zodiacSign": "Leo"})
    assert r.status_code == HTTP_INTERNAL_SERVER_ERROR
    assert r.json() == {"error": "Failed to generate zodiac avatar", "code": "GENERATION_FAILED"}


# --- publish --------------------------------------------------------------


def test_upload_arweave(client, fake_storage) -> None:
    r = client.post(
        "/api/upload-arweave",
        files={"file": ("a.png", b"\x89PNG-bytes", "image/png")},
    )
    assert r.status_code == HTTP_OK
    assert r.json() == {"success": True, "url": "https://arweave.net/tx1", "transactionId": "tx1"}


def test_upload_arweave_content_type_override(client, fake_storage) -> None:
    r = client.post(
        "/api/upload-arweave",
        files={"file": ("meta", b"{}", "application/octet-stream")},
        data={"contentType": "application/json"},
    )
    assert r.status_code == HTTP_OK
    assert fake_storage.uploads[0][1] == "application/json"


def test_upload_arweave_rejects_text(client, fake_storage) -> None:
    r = client.post("/api/upload-arweave", files={"file": ("a.txt", b"hi", "text/plain")})
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["code"] == "UNSUPPORTED_TYPE"
    assert fake_storage.uploads == []


def test_upload_arweave_rejects_large_file(client, fake_storage) -> None:
    big = b"\0" * (MAX_UPLOAD_BYTES + 1)
    r = client.post("/api/upload-arweave", files={"file": ("a.png", big, "image/png")})
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["code"] == "TOO_LARGE"
    assert fake_storage.uploads == []


def test_upload_arweave_missing_file(client, fake_storage) -> None:
    r = client.post("/api/upload-arweave", data={"contentType": "image/png"})
    assert r.status_code == HTTP_BAD_REQUEST


def test_upload_arweave_storage_failure(client, monkeypatch) -> None:
    monkeypatch.setattr(routes_publish, "publisher", ContentPublisher(FakeStorage(fail_on_call=1)))
    r = client.post("/api/upload-arweave", files={"file": ("a.png", b"png", "image/png")})
    assert r.status_code == HTTP_INTERNAL_SERVER_ERROR
    assert r.json()["code"] == "NETWORK_ERROR"


def test_publish_metadata(client, fake_storage) -> None:
    image = "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()
    r = client.post(
        "/api/publish-metadata",
        json={"name": "Leo", "description": "d", "image": image, "attributes": []},
    )
    assert r.status_code == HTTP_OK
    assert r.json() == {"uri": "https://arweave.net/tx2", "image": "https://arweave.net/tx1"}


# --- mint -----------------------------------------------------------------


def test_mint_info(client, monkeypatch) -> None:
    _use_rpc(monkeypatch, FakeRpc())
    r = client.get("/api/mint-nft", params={"wallet": VALID_WALLET, "network": "devnet"})
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["walletBalance"]["hasSufficientFunds"] is True
    assert body["estimatedCost"]["formattedCost"] == "0.0045 SOL"
    assert body["networkInfo"]["network"] == "devnet"


def test_mint_info_requires_wallet(client) -> None:
    r = client.get("/api/mint-nft")
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["error"] == "Wallet address is required"


def test_mint_info_rejects_unknown_network(client) -> None:
    r = client.get("/api/mint-nft", params={"wallet": VALID_WALLET, "network": "moonnet"})
    assert r.status_code == HTTP_BAD_REQUEST


def test_mint_preflight_ready(client, monkeypatch, fake_generator) -> None:
    _use_rpc(monkeypatch, FakeRpc())
    avatar = client.post("/api/generate-avatar", json={"zodiacSign": "Leo"}).json()["avatar"]
    r = client.post("/api/mint-nft", json={"walletAddress": VALID_WALLET, "avatarData": avatar})
    assert r.status_code == HTTP_OK
    assert r.json()["success"] is True


def test_mint_preflight_insufficient_funds(client, monkeypatch, fake_generator) -> None:
    _use_rpc(monkeypatch, FakeRpc(balance=LOW_BALANCE))
    avatar = client.post("/api/generate-avatar", json={"zodiacSign": "Leo"}).json()["avatar"]
    r = client.post("/api/mint-nft", json={"walletAddress": VALID_WALLET, "avatarData": avatar})
    assert r.status_code == HTTP_BAD_REQUEST
    body = r.json()
    assert body["code"] == "INSUFFICIENT_FUNDS"
    assert body["details"]["shortfall"] == 3_500_000
    assert "Current balance: 0.0010 SOL" in body["details"]["message"]


def test_mint_preflight_missing_params(client) -> None:
    r = client.post("/api/mint-nft", json={"walletAddress": VALID_WALLET})
    assert r.status_code == HTTP_BAD_REQUEST


# --- signin ---------------------------------------------------------------


def test_signin_message(client) -> None:
    r = client.post("/api/signin-message", json={"walletAddress": VALID_WALLET})
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["walletAddress"] == VALID_WALLET
    assert body["message"].endswith(f"Nonce: {body['nonce']}")


def test_signin_message_invalid_wallet(client) -> None:
    r = client.post("/api/signin-message", json={"walletAddress": "not-a-wallet"})
    assert r.status_code == HTTP_BAD_REQUEST
