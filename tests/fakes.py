"""
Fakes pour les tests unitaires.

Ce module fournit des implémentations factices des interfaces LLM, génération d'images,
stockage, RPC Solana, programme NFT et wallet, avec un comportement déterministe et un
enregistrement des appels.
"""

from __future__ import annotations

import json
from typing import Any

from zodiac_backend.domain.entities import ImageRef
from zodiac_backend.domain.errors import ProviderError, StorageNetworkError, WalletRejectedError
from zodiac_backend.infra.llm.base import LLM, ImageGenerator
from zodiac_backend.infra.solana.nft_program import UnsignedMint
from zodiac_backend.infra.storage.base import StorageClient

VALID_WALLET = "7EcDhSYGxXyscszYEp35KHN8vvw3svAuLKTzXwCFLtV"

CHARACTER_JSON = json.dumps(
    {
        "mainPrompt": "A radiant lion spirit wreathed in solar flames. Stars orbit its mane.",
        "styleModifiers": ["baroque cosmic", "gold leaf", "soft glow"],
        "personalityTraits": ["proud", "warm", "bold"],
        "visualElements": ["solar crown", "flame mane", "golden aura", "nebula"],
        "rarityAttributes": ["eclipse eyes", "twin suns"],
        "cosmicTheme": "A sovereign of summer fire.",
    }
)


class FakeLLM(LLM):
    """
    LLM factice: renvoie les réponses prévues dans l'ordre.

    Une réponse de type `Exception` est levée au lieu d'être renvoyée. Les messages
    reçus et les paramètres sont enregistrés dans `calls`.
    """

    def __init__(self, *responses: str | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        messages: list[dict[str, str]],
        *,
        json_mode: bool = False,
        **kwargs: Any,
    ) -> str:
        self.calls.append({"messages": messages, "json_mode": json_mode, **kwargs})
        if not self.responses:
            raise ProviderError("no scripted response")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FailingLLM(LLM):
    async def generate(self, messages, *, json_mode=False, **kwargs) -> str:
        raise ProviderError("provider down")


class FakeImageGenerator(ImageGenerator):
    def __init__(self, image: ImageRef | Exception | None = None) -> None:
        self.image = image if image is not None else ImageRef(url="https://img.example/avatar.png")
        self.prompts: list[str] = []
        self.sizes: list[str] = []

    async def generate_image(self, prompt: str, *, size: str = "1024x1024") -> ImageRef:
        self.prompts.append(prompt)
        self.sizes.append(size)
        if isinstance(self.image, Exception):
            raise self.image
        return self.image


class FakeStorage(StorageClient):
    """Stockage en mémoire: identifiants `tx1`, `tx2`, ... ; peut échouer au n-ième appel."""

    def __init__(self, fail_on_call: int | None = None) -> None:
        self.uploads: list[tuple[bytes, str, dict[str, str] | None]] = []
        self.fail_on_call = fail_on_call

    async def submit(
        self, data: bytes, content_type: str, tags: dict[str, str] | None = None
    ) -> str:
        if self.fail_on_call is not None and len(self.uploads) + 1 == self.fail_on_call:
            raise StorageNetworkError("uploader unreachable")
        self.uploads.append((data, content_type, tags))
        return f"tx{len(self.uploads)}"

    def public_url(self, transaction_id: str) -> str:
        return f"https://arweave.net/{transaction_id}"


class FakeRpc:
    endpoint = "https://api.devnet.solana.com"
    commitment = "confirmed"

    def __init__(self, balance: int = 1_000_000_000, error: Exception | None = None) -> None:
        self.balance = balance
        self.error = error
        self.balance_calls: list[str] = []

    async def get_balance(self, address: str) -> int:
        self.balance_calls.append(address)
        if self.error is not None:
            raise self.error
        return self.balance


class FakeNFTProgram:
    def __init__(self, submit_error: Exception | None = None) -> None:
        self.submit_error = submit_error
        self.builds: list[dict[str, Any]] = []
        self.submitted: list[str] = []

    async def build_create_nft(self, **kwargs: Any) -> UnsignedMint:
        self.builds.append(kwargs)
        return UnsignedMint(
            transaction="dW5zaWduZWQ=", mint_address="MintAddr111", token_account="TokenAcc111"
        )

    async def submit(self, signed_transaction: str) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append(signed_transaction)
        return "sig111"


class FakeWallet:
    def __init__(
        self,
        public_key: str | None = VALID_WALLET,
        reject: bool = False,
    ) -> None:
        self.public_key = public_key
        self.reject = reject
        self.signed: list[str] = []

    async def connect(self) -> str | None:
        return self.public_key

    async def sign_message(self, message: bytes) -> bytes:
        if self.reject:
            raise WalletRejectedError("User rejected the request.")
        return b"signed:" + message

    async def sign_transaction(self, transaction: str) -> str:
        if self.reject:
            raise WalletRejectedError("User rejected the request.")
        self.signed.append(transaction)
        return transaction + ":signed"

