"""Message de connexion signé par le wallet (aucune transaction, aucun débit)."""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass

from zodiac_backend.domain.errors import InvalidInputError

# Adresse Solana: clé publique de 32 octets encodée en base58
_BASE58_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")
NONCE_BYTES = 16

WELCOME_TEMPLATE = """Welcome to Zodiac NFT!

By signing this message, you are simply connecting your wallet to our platform.

✅ No funds will be deducted
✅ No transactions will be made
✅ Only your wallet address will be used

Wallet: {public_key}
Nonce: {nonce}"""


def is_valid_address(address: str) -> bool:
    return bool(_BASE58_ADDRESS_RE.match(address))


def generate_nonce() -> str:
    return secrets.token_hex(NONCE_BYTES)


@dataclass(frozen=True)
class SigninMessage:
    public_key: str
    nonce: str

    def __post_init__(self) -> None:
        if not is_valid_address(self.public_key):
            raise InvalidInputError("Invalid wallet address", details={"wallet": self.public_key})

    @property
    def message(self) -> str:
        return WELCOME_TEMPLATE.format(public_key=self.public_key, nonce=self.nonce)

    def to_bytes(self) -> bytes:
        return self.message.encode("utf-8")

    @classmethod
    def decode(cls, message: str) -> SigninMessage:
        """Retrouve wallet et nonce à partir du texte signé."""
        public_key = nonce = ""
        for line in message.splitlines():
            if line.startswith("Wallet: "):
                public_key = line.removeprefix("Wallet: ").strip()
            elif line.startswith("Nonce: "):
                nonce = line.removeprefix("Nonce: ").strip()
        return cls(public_key=public_key, nonce=nonce)

    @classmethod
    def issue(cls, public_key: str) -> SigninMessage:
        return cls(public_key=public_key, nonce=generate_nonce())
