"""Orchestrateur du mint: fonds -> génération -> publication -> mint.

Chaque tentative suit la machine à états:

    Idle -> CheckingFunds -> GeneratingContent -> PublishingContent -> Minting
         -> Complete | Failed

et se termine par exactement un `MintResult` ou un `MintError`. L'état d'une
tentative est local à l'appel: aucun verrou, aucun retry automatique.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

import structlog

from zodiac_backend.app.metrics import MINT_ATTEMPTS
from zodiac_backend.core.http_constants import LAMPORTS_PER_SOL
from zodiac_backend.domain.avatar_generator import AvatarContentGenerator, to_nft_metadata
from zodiac_backend.domain.entities import AvatarMetadata, MintError, MintResult, ZodiacResult
from zodiac_backend.domain.errors import (
    ErrorKind,
    GenerationFailedError,
    PublishError,
    WalletRejectedError,
)
from zodiac_backend.domain.publisher import ContentPublisher
from zodiac_backend.infra.solana.nft_program import NFTProgramClient
from zodiac_backend.infra.solana.rpc_client import SolanaRpcClient

log = structlog.get_logger(__name__)

RENT_EXEMPTION_LAMPORTS = 3_000_000  # 0.003 SOL
TRANSACTION_FEE_LAMPORTS = 1_500_000  # 0.0015 SOL
EXPLORER_BASE_URL = "https://explorer.solana.com/address"

STEP_CHECKING_FUNDS = 1
STEP_GENERATING = 2
STEP_PUBLISHING = 3
STEP_MINTING = 4
STEP_COMPLETE = 5


class MintState(str, Enum):
    IDLE = "Idle"
    CHECKING_FUNDS = "CheckingFunds"
    GENERATING_CONTENT = "GeneratingContent"
    PUBLISHING_CONTENT = "PublishingContent"
    MINTING = "Minting"
    COMPLETE = "Complete"
    FAILED = "Failed"


class ProgressObserver(Protocol):
    def __call__(self, step: int, message: str) -> None: ...


class WalletCapability(Protocol):
    """Wallet côté utilisateur: connexion et signatures.

    Un refus de l'utilisateur lève `WalletRejectedError`.
    """

    async def connect(self) -> str | None: ...

    async def sign_message(self, message: bytes) -> bytes: ...

    async def sign_transaction(self, transaction: str) -> str: ...


def format_sol(lamports: int) -> str:
    return f"{lamports / LAMPORTS_PER_SOL:.4f} SOL"


@dataclass(frozen=True)
class MintCostEstimate:
    rent_exemption: int = RENT_EXEMPTION_LAMPORTS
    transaction_fee: int = TRANSACTION_FEE_LAMPORTS

    @property
    def total_cost(self) -> int:
        return self.rent_exemption + self.transaction_fee

    @property
    def formatted_cost(self) -> str:
        return format_sol(self.total_cost)


@dataclass(frozen=True)
class WalletBalance:
    balance: int
    required_amount: int

    @property
    def formatted_balance(self) -> str:
        return format_sol(self.balance)

    @property
    def has_sufficient_funds(self) -> bool:
        return self.balance >= self.required_amount


def explorer_url(mint_address: str, network: str) -> str:
    url = f"{EXPLORER_BASE_URL}/{mint_address}"
    if network == "devnet":
        url += "?cluster=devnet"
    return url


_NETWORK_MARKERS = ("blockhash not found", "timeout", "timed out", "network")


def classify_error(message: str) -> ErrorKind:
    """Classe un message d'erreur RPC/wallet par sous-chaîne."""
    lowered = message.lower()
    if "insufficient" in lowered:
        return ErrorKind.INSUFFICIENT_FUNDS
    if "rejected" in lowered:
        return ErrorKind.USER_REJECTED
    if any(marker in lowered for marker in _NETWORK_MARKERS):
        return ErrorKind.NETWORK_ERROR
    return ErrorKind.UNKNOWN


_FRIENDLY_MESSAGES = {
    ErrorKind.INSUFFICIENT_FUNDS: "Insufficient SOL balance for transaction",
    ErrorKind.USER_REJECTED: "Transaction was rejected by user",
    ErrorKind.NETWORK_ERROR: "Network congestion, please try again",
}


def mint_error_from(exc: Exception) -> MintError:
    """Convertit une exception (wallet, RPC, transport) en `MintError` classé."""
    raw = getattr(exc, "message", None) or str(exc) or type(exc).__name__
    if isinstance(exc, WalletRejectedError):
        kind = ErrorKind.USER_REJECTED
    elif isinstance(exc, (ConnectionError, TimeoutError)):
        kind = ErrorKind.NETWORK_ERROR
    else:
        kind = classify_error(raw)
    return MintError(
        error_kind=kind,
        message=_FRIENDLY_MESSAGES.get(kind, raw),
        details=raw,
        code=kind.value,
    )


@dataclass
class MintAttempt:
    """État d'une tentative; notifie l'observateur à chaque transition."""

    observer: ProgressObserver | None = None
    state: MintState = MintState.IDLE
    history: list[MintState] = field(default_factory=list)

    def advance(self, state: MintState, step: int | None = None, message: str = "") -> None:
        if state is self.state:
            return
        self.state = state
        self.history.append(state)
        if self.observer is None or step is None:
            return
        try:
            self.observer(step, message)
        except Exception:
            log.warning("mint_progress_observer_failed", step=step, state=state.value, exc_info=True)


class MintOrchestrator:
    def __init__(
        self,
        rpc: SolanaRpcClient,
        nft_program: NFTProgramClient,
        generator: AvatarContentGenerator,
        publisher: ContentPublisher,
        *,
        network: str = "devnet",
        symbol: str = "ZODIAC",
        seller_fee_basis_points: int = 500,
    ) -> None:
        self.rpc = rpc
        self.nft_program = nft_program
        self.generator = generator
        self.publisher = publisher
        self.network = network
        self.symbol = symbol
        self.seller_fee_basis_points = seller_fee_basis_points

    async def estimated_cost(self) -> MintCostEstimate:
        return MintCostEstimate()

    async def preflight(self, address: str) -> tuple[WalletBalance, MintCostEstimate]:
        """Solde du wallet et coût estimé, interrogés en parallèle."""
        balance, estimate = await asyncio.gather(
            self.rpc.get_balance(address), self.estimated_cost()
        )
        return WalletBalance(balance=balance, required_amount=estimate.total_cost), estimate

    async def wallet_balance(self, address: str) -> WalletBalance:
        balance, _ = await self.preflight(address)
        return balance

    def network_info(self) -> dict[str, str]:
        return {
            "network": self.network,
            "endpoint": self.rpc.endpoint,
            "commitment": self.rpc.commitment,
        }

    def _fail(self, attempt: MintAttempt, error: MintError) -> MintError:
        attempt.advance(MintState.FAILED)
        MINT_ATTEMPTS.labels(self.network, error.error_kind.value).inc()
        if error.is_quiet:
            log.info("mint_rejected_by_user", network=self.network)
        else:
            log.warning(
                "mint_failed",
                network=self.network,
                kind=error.error_kind.value,
                details=error.details,
            )
        return error

    async def mint(
        self,
        wallet: WalletCapability,
        content: ZodiacResult | AvatarMetadata,
        *,
        user_preference: str | None = None,
        birth_date: str | None = None,
        language: str | None = None,
        observer: ProgressObserver | None = None,
    ) -> MintResult | MintError:
        """Exécute une tentative de mint complète.

        `content` est soit un résultat zodiacal (l'avatar est alors généré), soit un
        avatar déjà généré, auquel cas la génération le réutilise tel quel.
        """
        attempt = MintAttempt(observer=observer)

        owner = await wallet.connect()
        if not owner:
            return self._fail(
                attempt,
                MintError(
                    error_kind=ErrorKind.INVALID_INPUT,
                    message="Wallet not connected or doesn't support signing",
                    details="Please connect a compatible Solana wallet to mint an NFT",
                ),
            )

        # 1. Fonds
        attempt.advance(MintState.CHECKING_FUNDS, STEP_CHECKING_FUNDS, "Checking wallet balance...")
        try:
            funds = await self.wallet_balance(owner)
        except Exception as exc:  # RPC ou transport: classé comme au mint
            return self._fail(attempt, mint_error_from(exc))
        if not funds.has_sufficient_funds:
            return self._fail(
                attempt,
                MintError(
                    error_kind=ErrorKind.INSUFFICIENT_FUNDS,
                    message=(
                        f"Insufficient SOL balance: need {format_sol(funds.required_amount)}, "
                        f"have {funds.formatted_balance}"
                    ),
                    details=(
                        f"You need at least {format_sol(funds.required_amount)} to mint an NFT. "
                        f"Current balance: {funds.formatted_balance}"
                    ),
                    code=ErrorKind.INSUFFICIENT_FUNDS.value,
                ),
            )

        # 2. Génération
        attempt.advance(MintState.GENERATING_CONTENT, STEP_GENERATING, "Generating avatar content...")
        if isinstance(content, AvatarMetadata):
            avatar = content
        else:
            try:
                avatar = await self.generator.generate_avatar(
                    content, user_preference, birth_date, language
                )
            except GenerationFailedError as exc:
                return self._fail(
                    attempt,
                    MintError(
                        error_kind=ErrorKind.GENERATION_FAILED,
                        message=exc.message,
                        details=str(exc.__cause__) if exc.__cause__ else None,
                        code=ErrorKind.GENERATION_FAILED.value,
                    ),
                )

        # 3. Publication
        attempt.advance(
            MintState.PUBLISHING_CONTENT,
            STEP_PUBLISHING,
            "Uploading image and metadata to Arweave...",
        )
        try:
            uri, _ = await self.publisher.publish_metadata(to_nft_metadata(avatar))
        except Exception as exc:
            return self._fail(
                attempt,
                MintError(
                    error_kind=ErrorKind.PUBLISH_ERROR,
                    message="Failed to upload to Arweave. Please try again.",
                    details=getattr(exc, "message", None) or str(exc) or type(exc).__name__,
                    code=exc.kind.value if isinstance(exc, PublishError) else None,
                ),
            )

        # 4. Mint
        attempt.advance(MintState.MINTING, STEP_MINTING, "Minting NFT on Solana blockchain...")
        try:
            unsigned = await self.nft_program.build_create_nft(
                owner=owner,
                uri=uri,
                name=avatar.name,
                symbol=self.symbol,
                seller_fee_basis_points=self.seller_fee_basis_points,
            )
            signed = await wallet.sign_transaction(unsigned.transaction)
            signature = await self.nft_program.submit(signed)
        except Exception as exc:  # toute erreur wallet/RPC est classée, jamais propagée
            return self._fail(attempt, mint_error_from(exc))

        attempt.advance(MintState.COMPLETE, STEP_COMPLETE, "NFT minted successfully!")
        MINT_ATTEMPTS.labels(self.network, "complete").inc()
        log.info("nft_minted", mint=unsigned.mint_address, signature=signature, network=self.network)
        return MintResult(
            signature=signature,
            mint_address=unsigned.mint_address,
            token_account=unsigned.token_account,
            name=avatar.name,
            symbol=self.symbol,
            uri=uri,
            explorer_url=explorer_url(unsigned.mint_address, self.network),
            supply=1,
        )
