"""
Routes de préparation du mint Solana.

Le mint lui-même est signé par le wallet de l'utilisateur; ces routes ne font
aucune écriture et exposent:
- `GET /api/mint-nft?wallet=&network=`: solde, coût estimé, informations réseau
- `POST /api/mint-nft`: vérification préalable (400 avec le manque si fonds insuffisants)
"""

from fastapi import APIRouter, Query

from zodiac_backend.api.schemas import (
    MintCostOut,
    MintInfoResponse,
    MintPreflightResponse,
    MintRequest,
    NetworkInfoOut,
    WalletBalanceOut,
)
from zodiac_backend.core.container import container
from zodiac_backend.core.settings import SolanaNetwork
from zodiac_backend.domain.errors import InsufficientFundsError, InvalidInputError
from zodiac_backend.domain.mint_orchestrator import (
    MintCostEstimate,
    MintOrchestrator,
    WalletBalance,
    format_sol,
)
from zodiac_backend.domain.signin_message import is_valid_address

router = APIRouter(prefix="/api", tags=["mint"])
orchestrator_for = container.orchestrator_for


def _balance_out(balance: WalletBalance) -> WalletBalanceOut:
    return WalletBalanceOut(
        balance=balance.balance,
        formatted_balance=balance.formatted_balance,
        has_sufficient_funds=balance.has_sufficient_funds,
        required_amount=balance.required_amount,
    )


def _cost_out(cost: MintCostEstimate) -> MintCostOut:
    return MintCostOut(
        rent_exemption=cost.rent_exemption,
        transaction_fee=cost.transaction_fee,
        total_cost=cost.total_cost,
        formatted_cost=cost.formatted_cost,
    )


async def _mint_info(orchestrator: MintOrchestrator, wallet: str) -> MintInfoResponse:
    if not is_valid_address(wallet):
        raise InvalidInputError("Invalid wallet address", details={"wallet": wallet})
    balance, cost = await orchestrator.preflight(wallet)
    return MintInfoResponse(
        wallet_balance=_balance_out(balance),
        estimated_cost=_cost_out(cost),
        network_info=NetworkInfoOut(**orchestrator.network_info()),
    )


@router.get("/mint-nft", response_model=MintInfoResponse)
async def mint_info(
    wallet: str | None = Query(None),
    network: SolanaNetwork = Query("devnet"),
):
    if not wallet:
        raise InvalidInputError("Wallet address is required")
    return await _mint_info(orchestrator_for(network), wallet)


@router.post("/mint-nft", response_model=MintPreflightResponse)
async def mint_preflight(payload: MintRequest):
    if not payload.wallet_address or payload.avatar_data is None:
        raise InvalidInputError("Missing required parameters: walletAddress and avatarData")
    info = await _mint_info(orchestrator_for(payload.network), payload.wallet_address)
    balance = info.wallet_balance
    if not balance.has_sufficient_funds:
        raise InsufficientFundsError(
            "Insufficient SOL balance",
            details={
                "message": (
                    f"Need at least {format_sol(balance.required_amount)}. "
                    f"Current balance: {balance.formatted_balance}"
                ),
                "required": balance.required_amount,
                "available": balance.balance,
                "shortfall": balance.required_amount - balance.balance,
            },
        )
    return MintPreflightResponse(**info.model_dump())
