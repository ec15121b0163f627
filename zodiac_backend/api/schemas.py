# Schémas Pydantic exposés par l'API (requêtes et réponses, JSON camelCase).

from typing import Any

from pydantic import Field

from zodiac_backend.core.settings import SolanaNetwork
from zodiac_backend.domain.entities import (
    AvatarMetadata,
    BirthDateMetadata,
    CamelModel,
    NFTAttribute,
    RarityFactors,
)


class GenerateAvatarRequest(CamelModel):
    """Requête de génération d'avatar.

    Champs:
    - zodiac_sign: nom du signe (obligatoire, vérifié par la route)
    - zodiac_data: données du signe envoyées par le client (seul `sign` est lu)
    - user_preferences: préférences libres transmises au prompt
    - birth_date: YYYY-MM-DD; active le calcul complet de rareté
    - language: langue des textes générés
    """

    zodiac_sign: str | None = None
    zodiac_data: dict[str, Any] | None = None
    user_preferences: str | None = None
    birth_date: str | None = None
    language: str | None = None


class GenerateAvatarResponse(CamelModel):
    avatar: AvatarMetadata


class UploadResponse(CamelModel):
    success: bool = True
    url: str
    transaction_id: str


class PublishMetadataRequest(CamelModel):
    name: str = Field(min_length=1)
    description: str
    image: str = Field(min_length=1)
    attributes: list[NFTAttribute] = Field(default_factory=list)


class PublishMetadataResponse(CamelModel):
    uri: str
    image: str


class MintRequest(CamelModel):
    wallet_address: str | None = None
    avatar_data: AvatarMetadata | None = None
    network: SolanaNetwork = "devnet"


class WalletBalanceOut(CamelModel):
    balance: int
    formatted_balance: str
    has_sufficient_funds: bool
    required_amount: int


class MintCostOut(CamelModel):
    rent_exemption: int
    transaction_fee: int
    total_cost: int
    formatted_cost: str


class NetworkInfoOut(CamelModel):
    network: str
    endpoint: str
    commitment: str


class MintInfoResponse(CamelModel):
    wallet_balance: WalletBalanceOut
    estimated_cost: MintCostOut
    network_info: NetworkInfoOut


class MintPreflightResponse(MintInfoResponse):
    success: bool = True
    message: str = "Ready to mint NFT. Please confirm the transaction in your wallet."


class ZodiacResponse(CamelModel):
    """Résultat du résolveur zodiacal et score de rareté composite."""

    sign: str
    symbol: str
    color: str
    element: str
    dates: str
    modality: str | None = None
    personality_traits: list[str]
    strength_keywords: list[str]
    visual_themes: list[str]
    cosmic_attributes: list[str]
    birth_date_metadata: BirthDateMetadata
    rarity_factors: RarityFactors
    rarity_score: float


class SigninMessageRequest(CamelModel):
    wallet_address: str = Field(min_length=1)


class SigninMessageResponse(CamelModel):
    message: str
    nonce: str
    wallet_address: str
