"""
Entités du domaine métier.

Ce module définit les modèles de données utilisés par le résolveur zodiacal, le
générateur d'avatars, la publication sur Arweave et le mint Solana.

Les modèles dérivés (signe, métadonnées de naissance, facteurs de rareté, résultat
zodiacal) sont gelés: une fois créés pour une requête, ils ne sont plus modifiés.
Les modèles échangés avec le navigateur utilisent des alias camelCase.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from zodiac_backend.domain.errors import ErrorKind

Element = Literal["Fire", "Earth", "Air", "Water"]
Season = Literal["Spring", "Summer", "Autumn", "Winter"]
Modality = Literal["Cardinal", "Fixed", "Mutable"]


class CamelModel(BaseModel):
    """Base des modèles exposés en JSON camelCase (entrée snake_case acceptée)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CalendarDay(FrozenCamelModel):
    """Jour du calendrier sans année (borne d'une plage de signe)."""

    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)


class ZodiacSign(FrozenCamelModel):
    """Donnée de référence statique d'un signe."""

    sign: str
    symbol: str
    color: str
    element: Element
    dates: str
    start: CalendarDay
    end: CalendarDay
    personality_traits: tuple[str, ...]
    strength_keywords: tuple[str, ...]
    visual_themes: tuple[str, ...]
    cosmic_attributes: tuple[str, ...]

    @property
    def crosses_year(self) -> bool:
        """Vrai si la plage chevauche le 31 décembre (Capricorne)."""
        return self.start.month > self.end.month


class BirthDateMetadata(FrozenCamelModel):
    day_of_year: int = Field(ge=1, le=366)
    is_leap_year: bool
    season: Season
    quarter_of_year: int = Field(ge=1, le=4)
    special_date: str | None = None


class RarityFactors(FrozenCamelModel):
    birth_date_rarity: float = Field(ge=0.0, le=1.0)
    element_balance: float = Field(ge=0.0, le=1.0)
    seasonal_alignment: float = Field(ge=0.0, le=1.0)
    cusp_proximity: float = Field(ge=0.0, le=1.0)


class ZodiacResult(FrozenCamelModel):
    """Agrégat signe + métadonnées calendaires + facteurs de rareté."""

    sign: str
    symbol: str
    color: str
    element: Element
    dates: str
    personality_traits: tuple[str, ...]
    strength_keywords: tuple[str, ...]
    visual_themes: tuple[str, ...]
    cosmic_attributes: tuple[str, ...]
    birth_date_metadata: BirthDateMetadata
    rarity_factors: RarityFactors


class CharacterPrompt(CamelModel):
    """Description de personnage produite par l'IA ou par le gabarit de secours."""

    main_prompt: str = Field(min_length=1)
    style_modifiers: list[str] = Field(min_length=1)
    personality_traits: list[str] = Field(min_length=1)
    visual_elements: list[str] = Field(min_length=1)
    rarity_attributes: list[str]
    cosmic_theme: str


class ImageRef(BaseModel):
    """Image générée: URL hébergée ou octets encodés en base64."""

    url: str | None = None
    b64_json: str | None = None
    mime_type: str = "image/png"

    def as_uri(self) -> str:
        if self.url:
            return self.url
        return f"data:{self.mime_type};base64,{self.b64_json}"


class NFTAttribute(BaseModel):
    """Trait d'un NFT (clés snake_case imposées par le standard de métadonnées)."""

    trait_type: str
    value: str | int | float
    rarity: float | None = None


class NFTMetadata(BaseModel):
    name: str
    description: str
    image: str
    attributes: list[NFTAttribute] = Field(default_factory=list)


class AvatarMetadata(CamelModel):
    """Métadonnées complètes d'un avatar généré, avant publication."""

    id: str
    name: str
    description: str
    image: str
    image_prompt: str
    zodiac_sign: str
    element: Element
    birth_date: str
    personality_traits: list[str]
    rarity_score: float = Field(ge=0.0, le=100.0)
    cosmic_alignment: str
    attributes: list[NFTAttribute]
    character_prompt: CharacterPrompt
    created_at: str


class MintResult(CamelModel):
    signature: str
    mint_address: str
    token_account: str
    name: str
    symbol: str
    uri: str
    explorer_url: str
    supply: int = 1


class MintError(CamelModel):
    """Échec terminal d'une tentative de mint."""

    error_kind: ErrorKind
    message: str
    details: str | None = None
    code: str | None = None

    @property
    def is_quiet(self) -> bool:
        """Un refus de signature est un résultat attendu, pas une alerte."""
        return self.error_kind is ErrorKind.USER_REJECTED
