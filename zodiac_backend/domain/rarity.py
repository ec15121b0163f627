"""Moteur de rareté: facteurs calendaires et score cosmique composite.

Toutes les fonctions sont pures: mêmes entrées, même sortie, aucun état caché.
"""

from __future__ import annotations

from types import MappingProxyType

from zodiac_backend.domain.entities import (
    BirthDateMetadata,
    RarityFactors,
    ZodiacResult,
    ZodiacSign,
)
from zodiac_backend.domain.zodiac_data import (
    DEFAULT_SEASON_ALIGNMENT_SCORE,
    ELEMENT_SEASON_ALIGNMENTS,
    SEASON_ALIGNMENT_SCORES,
)

RARITY_WEIGHTS = MappingProxyType(
    {
        "birth_date_rarity": 0.3,
        "element_balance": 0.2,
        "seasonal_alignment": 0.2,
        "cusp_proximity": 0.3,
    }
)

BASE_BIRTH_DATE_RARITY = 0.5
LEAP_YEAR_BONUS = 0.1
SPECIAL_DATE_BONUS = 0.2
YEAR_EDGE_BONUS = 0.15
YEAR_EDGE_START_DAY = 10
YEAR_EDGE_END_DAY = 355

ALIGNED_ELEMENT_SCORE = 0.7
UNALIGNED_ELEMENT_SCORE = 0.4

CUSP_SCORE = 0.8
NON_CUSP_SCORE = 0.3
CUSP_WINDOW = 2
DAYS_PER_MONTH_APPROX = 30


def birth_date_rarity(metadata: BirthDateMetadata) -> float:
    rarity = BASE_BIRTH_DATE_RARITY
    if metadata.is_leap_year:
        rarity += LEAP_YEAR_BONUS
    if metadata.special_date:
        rarity += SPECIAL_DATE_BONUS
    if metadata.day_of_year <= YEAR_EDGE_START_DAY or metadata.day_of_year >= YEAR_EDGE_END_DAY:
        rarity += YEAR_EDGE_BONUS
    return min(rarity, 1.0)


def element_balance(element: str, season: str) -> float:
    aligned = ELEMENT_SEASON_ALIGNMENTS.get(element, frozenset())
    return ALIGNED_ELEMENT_SCORE if season in aligned else UNALIGNED_ELEMENT_SCORE


def seasonal_alignment(season: str) -> float:
    return SEASON_ALIGNMENT_SCORES.get(season, DEFAULT_SEASON_ALIGNMENT_SCORE)


def cusp_proximity(month: int, day: int, sign: ZodiacSign) -> float:
    """Proximité d'une borne du signe, en "jours" approchés (mois = 30 jours).

    Février compte 30 jours, comme les autres mois.
    """
    start = abs((month - sign.start.month) * DAYS_PER_MONTH_APPROX + (day - sign.start.day))
    end = abs((month - sign.end.month) * DAYS_PER_MONTH_APPROX + (day - sign.end.day))
    return CUSP_SCORE if min(start, end) <= CUSP_WINDOW else NON_CUSP_SCORE


def compute_rarity_factors(
    month: int, day: int, sign: ZodiacSign, metadata: BirthDateMetadata
) -> RarityFactors:
    """Calcule les quatre facteurs de rareté d'une date pour un signe donné."""
    return RarityFactors(
        birth_date_rarity=birth_date_rarity(metadata),
        element_balance=element_balance(sign.element, metadata.season),
        seasonal_alignment=seasonal_alignment(metadata.season),
        cusp_proximity=cusp_proximity(month, day, sign),
    )


def score(result: ZodiacResult) -> float:
    """Score cosmique composite (somme pondérée des facteurs), borné à [0, 1]."""
    factors = result.rarity_factors
    total = sum(getattr(factors, name) * weight for name, weight in RARITY_WEIGHTS.items())
    return max(0.0, min(total, 1.0))
