"""Résolution du signe zodiacal et des métadonnées calendaires d'une date de naissance.

Fonctions pures: la sortie ne dépend que de la date et des tables statiques de
`zodiac_data`. Une date valide sans signe correspondant est un défaut de la table
(`UnresolvedSignError`), pas une erreur utilisateur.
"""

from __future__ import annotations

import datetime as dt

from zodiac_backend.domain.entities import BirthDateMetadata, RarityFactors, ZodiacResult, ZodiacSign
from zodiac_backend.domain.errors import InvalidDateError, InvalidInputError, UnresolvedSignError
from zodiac_backend.domain.rarity import compute_rarity_factors
from zodiac_backend.domain.zodiac_data import SIGN_SEASONS, SPECIAL_DATES, ZODIAC_SIGNS

# Valeurs neutres utilisées quand seul le signe est connu
NEUTRAL_RARITY = 0.5
NEUTRAL_DAY_OF_YEAR = 180
NEUTRAL_QUARTER = 2


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def day_of_year(date: dt.date) -> int:
    return date.timetuple().tm_yday


def season_of(month: int, day: int) -> str:
    if (month == 3 and day >= 20) or month in (4, 5) or (month == 6 and day <= 20):
        return "Spring"
    if (month == 6 and day >= 21) or month in (7, 8) or (month == 9 and day <= 22):
        return "Summer"
    if (month == 9 and day >= 23) or month in (10, 11) or (month == 12 and day <= 21):
        return "Autumn"
    return "Winter"


def quarter_of(month: int) -> int:
    if month <= 3:
        return 1
    if month <= 6:
        return 2
    if month <= 9:
        return 3
    return 4


def special_date_of(month: int, day: int) -> str | None:
    return SPECIAL_DATES.get(f"{month}-{day}")


def _matches(sign: ZodiacSign, month: int, day: int) -> bool:
    start, end = sign.start, sign.end
    if sign.crosses_year:
        return (
            (month == start.month and day >= start.day)
            or (month == end.month and day <= end.day)
            or month > start.month
            or month < end.month
        )
    return (
        (month == start.month and day >= start.day)
        or (month == end.month and day <= end.day)
        or start.month < month < end.month
    )


def sign_for(month: int, day: int) -> ZodiacSign:
    """Premier signe dont la plage contient (mois, jour)."""
    for sign in ZODIAC_SIGNS:
        if _matches(sign, month, day):
            return sign
    raise UnresolvedSignError(f"Unable to determine zodiac sign for date: {month}/{day}")


def sign_by_name(name: str) -> ZodiacSign | None:
    wanted = (name or "").strip().lower()
    return next((s for s in ZODIAC_SIGNS if s.sign.lower() == wanted), None)


def signs_by_element(element: str) -> list[ZodiacSign]:
    return [s for s in ZODIAC_SIGNS if s.element == element]


def parse_birth_date(raw: str) -> dt.date:
    """Parse une date ISO `YYYY-MM-DD` (InvalidDateError sinon)."""
    try:
        return dt.date.fromisoformat(str(raw).strip())
    except ValueError as err:
        raise InvalidDateError(f"Invalid birth date: {raw!r}") from err


def birth_date_metadata(date: dt.date) -> BirthDateMetadata:
    return BirthDateMetadata(
        day_of_year=day_of_year(date),
        is_leap_year=is_leap_year(date.year),
        season=season_of(date.month, date.day),
        quarter_of_year=quarter_of(date.month),
        special_date=special_date_of(date.month, date.day),
    )


def _result(sign: ZodiacSign, metadata: BirthDateMetadata, factors: RarityFactors) -> ZodiacResult:
    return ZodiacResult(
        sign=sign.sign,
        symbol=sign.symbol,
        color=sign.color,
        element=sign.element,
        dates=sign.dates,
        personality_traits=sign.personality_traits,
        strength_keywords=sign.strength_keywords,
        visual_themes=sign.visual_themes,
        cosmic_attributes=sign.cosmic_attributes,
        birth_date_metadata=metadata,
        rarity_factors=factors,
    )


def resolve(date: dt.date) -> ZodiacResult:
    """Résout le signe, les métadonnées calendaires et les facteurs de rareté d'une date."""
    if not isinstance(date, dt.date):
        raise InvalidDateError(f"Expected a calendar date, got {type(date).__name__}")
    sign = sign_for(date.month, date.day)
    metadata = birth_date_metadata(date)
    factors = compute_rarity_factors(date.month, date.day, sign, metadata)
    return _result(sign, metadata, factors)


def resolve_sign_only(name: str) -> ZodiacResult:
    """Construit un résultat à partir du seul nom de signe (facteurs neutres).

    Utilisé quand l'utilisateur choisit un signe sans donner de date de naissance.
    """
    sign = sign_by_name(name)
    if sign is None:
        raise InvalidInputError(f"Unknown zodiac sign: {name!r}")
    metadata = BirthDateMetadata(
        day_of_year=NEUTRAL_DAY_OF_YEAR,
        is_leap_year=False,
        season=SIGN_SEASONS[sign.sign],
        quarter_of_year=NEUTRAL_QUARTER,
    )
    factors = RarityFactors(
        birth_date_rarity=NEUTRAL_RARITY,
        element_balance=NEUTRAL_RARITY,
        seasonal_alignment=NEUTRAL_RARITY,
        cusp_proximity=NEUTRAL_RARITY,
    )
    return _result(sign, metadata, factors)
