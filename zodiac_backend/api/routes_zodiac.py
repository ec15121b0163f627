"""
Route du résolveur zodiacal: `GET /api/zodiac?date=YYYY-MM-DD`.

Retourne le signe, les métadonnées calendaires, les facteurs de rareté et le score
composite. Aucun appel externe.
"""

from fastapi import APIRouter, Query

from zodiac_backend.api.schemas import ZodiacResponse
from zodiac_backend.domain import rarity
from zodiac_backend.domain.zodiac_data import modality_of
from zodiac_backend.domain.zodiac_resolver import parse_birth_date, resolve

router = APIRouter(prefix="/api", tags=["zodiac"])


@router.get("/zodiac", response_model=ZodiacResponse)
def get_zodiac(date: str = Query(..., description="Date de naissance YYYY-MM-DD")):
    result = resolve(parse_birth_date(date))
    return ZodiacResponse(
        **result.model_dump(),
        modality=modality_of(result.sign),
        rarity_score=rarity.score(result),
    )
