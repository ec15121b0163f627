"""
Route de génération d'avatar zodiacal.

`POST /api/generate-avatar` résout le signe (avec ou sans date de naissance) puis
délègue au générateur de contenu. Les erreurs du domaine sont rendues par les
handlers de `api.errors`.
"""

from fastapi import APIRouter

from zodiac_backend.api.schemas import GenerateAvatarRequest, GenerateAvatarResponse
from zodiac_backend.core.container import container
from zodiac_backend.domain.entities import ZodiacResult
from zodiac_backend.domain.errors import InvalidInputError
from zodiac_backend.domain.zodiac_resolver import (
    parse_birth_date,
    resolve,
    resolve_sign_only,
    sign_by_name,
)

router = APIRouter(prefix="/api", tags=["avatar"])
generator = container.generator


def resolve_request(payload: GenerateAvatarRequest) -> ZodiacResult:
    """Construit le résultat zodiacal de la requête.

    Avec une date de naissance, le résolveur complet est utilisé et doit donner le
    même signe que celui demandé; sinon les facteurs de rareté sont neutres.
    """
    name = payload.zodiac_sign or (payload.zodiac_data or {}).get("sign")
    if not name:
        raise InvalidInputError("Zodiac sign is required")
    if sign_by_name(name) is None:
        raise InvalidInputError(f"Unknown zodiac sign: {name}")
    if not payload.birth_date:
        return resolve_sign_only(name)

    result = resolve(parse_birth_date(payload.birth_date))
    if result.sign.lower() != name.strip().lower():
        raise InvalidInputError(
            "Zodiac sign does not match birth date",
            details={"expected": result.sign, "received": name},
        )
    return result


@router.post("/generate-avatar", response_model=GenerateAvatarResponse)
async def generate_avatar(payload: GenerateAvatarRequest):
    """Génère un avatar (prompt, image, description, attributs NFT)."""
    result = resolve_request(payload)
    avatar = await generator.generate_avatar(
        result,
        user_preference=payload.user_preferences,
        birth_date=payload.birth_date,
        language=payload.language,
    )
    return GenerateAvatarResponse(avatar=avatar)
