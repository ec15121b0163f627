"""Générateur de contenu d'avatar zodiacal.

Ce module coordonne les appels IA (description de personnage, image, texte narratif)
et assemble les métadonnées de l'avatar. Chaque appel externe a un contenu de secours
déterministe: un fournisseur indisponible dégrade le résultat sans bloquer le mint.
"""

from __future__ import annotations

import base64
import datetime as dt
import random
import string
import time
from collections.abc import Callable

import structlog

from zodiac_backend.app.metrics import AVATAR_FALLBACKS, AVATAR_GENERATIONS, AVATAR_LATENCY
from zodiac_backend.domain.entities import (
    AvatarMetadata,
    CharacterPrompt,
    ImageRef,
    NFTAttribute,
    NFTMetadata,
    ZodiacResult,
)
from zodiac_backend.domain.errors import GenerationFailedError, ProviderError
from zodiac_backend.domain.parsing import (
    Fallback,
    Parsed,
    Unrecoverable,
    parse_model,
    provider_failed,
)
from zodiac_backend.domain.zodiac_data import modality_of
from zodiac_backend.infra.images.placeholder import render_placeholder_png
from zodiac_backend.infra.llm.base import LLM, ImageGenerator

log = structlog.get_logger(__name__)

CHARACTER_SYSTEM = """You are a cosmic artist and mystical zodiac expert. Create unique, \
personalized avatar descriptions based on zodiac signs and birth data.

IMPORTANT: You must respond with ONLY a valid JSON object with these exact properties:
{
  "mainPrompt": "A detailed visual description (2-3 sentences)",
  "styleModifiers": ["artistic style element 1", "artistic style element 2", "artistic style element 3"],
  "personalityTraits": ["visual personality trait 1", "visual personality trait 2", "visual personality trait 3"],
  "visualElements": ["visual element 1", "visual element 2", "visual element 3", "visual element 4"],
  "rarityAttributes": ["rare feature 1", "rare feature 2"],
  "cosmicTheme": "One sentence describing the cosmic theme"
}

Focus on creating mystical, ethereal, collectible-quality avatars suitable for NFTs. \
Return ONLY the JSON object, no other text."""

DESCRIPTION_SYSTEM = (
    "You are a mystical narrator creating personalized descriptions for zodiac-based NFT "
    "avatars. Write engaging, cosmic descriptions that make the owner feel connected to "
    "their unique avatar."
)

CHARACTER_PARAMS = {"temperature": 0.8, "max_tokens": 800}
DESCRIPTION_PARAMS = {"temperature": 0.7, "max_tokens": 200}
IMAGE_SIZE = "1024x1024"

# Poids du score de rareté de l'avatar (pourcentage), distinct du score composite
AVATAR_RARITY_WEIGHTS = {"birth_date_rarity": 0.3, "element_balance": 0.2, "cusp_proximity": 0.3}
RARE_FEATURE_WEIGHT = 0.2
RARE_FEATURE_SATURATION = 5
SPECIAL_DATE_RARITY = 95
RARE_FEATURE_BASE_RARITY = 85
RARE_FEATURE_RARITY_STEP = 5
AVATAR_ID_SUFFIX_LEN = 9
_BASE36 = string.digits + string.ascii_lowercase


def _pct(value: float) -> str:
    return f"{value * 100:.1f}%"


def _language_line(language: str | None) -> str:
    if not language or language.strip().lower() == "english":
        return ""
    return f"\nWrite every text value in {language.strip()}."


def build_character_user_prompt(
    result: ZodiacResult, user_preference: str | None, language: str | None = None
) -> str:
    meta = result.birth_date_metadata
    factors = result.rarity_factors
    return f"""Create a unique avatar for a {result.sign} zodiac character.

Zodiac Details:
- Sign: {result.sign} {result.symbol}
- Element: {result.element}
- Modality: {modality_of(result.sign) or "Unknown"}
- Primary Color: {result.color}
- Season: {meta.season}
- Special Date: {meta.special_date or "None"}

Personality Traits: {", ".join(result.personality_traits)}
Strength Keywords: {", ".join(result.strength_keywords)}
Visual Themes: {", ".join(result.visual_themes)}
Cosmic Attributes: {", ".join(result.cosmic_attributes)}

User Preferences: {user_preference or "Surprise me with something mystical and unique"}

Rarity Factors:
- Birth Date Rarity: {_pct(factors.birth_date_rarity)}
- Element Balance: {_pct(factors.element_balance)}
- Cusp Proximity: {_pct(factors.cusp_proximity)}

Create a character that embodies this zodiac sign's essence while incorporating cosmic, \
mystical elements suitable for a premium NFT collection.{_language_line(language)}

Respond with ONLY the JSON object."""


def fallback_character_prompt(result: ZodiacResult) -> CharacterPrompt:
    """Gabarit construit uniquement à partir des champs du résultat zodiacal."""
    strengths = " and ".join(result.strength_keywords[:2])
    return CharacterPrompt(
        main_prompt=(
            f"A mystical {result.sign} avatar embodying the {result.element} element with "
            f"cosmic energy flowing through ethereal forms. The character radiates "
            f"{strengths} in a celestial setting."
        ),
        style_modifiers=["cosmic art", "ethereal lighting", "mystical atmosphere", "digital painting"],
        personality_traits=list(result.personality_traits[:3]),
        visual_elements=[
            *result.visual_themes[:3],
            f"{result.element.lower()} energy",
            "starfield background",
        ],
        rarity_attributes=[f"{result.birth_date_metadata.season} born", "cosmic alignment"],
        cosmic_theme=(
            f"A {result.sign} soul dancing with {result.element} energy under infinite stars."
        ),
    )


def fallback_description(result: ZodiacResult) -> str:
    return (
        f"Born under the {result.sign} constellation, this cosmic avatar channels the pure "
        f"essence of {result.element} energy. Your {result.birth_date_metadata.season} birth "
        "aligns you with celestial forces, creating a unique spiritual signature that "
        "resonates through the digital cosmos."
    )


def avatar_rarity_score(result: ZodiacResult, prompt: CharacterPrompt) -> float:
    """Score de rareté de l'avatar en pourcentage [0, 100].

    80% proviennent des facteurs zodiacaux, 20% du nombre de traits rares proposés
    par l'IA (5 traits pour la part pleine); le total est plafonné à 100.
    """
    factors = result.rarity_factors
    score = sum(getattr(factors, name) * w for name, w in AVATAR_RARITY_WEIGHTS.items())
    features = len(prompt.rarity_attributes) / RARE_FEATURE_SATURATION
    score += features * RARE_FEATURE_WEIGHT
    return min(score * 100, 100.0)


def build_attributes(
    result: ZodiacResult, prompt: CharacterPrompt, rarity_score: float
) -> list[NFTAttribute]:
    meta = result.birth_date_metadata
    attributes = [
        NFTAttribute(trait_type="Zodiac Sign", value=result.sign),
        NFTAttribute(trait_type="Element", value=result.element),
        NFTAttribute(trait_type="Season", value=meta.season),
        NFTAttribute(trait_type="Rarity Score", value=f"{rarity_score:.1f}%"),
        NFTAttribute(trait_type="Cosmic Theme", value=prompt.cosmic_theme),
    ]
    if meta.special_date:
        attributes.append(
            NFTAttribute(trait_type="Special Date", value=meta.special_date, rarity=SPECIAL_DATE_RARITY)
        )
    for index, feature in enumerate(prompt.rarity_attributes):
        attributes.append(
            NFTAttribute(
                trait_type=f"Rare Feature {index + 1}",
                value=feature,
                rarity=RARE_FEATURE_BASE_RARITY + index * RARE_FEATURE_RARITY_STEP,
            )
        )
    return attributes


class AvatarContentGenerator:
    """Service de génération d'avatars.

    Responsabilités:
    - Obtenir une description de personnage structurée (JSON) auprès du LLM.
    - Construire le prompt image et générer l'image (image de secours si échec).
    - Rédiger la description narrative (phrase gabarit si échec).
    - Assembler `AvatarMetadata` avec score de rareté et attributs NFT.
    """

    def __init__(
        self,
        llm: LLM,
        images: ImageGenerator,
        *,
        placeholder: Callable[[], bytes] = render_placeholder_png,
        rng: random.Random | None = None,
        clock: Callable[[], dt.datetime] | None = None,
    ) -> None:
        self.llm = llm
        self.images = images
        self._placeholder = placeholder
        self._rng = rng or random.Random()
        self._clock = clock or (lambda: dt.datetime.now(dt.timezone.utc))

    async def generate_character_prompt(
        self,
        result: ZodiacResult,
        user_preference: str | None = None,
        language: str | None = None,
    ) -> CharacterPrompt:
        """Description de personnage IA, ou gabarit déterministe en cas d'échec."""
        messages = [
            {"role": "system", "content": CHARACTER_SYSTEM},
            {"role": "user", "content": build_character_user_prompt(result, user_preference, language)},
        ]
        try:
            raw = await self.llm.generate(messages, json_mode=True, **CHARACTER_PARAMS)
            outcome = parse_model(raw, CharacterPrompt, lambda: fallback_character_prompt(result))
        except ProviderError as err:
            outcome = provider_failed(lambda: fallback_character_prompt(result), err.message)

        match outcome:
            case Parsed(value=prompt):
                return prompt
            case Fallback(value=prompt, reason=reason):
                log.warning("avatar_prompt_fallback", sign=result.sign, reason=reason)
                AVATAR_FALLBACKS.labels("character_prompt").inc()
                return prompt
            case Unrecoverable(reason=reason):
                raise GenerationFailedError(f"Character prompt unavailable: {reason}")

    def generate_image_prompt(self, prompt: CharacterPrompt, result: ZodiacResult) -> str:
        """Prompt image concis: 2 éléments visuels, 2 styles, 1re phrase du prompt."""
        visual = ", ".join(prompt.visual_elements[:2])
        style = ", ".join(prompt.style_modifiers[:2])
        first_sentence = prompt.main_prompt.split(".")[0].strip()
        return (
            f"A mystical {result.sign} zodiac avatar with {result.element.lower()} elemental "
            f"powers. {first_sentence}.\n\n"
            f"Style: {style}, cosmic digital art, ethereal lighting, mystical atmosphere.\n\n"
            f"Visual elements: {visual}, starfield background, cosmic energy.\n\n"
            "Art style: High-quality digital illustration, fantasy art, cosmic theme, "
            "professional NFT artwork, centered composition."
        )

    async def generate_image(self, image_prompt: str) -> ImageRef:
        """Image générée, ou image de secours locale; ne lève jamais."""
        try:
            image = await self.images.generate_image(image_prompt, size=IMAGE_SIZE)
            if image.url or image.b64_json:
                return image
            reason = "empty image reference"
        except Exception as err:  # toute erreur fournisseur -> image de secours
            reason = str(err) or type(err).__name__
        log.warning("avatar_image_fallback", reason=reason)
        AVATAR_FALLBACKS.labels("image").inc()
        encoded = base64.b64encode(self._placeholder()).decode("ascii")
        return ImageRef(b64_json=encoded, mime_type="image/png")

    async def create_description(
        self,
        result: ZodiacResult,
        prompt: CharacterPrompt,
        language: str | None = None,
    ) -> str:
        meta = result.birth_date_metadata
        special = f"Special Date: {meta.special_date}\n" if meta.special_date else ""
        user = (
            "Create a personalized description for this zodiac avatar:\n\n"
            f"Zodiac: {result.sign} {result.symbol}\n"
            f"Element: {result.element}\n"
            f"Season: {meta.season}\n"
            f"{special}\n"
            f"Character Description: {prompt.main_prompt}\n"
            f"Cosmic Theme: {prompt.cosmic_theme}\n\n"
            "Write a mystical, engaging description (2-3 sentences) that:\n"
            "1. Connects the owner to their zodiac essence\n"
            "2. Highlights unique traits and cosmic alignment\n"
            "3. Makes them feel special about their avatar\n"
            "4. Mentions any rare features or special birth attributes\n\n"
            f"Keep it mystical but not overly dramatic.{_language_line(language)}"
        )
        messages = [
            {"role": "system", "content": DESCRIPTION_SYSTEM},
            {"role": "user", "content": user},
        ]
        try:
            text = (await self.llm.generate(messages, **DESCRIPTION_PARAMS)).strip()
            if text:
                return text
            reason = "empty description"
        except ProviderError as err:
            reason = err.message
        log.warning("avatar_description_fallback", sign=result.sign, reason=reason)
        AVATAR_FALLBACKS.labels("description").inc()
        return fallback_description(result)

    def cosmic_alignment(self, result: ZodiacResult) -> str:
        season = result.birth_date_metadata.season
        return self._rng.choice(
            [
                f"{result.element} Ascending",
                f"{season} Cosmic Flow",
                f"{result.symbol} Constellation",
                f"{result.element}-{season} Harmony",
            ]
        )

    def new_avatar_id(self, result: ZodiacResult, now: dt.datetime) -> str:
        suffix = "".join(self._rng.choices(_BASE36, k=AVATAR_ID_SUFFIX_LEN))
        return f"zodiac_{result.sign.lower()}_{int(now.timestamp() * 1000)}_{suffix}"

    async def generate_avatar(
        self,
        result: ZodiacResult,
        user_preference: str | None = None,
        birth_date: str | None = None,
        language: str | None = None,
    ) -> AvatarMetadata:
        """Pipeline complet prompt -> prompt image -> image -> description -> métadonnées.

        Une exception qui échappe aux mécanismes de secours devient
        `GenerationFailedError`; l'appelant ne doit pas relancer automatiquement.
        """
        start = time.perf_counter()
        try:
            prompt = await self.generate_character_prompt(result, user_preference, language)
            image_prompt = self.generate_image_prompt(prompt, result)
            image = await self.generate_image(image_prompt)
            description = await self.create_description(result, prompt, language)

            rarity = avatar_rarity_score(result, prompt)
            now = self._clock()
            avatar = AvatarMetadata(
                id=self.new_avatar_id(result, now),
                name=f"{result.sign} Cosmic Avatar",
                description=description,
                image=image.as_uri(),
                image_prompt=image_prompt,
                zodiac_sign=result.sign,
                element=result.element,
                birth_date=birth_date or now.date().isoformat(),
                personality_traits=list(result.personality_traits),
                rarity_score=rarity,
                cosmic_alignment=self.cosmic_alignment(result),
                attributes=build_attributes(result, prompt, rarity),
                character_prompt=prompt,
                created_at=now.isoformat(),
            )
        except GenerationFailedError:
            AVATAR_GENERATIONS.labels("failed").inc()
            raise
        except Exception as err:
            log.exception("avatar_generation_failed", sign=result.sign)
            AVATAR_GENERATIONS.labels("failed").inc()
            raise GenerationFailedError("Failed to generate zodiac avatar") from err
        finally:
            AVATAR_LATENCY.observe(time.perf_counter() - start)

        AVATAR_GENERATIONS.labels("ok").inc()
        log.info("avatar_generated", avatar_id=avatar.id, sign=result.sign, rarity=round(rarity, 1))
        return avatar


def to_nft_metadata(avatar: AvatarMetadata) -> NFTMetadata:
    """Réduit les métadonnées d'avatar au document NFT publié sur Arweave."""
    season = next((a.value for a in avatar.attributes if a.trait_type == "Season"), "Unknown")
    return NFTMetadata(
        name=avatar.name,
        description=avatar.description,
        image=avatar.image,
        attributes=[
            NFTAttribute(trait_type="Zodiac Sign", value=avatar.zodiac_sign),
            NFTAttribute(trait_type="Element", value=avatar.element),
            NFTAttribute(trait_type="Season", value=season),
            NFTAttribute(trait_type="Rarity Score", value=f"{avatar.rarity_score:.1f}%"),
            NFTAttribute(trait_type="Birth Date", value=avatar.birth_date),
            NFTAttribute(trait_type="Cosmic Alignment", value=avatar.cosmic_alignment),
            *(a for a in avatar.attributes if a.trait_type.startswith("Rare Feature")),
        ],
    )
