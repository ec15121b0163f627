"""Tables de référence statiques: signes, dates spéciales, alignements élément/saison.

Les tables sont construites une fois à l'import et exposées en lecture seule
(tuples de modèles gelés et `MappingProxyType`).
"""

from __future__ import annotations

from types import MappingProxyType

from zodiac_backend.domain.entities import CalendarDay, ZodiacSign


def _sign(
    sign: str,
    symbol: str,
    color: str,
    element: str,
    dates: str,
    start: tuple[int, int],
    end: tuple[int, int],
    traits: tuple[str, ...],
    strengths: tuple[str, ...],
    themes: tuple[str, ...],
    cosmic: tuple[str, ...],
) -> ZodiacSign:
    return ZodiacSign(
        sign=sign,
        symbol=symbol,
        color=color,
        element=element,
        dates=dates,
        start=CalendarDay(month=start[0], day=start[1]),
        end=CalendarDay(month=end[0], day=end[1]),
        personality_traits=traits,
        strength_keywords=strengths,
        visual_themes=themes,
        cosmic_attributes=cosmic,
    )


ZODIAC_SIGNS: tuple[ZodiacSign, ...] = (
    _sign(
        "Aries", "♈", "#DC2626", "Fire", "Mar 21 - Apr 19", (3, 21), (4, 19),
        ("Bold and ambitious", "Natural-born leader", "Energetic and dynamic",
         "Pioneering spirit", "Competitive nature"),
        ("courage", "determination", "confidence", "enthusiasm", "leadership"),
        ("ram horns", "warrior armor", "flames", "red energy", "mountain peaks"),
        ("Mars ruled", "cardinal fire", "spring awakening", "new beginnings"),
    ),
    _sign(
        "Taurus", "♉", "#059669", "Earth", "Apr 20 - May 20", (4, 20), (5, 20),
        ("Reliable and practical", "Strong-willed and determined", "Loves luxury and comfort",
         "Patient and persistent", "Grounded and stable"),
        ("stability", "patience", "determination", "loyalty", "sensuality"),
        ("bull strength", "emerald crystals", "flowering gardens", "golden ornaments",
         "earth textures"),
        ("Venus ruled", "fixed earth", "spring abundance", "material mastery"),
    ),
    _sign(
        "Gemini", "♊", "#D97706", "Air", "May 21 - Jun 20", (5, 21), (6, 20),
        ("Adaptable and versatile", "Curious and intellectual", "Communicative and witty",
         "Quick-thinking and clever", "Social and expressive"),
        ("communication", "adaptability", "curiosity", "wit", "versatility"),
        ("twin figures", "swirling winds", "geometric patterns", "golden light",
         "messenger wings"),
        ("Mercury ruled", "mutable air", "late spring energy", "mental agility"),
    ),
    _sign(
        "Cancer", "♋", "#2563EB", "Water", "Jun 21 - Jul 22", (6, 21), (7, 22),
        ("Nurturing and protective", "Emotionally intuitive", "Home and family oriented",
         "Sensitive and empathetic", "Loyal and caring"),
        ("intuition", "nurturing", "protection", "empathy", "loyalty"),
        ("crab shell", "moon phases", "ocean waves", "silver light", "protective barriers"),
        ("Moon ruled", "cardinal water", "summer solstice", "emotional depth"),
    ),
    _sign(
        "Leo", "♌", "#EA580C", "Fire", "Jul 23 - Aug 22", (7, 23), (8, 22),
        ("Confident and charismatic", "Creative and dramatic", "Generous and warm-hearted",
         "Natural performer", "Strong sense of pride"),
        ("confidence", "creativity", "generosity", "leadership", "passion"),
        ("lion's mane", "solar crown", "golden rays", "stage spotlight", "royal regalia"),
        ("Sun ruled", "fixed fire", "midsummer power", "creative expression"),
    ),
    _sign(
        "Virgo", "♍", "#16A34A", "Earth", "Aug 23 - Sep 22", (8, 23), (9, 22),
        ("Analytical and practical", "Perfectionist tendencies", "Helpful and service-oriented",
         "Detail-oriented and organized", "Health and wellness focused"),
        ("precision", "service", "analysis", "healing", "perfectionism"),
        ("harvest imagery", "healing herbs", "precise geometry", "earth tones",
         "natural elements"),
        ("Mercury ruled", "mutable earth", "harvest time", "practical wisdom"),
    ),
    _sign(
        "Libra", "♎", "#DB2777", "Air", "Sep 23 - Oct 22", (9, 23), (10, 22),
        ("Diplomatic and fair-minded", "Social and cooperative", "Aesthetic and artistic",
         "Seeks balance and harmony", "Charming and gracious"),
        ("balance", "harmony", "justice", "beauty", "diplomacy"),
        ("balanced scales", "rose petals", "pink harmony", "artistic beauty",
         "symmetrical designs"),
        ("Venus ruled", "cardinal air", "autumn equinox", "social grace"),
    ),
    _sign(
        "Scorpio", "♏", "#991B1B", "Water", "Oct 23 - Nov 21", (10, 23), (11, 21),
        ("Intense and passionate", "Mysterious and magnetic", "Determined and powerful",
         "Transformative nature", "Deeply intuitive"),
        ("intensity", "transformation", "mystery", "power", "intuition"),
        ("scorpion imagery", "deep reds", "phoenix rising", "mysterious shadows",
         "transformation symbols"),
        ("Mars & Pluto ruled", "fixed water", "deep autumn", "psychic power"),
    ),
    _sign(
        "Sagittarius", "♐", "#7C3AED", "Fire", "Nov 22 - Dec 21", (11, 22), (12, 21),
        ("Adventurous and free-spirited", "Philosophical and optimistic",
         "Truth-seeking and honest", "Love of travel and exploration",
         "Enthusiastic and energetic"),
        ("adventure", "wisdom", "freedom", "optimism", "exploration"),
        ("archer's bow", "purple flames", "distant horizons", "travel symbols",
         "philosophical imagery"),
        ("Jupiter ruled", "mutable fire", "late autumn", "expansive wisdom"),
    ),
    _sign(
        "Capricorn", "♑", "#374151", "Earth", "Dec 22 - Jan 19", (12, 22), (1, 19),
        ("Ambitious and disciplined", "Responsible and reliable", "Traditional and conservative",
         "Goal-oriented and persistent", "Practical and realistic"),
        ("ambition", "discipline", "responsibility", "persistence", "achievement"),
        ("mountain goat", "stone textures", "ancient wisdom", "crystalline structures",
         "earthy grays"),
        ("Saturn ruled", "cardinal earth", "winter solstice", "structured achievement"),
    ),
    _sign(
        "Aquarius", "♒", "#0891B2", "Air", "Jan 20 - Feb 18", (1, 20), (2, 18),
        ("Independent and original", "Humanitarian and progressive",
         "Intellectual and innovative", "Unconventional and unique", "Friendly and detached"),
        ("innovation", "independence", "humanitarianism", "originality", "progress"),
        ("water bearer", "electric blue", "futuristic elements", "cosmic energy",
         "innovation symbols"),
        ("Saturn & Uranus ruled", "fixed air", "deep winter", "revolutionary spirit"),
    ),
    _sign(
        "Pisces", "♓", "#9333EA", "Water", "Feb 19 - Mar 20", (2, 19), (3, 20),
        ("Compassionate and empathetic", "Artistic and imaginative", "Intuitive and spiritual",
         "Gentle and wise", "Emotionally sensitive"),
        ("compassion", "intuition", "imagination", "spirituality", "empathy"),
        ("twin fish", "oceanic depths", "mystical purples", "ethereal mists",
         "spiritual symbols"),
        ("Jupiter & Neptune ruled", "mutable water", "late winter", "spiritual transcendence"),
    ),
)

# Clé "mois-jour" -> nom de la date remarquable
SPECIAL_DATES = MappingProxyType(
    {
        "2-29": "Leap Day",
        "3-20": "Spring Equinox",
        "6-21": "Summer Solstice",
        "9-22": "Autumn Equinox",
        "12-21": "Winter Solstice",
        "1-1": "New Year",
        "12-31": "New Year's Eve",
        "2-14": "Valentine's Day",
        "10-31": "Halloween",
        "12-25": "Christmas",
    }
)

# Saisons favorables à chaque élément
ELEMENT_SEASON_ALIGNMENTS = MappingProxyType(
    {
        "Fire": frozenset({"Summer", "Spring"}),
        "Earth": frozenset({"Autumn", "Winter"}),
        "Air": frozenset({"Spring", "Summer"}),
        "Water": frozenset({"Winter", "Autumn"}),
    }
)

SEASON_ALIGNMENT_SCORES = MappingProxyType({"Spring": 0.8, "Summer": 0.7})
DEFAULT_SEASON_ALIGNMENT_SCORE = 0.5

ELEMENTS = MappingProxyType(
    {
        "Fire": {"signs": ("Aries", "Leo", "Sagittarius"),
                 "keywords": ("passion", "energy", "action", "inspiration")},
        "Earth": {"signs": ("Taurus", "Virgo", "Capricorn"),
                  "keywords": ("stability", "practicality", "grounding", "material")},
        "Air": {"signs": ("Gemini", "Libra", "Aquarius"),
                "keywords": ("communication", "intellect", "social", "ideas")},
        "Water": {"signs": ("Cancer", "Scorpio", "Pisces"),
                  "keywords": ("emotion", "intuition", "depth", "healing")},
    }
)

MODALITIES = MappingProxyType(
    {
        "Cardinal": {"signs": ("Aries", "Cancer", "Libra", "Capricorn"),
                     "keywords": ("initiation", "leadership", "beginnings")},
        "Fixed": {"signs": ("Taurus", "Leo", "Scorpio", "Aquarius"),
                  "keywords": ("stability", "determination", "persistence")},
        "Mutable": {"signs": ("Gemini", "Virgo", "Sagittarius", "Pisces"),
                    "keywords": ("adaptability", "flexibility", "change")},
    }
)

# Saison "canonique" d'un signe quand aucune date de naissance n'est fournie
SIGN_SEASONS = MappingProxyType(
    {
        "Aries": "Spring", "Taurus": "Spring", "Gemini": "Spring",
        "Cancer": "Summer", "Leo": "Summer", "Virgo": "Summer",
        "Libra": "Autumn", "Scorpio": "Autumn", "Sagittarius": "Autumn",
        "Capricorn": "Winter", "Aquarius": "Winter", "Pisces": "Winter",
    }
)


def modality_of(sign_name: str) -> str | None:
    """Retourne la modalité (Cardinal/Fixed/Mutable) d'un signe."""
    for modality, group in MODALITIES.items():
        if sign_name in group["signs"]:
            return modality
    return None
