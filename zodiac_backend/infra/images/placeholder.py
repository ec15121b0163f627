"""Image de secours générée localement (PNG).

Utilisée quand le fournisseur d'images échoue: un dégradé radial violet/rose/cyan
avec un cercle et une légende. Le rendu est déterministe.
"""

from __future__ import annotations

import io

from PIL import Image, ImageDraw

PLACEHOLDER_SIZE = 512
_STOPS = ((0x93, 0x33, 0xEA), (0xEC, 0x48, 0x99), (0x06, 0xB6, 0xD4))


def _lerp(a: tuple[int, int, int], b: tuple[int, int, int], t: float) -> tuple[int, int, int]:
    return tuple(round(x + (y - x) * t) for x, y in zip(a, b, strict=True))  # type: ignore[return-value]


def _gradient_color(t: float) -> tuple[int, int, int]:
    # t=0 au centre, t=1 au bord
    if t <= 0.5:
        return _lerp(_STOPS[0], _STOPS[1], t / 0.5)
    return _lerp(_STOPS[1], _STOPS[2], (t - 0.5) / 0.5)


def _centered_text(
    draw: ImageDraw.ImageDraw, x: int, y: int, text: str, fill: tuple[int, int, int]
) -> None:
    # textlength fonctionne aussi avec la police bitmap par défaut
    width = draw.textlength(text)
    draw.text((x - width / 2, y - 6), text, fill=fill)


def render_placeholder_png(label: str = "Cosmic Avatar", size: int = PLACEHOLDER_SIZE) -> bytes:
    image = Image.new("RGB", (size, size), _STOPS[2])
    draw = ImageDraw.Draw(image)
    center = size // 2
    max_radius = int(center * 1.42)
    # Cercles concentriques du bord vers le centre
    for radius in range(max_radius, 0, -2):
        color = _gradient_color(min(radius / center, 1.0))
        draw.ellipse(
            (center - radius, center - radius, center + radius, center + radius), fill=color
        )

    ring = size // 5
    draw.ellipse(
        (center - ring, center - ring, center + ring, center + ring),
        outline=(255, 255, 255),
        width=2,
    )
    _centered_text(draw, center, center, label, (255, 255, 255))
    _centered_text(draw, center, center + 24, "Generated by AI", (235, 235, 235))

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()

