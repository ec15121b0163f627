"""Interfaces de base pour les fournisseurs IA (texte et image)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from zodiac_backend.domain.entities import ImageRef


class LLM(ABC):
    """Interface abstraite pour les modèles de langage."""

    @abstractmethod
    async def generate(
        self,
        messages: list[dict[str, str]],
        *,
        json_mode: bool = False,
        **kwargs: Any,
    ) -> str:
        """Génère une réponse à partir d'une liste de messages (system + user).

        Lève `ProviderError` si le fournisseur est indisponible ou ne répond rien.
        Toute autre exception est un défaut de l'implémentation: le générateur
        d'avatars ne la remplace pas par un texte de secours et la remonte en
        `GenerationFailedError`.
        """
        ...


class ImageGenerator(ABC):
    """Interface abstraite pour la génération d'images."""

    @abstractmethod
    async def generate_image(self, prompt: str, *, size: str = "1024x1024") -> ImageRef:
        """Génère une image; lève `ProviderError` en cas d'échec."""
        ...
