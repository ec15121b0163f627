"""
Clients IA basés sur le SDK OpenAI (asynchrone).

Implémente les interfaces LLM et ImageGenerator:
- chat.completions, avec mode JSON puis repli sans `response_format`
- images.generate, réponse en URL ou en base64

Contrairement aux services du domaine, ces clients ne masquent pas les échecs: ils
lèvent `ProviderError`, et c'est le générateur d'avatars qui choisit le contenu de
secours.
"""

from __future__ import annotations

from typing import Any

import structlog
from openai import AsyncOpenAI, OpenAIError

from zodiac_backend.domain.entities import ImageRef
from zodiac_backend.domain.errors import ProviderError
from zodiac_backend.infra.llm.base import LLM, ImageGenerator

log = structlog.get_logger(__name__)


def _make_client(api_key: str | None, timeout: float) -> AsyncOpenAI | None:
    if not api_key:
        return None
    return AsyncOpenAI(api_key=api_key, timeout=timeout)


class OpenAILLM(LLM):
    """
    LLM basé sur OpenAI.

    Sans clé API, chaque appel lève `ProviderError("not configured")`.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4-turbo-preview",
        fallback_model: str = "gpt-4",
        timeout: float = 60.0,
    ) -> None:
        self.model = model
        self.fallback_model = fallback_model
        self.client = _make_client(api_key, timeout)

    async def generate(
        self,
        messages: list[dict[str, str]],
        *,
        json_mode: bool = False,
        **kwargs: Any,
    ) -> str:
        if self.client is None:
            raise ProviderError("OpenAI client not configured")

        content: str | None = None
        if json_mode:
            # Tous les modèles n'acceptent pas response_format: on retente sans.
            try:
                content = await self._chat(
                    self.model, messages, response_format={"type": "json_object"}, **kwargs
                )
            except OpenAIError as err:
                log.info("openai_json_mode_unsupported", model=self.model, error=str(err))
                content = await self._chat_or_raise(self.fallback_model, messages, **kwargs)
        else:
            content = await self._chat_or_raise(self.model, messages, **kwargs)

        if not content:
            raise ProviderError("No response from OpenAI")
        return content

    async def _chat(self, model: str, messages: list[dict[str, str]], **kwargs: Any) -> str | None:
        resp = await self.client.chat.completions.create(  # type: ignore[union-attr]
            model=model,
            messages=messages,
            **kwargs,
        )
        if not resp.choices:
            return None
        message = getattr(resp.choices[0], "message", None)
        return getattr(message, "content", None)

    async def _chat_or_raise(
        self, model: str, messages: list[dict[str, str]], **kwargs: Any
    ) -> str | None:
        try:
            return await self._chat(model, messages, **kwargs)
        except OpenAIError as err:
            raise ProviderError(f"OpenAI chat completion failed: {err}") from err


class OpenAIImageGenerator(ImageGenerator):
    """Génération d'images via `images.generate`."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-image-1",
        quality: str = "high",
        timeout: float = 120.0,
    ) -> None:
        self.model = model
        self.quality = quality
        self.client = _make_client(api_key, timeout)

    async def generate_image(self, prompt: str, *, size: str = "1024x1024") -> ImageRef:
        if self.client is None:
            raise ProviderError("OpenAI client not configured")
        log.debug("openai_image_request", model=self.model, prompt_length=len(prompt))
        try:
            resp = await self.client.images.generate(
                model=self.model,
                prompt=prompt,
                size=size,
                quality=self.quality,
                n=1,
            )
        except OpenAIError as err:
            raise ProviderError(f"OpenAI image generation failed: {err}") from err

        if not resp.data:
            raise ProviderError("No image data returned from OpenAI")
        image = resp.data[0]
        if getattr(image, "url", None):
            return ImageRef(url=image.url)
        if getattr(image, "b64_json", None):
            return ImageRef(b64_json=image.b64_json)
        raise ProviderError("No image URL or base64 data returned")
