"""
Endpoint de santé pour vérifier la disponibilité de l'API.

Expose `/health` avec l'état général et la configuration des dépendances externes
(sans les contacter).
"""


from fastapi import APIRouter

from zodiac_backend.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Vérifie la disponibilité de l'API et la configuration des fournisseurs."""
    settings = container.settings
    return {
        "status": "ok",
        "network": settings.SOLANA_NETWORK,
        "ai_provider": bool(settings.OPENAI_API_KEY),
        "storage": settings.ARWEAVE_GATEWAY_URL,
    }
