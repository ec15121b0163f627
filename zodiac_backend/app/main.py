"""
Application principale FastAPI.

Ce module assemble tous les composants de l'application : middlewares, handlers
d'erreurs, routes et métriques de l'API d'avatars zodiacaux.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (timing, métriques, CORS, request id)
- Enregistrer l'enveloppe d'erreur standard
- Monter les routers (santé, zodiaque, avatar, publication, mint, connexion)
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from zodiac_backend.api.errors import register_error_handlers
from zodiac_backend.api.routes_avatar import router as avatar_router
from zodiac_backend.api.routes_health import router as health_router
from zodiac_backend.api.routes_mint import router as mint_router
from zodiac_backend.api.routes_publish import router as publish_router
from zodiac_backend.api.routes_signin import router as signin_router
from zodiac_backend.api.routes_zodiac import router as zodiac_router
from zodiac_backend.app.metrics import PrometheusMiddleware, metrics_router
from zodiac_backend.core.container import container
from zodiac_backend.core.logging import setup_logging
from zodiac_backend.middlewares.request_id import RequestIDMiddleware
from zodiac_backend.middlewares.timing import TimingMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Le middleware request id est ajouté en dernier: il enveloppe les autres, si bien
    que leurs logs portent déjà le `request_id`.
    """
    settings = container.settings
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(PrometheusMiddleware)
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin).rstrip("/") for origin in settings.CORS_ORIGINS],
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(zodiac_router)
    app.include_router(avatar_router)
    app.include_router(publish_router)
    app.include_router(mint_router)
    app.include_router(signin_router)
    app.include_router(metrics_router)
    return app


app = create_app()
