"""
Métriques Prometheus pour l'application.

Ce module définit les métriques HTTP ainsi que les métriques métier du pipeline
avatar -> Arweave -> mint Solana.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Génération d'avatars
AVATAR_GENERATIONS = Counter(
    "avatar_generations_total",
    "Avatar generation requests by outcome",
    ["outcome"],
)
AVATAR_FALLBACKS = Counter(
    "avatar_fallbacks_total",
    "Deterministic fallbacks used during avatar generation",
    ["stage"],
)
AVATAR_LATENCY = Histogram(
    "avatar_generation_seconds",
    "Latency of the full avatar generation pipeline",
)

# Publication Arweave
STORAGE_UPLOADS = Counter(
    "storage_uploads_total",
    "Uploads to durable storage by content type and outcome",
    ["content_type", "outcome"],
)
STORAGE_UPLOAD_BYTES = Histogram(
    "storage_upload_bytes",
    "Size of accepted uploads",
    buckets=[1_000, 10_000, 100_000, 500_000, 1_000_000, 2_500_000, 5_120_000],
)

# Mint
MINT_ATTEMPTS = Counter(
    "mint_attempts_total",
    "Mint attempts by terminal outcome (complete or error kind)",
    ["network", "outcome"],
)


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware Prometheus pour mesurer les métriques HTTP.

    Collecte le nombre de requêtes et la latence par route.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        route = request.scope.get("path", "unknown")
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
