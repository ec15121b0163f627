"""Middleware Starlette de mesure du temps de traitement.

Ajoute l'en-tête X-Process-Time-ms et journalise les requêtes lentes (génération
d'avatar, upload Arweave) au-delà d'un seuil configurable.
"""

import time
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

log = structlog.get_logger(__name__)

SLOW_REQUEST_MS = 10_000


class TimingMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        header_name: str = "X-Process-Time-ms",
        slow_threshold_ms: int = SLOW_REQUEST_MS,
    ) -> None:
        super().__init__(app)
        self.header_name = header_name
        self.slow_threshold_ms = slow_threshold_ms

    async def dispatch(self, request, call_next: Callable):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers[self.header_name] = str(duration_ms)
        if duration_ms >= self.slow_threshold_ms:
            log.warning("slow_request", duration_ms=duration_ms, status=response.status_code)
        return response
