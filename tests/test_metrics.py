"""Tests pour les métriques Prometheus.

Ce module teste que les métriques HTTP et métier sont exposées via l'endpoint /metrics.
"""

from fastapi.testclient import TestClient

from zodiac_backend.app.main import app
from zodiac_backend.core.http_constants import HTTP_OK


def test_metrics_exposed():
    """Teste que l'endpoint /metrics expose les métriques Prometheus."""
    c = TestClient(app)
    c.get("/health")
    r = c.get("/metrics")
    assert r.status_code == HTTP_OK
    assert b"http_requests_total" in r.content
    # compteurs métier déclarés même sans observation
    assert b"avatar_fallbacks_total" in r.content
    assert b"storage_uploads_total" in r.content
    assert b"mint_attempts_total" in r.content
