"""
Métriques Prometheus pour le service de contenus.

Ce module définit les métriques HTTP, les métriques d'appels provider, du cache de taxonomies,
des retraits en lot et des notifications, ainsi que l'endpoint `/metrics`.
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

# Provider calls
PROVIDER_CALLS = Counter(
    "provider_calls_total",
    "Total calls issued to the content provider",
    ["operation", "outcome"],
)
PROVIDER_LATENCY = Histogram(
    "provider_call_duration_seconds",
    "Latency of content provider calls",
    ["operation"],
)

# Taxonomy cache (cache-aside)
TAXONOMY_CACHE = Counter(
    "taxonomy_cache_total",
    "Taxonomy cache lookups by result",
    ["result"],  # hit | miss | error | set_error
)

# Business metrics
RETIRE_BATCH_FAILURES = Counter(
    "content_retire_batch_failures_total",
    "Per-item failures observed in batch retire",
)
NOTIFICATIONS = Counter(
    "content_notifications_total",
    "Lifecycle notifications dispatched",
    ["event", "outcome"],
)


def normalize_route(request: Request) -> str:
    """Gabarit de route (ex: `/v1/content/read/{content_id}`), pour borner la cardinalité."""
    route = request.scope.get("route")
    path_format = getattr(route, "path_format", None) or getattr(route, "path", None)
    return path_format or "unmatched"


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

    Collecte le comptage des requêtes et la latence par gabarit de route, et publie la durée en
    millisecondes dans l'en-tête `X-Process-Time-ms`.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Traite une requête HTTP et collecte les métriques.

        Args:
            request: Requête HTTP entrante.
            call_next: Fonction pour appeler le middleware suivant.

        Returns:
            Response: Réponse HTTP avec métriques collectées.
        """
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed = time.perf_counter() - start
        route = normalize_route(request)
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(elapsed)
        response.headers["X-Process-Time-ms"] = str(int(elapsed * 1000))
        return response
