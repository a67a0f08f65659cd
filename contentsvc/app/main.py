"""
Application principale FastAPI.

Ce module assemble tous les composants du service de contenus : middlewares, gestionnaires
d'erreurs, routes et métriques.

Responsabilités du module:
- Initialiser le logging structuré et le tracing
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (request id, métriques/timing)
- Monter les routers (santé, contenus, plugins, métriques)
- Fermer proprement les clients réseau à l'arrêt
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from contentsvc.api.routes_content import plugins_router
from contentsvc.api.routes_content import router as content_router
from contentsvc.api.routes_health import router as health_router
from contentsvc.apigw.errors import install_error_handlers
from contentsvc.app.metrics import PrometheusMiddleware, metrics_router
from contentsvc.app.tracing import setup_tracing
from contentsvc.core.container import container
from contentsvc.core.logging import setup_logging
from contentsvc.middlewares.request_id import RequestIDMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await container.aclose()


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog) et le tracing OTLP éventuel
    - Lit les paramètres d'exécution
    - Enregistre les gestionnaires d'erreurs (enveloppes standard)
    - Ajoute les middlewares utiles au debug/traçabilité
    - Publie les routes de santé, de contenus et de métriques
    """
    settings = container.settings
    setup_logging(debug=settings.APP_DEBUG)
    setup_tracing(settings)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG, lifespan=lifespan)
    install_error_handlers(app)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.include_router(health_router)
    app.include_router(content_router)
    app.include_router(plugins_router)
    app.include_router(metrics_router)
    return app


app = create_app()
