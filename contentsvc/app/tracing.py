"""Configuration du tracing OpenTelemetry.

Les spans sont exportés vers l'endpoint OTLP configuré (`OTLP_ENDPOINT`); sans endpoint, le tracing
reste désactivé.
"""

from __future__ import annotations

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from contentsvc.core.settings import Settings

log = structlog.get_logger(__name__)


def setup_tracing(settings: Settings) -> bool:
    """Installe le provider de tracing si un endpoint OTLP est configuré.

    Retourne True si le tracing a été activé.
    """
    if not settings.OTLP_ENDPOINT:
        return False

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: settings.APP_NAME}))
    processor = BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.OTLP_ENDPOINT, insecure=True))
    provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    log.info("tracing_enabled", endpoint=settings.OTLP_ENDPOINT)
    return True
