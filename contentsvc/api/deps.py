"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Exposer l'orchestrateur du conteneur aux endpoints (surchargeable en test via
  `app.dependency_overrides`).
- Extraire l'acteur et les en-têtes relayés vers le provider.
"""

from fastapi import Header, Request

from contentsvc.core.container import container
from contentsvc.domain.orchestrator import LifecycleOrchestrator


def get_orchestrator() -> LifecycleOrchestrator:
    """Retourne l'orchestrateur partagé."""
    return container.orchestrator


def acting_user(
    x_authenticated_userid: str | None = Header(default=None, alias="X-Authenticated-Userid"),
) -> str | None:
    """Identifiant de l'utilisateur authentifié, posé par la passerelle amont."""
    return x_authenticated_userid


def forwarded_headers(request: Request) -> dict[str, str]:
    """Sous-ensemble configuré des en-têtes entrants, relayé tel quel au provider."""
    wanted = {h.lower() for h in container.settings.FORWARDED_HEADERS}
    return {k: v for k, v in request.headers.items() if k.lower() in wanted}


def trace_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)
