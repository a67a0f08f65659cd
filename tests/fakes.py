"""
Fakes et helpers pour les tests unitaires.

Ce module fournit un provider simulé (AsyncMock), des constructeurs d'enveloppes provider et un
notifier qui enregistre les événements reçus.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

from contentsvc.domain.entities import ProviderResult

PROVIDER_METHODS = (
    "search",
    "composite_search",
    "plugins_search",
    "get_by_id",
    "get_framework",
    "create",
    "update",
    "system_update",
    "review",
    "publish",
    "unlisted_publish",
    "reject",
    "retire",
    "copy",
    "accept_flag",
    "reject_flag",
    "upload_url",
)


def ok(result: dict[str, Any] | None = None) -> ProviderResult:
    """Enveloppe provider en succès."""
    return ProviderResult(result=result or {})


def failed(
    err: str | None = "ERR_UPSTREAM",
    errmsg: str | None = "upstream failure",
    status_code: int = 400,
    response_code: str = "CLIENT_ERROR",
) -> ProviderResult:
    """Enveloppe provider en échec."""
    return ProviderResult(
        response_code=response_code, status_code=status_code, err=err, errmsg=errmsg
    )


def make_provider() -> AsyncMock:
    """Provider simulé: toutes les méthodes répondent OK avec un résultat vide par défaut."""
    provider = AsyncMock()
    for name in PROVIDER_METHODS:
        setattr(provider, name, AsyncMock(return_value=ok()))
    return provider


class RecordingNotifier:
    """Notifier factice qui mémorise `(event_kind, context)`."""

    def __init__(self, fail: bool = False) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []
        self.fail = fail

    async def notify(self, event_kind: str, context: dict[str, Any]) -> None:
        self.events.append((event_kind, context))
        if self.fail:
            raise RuntimeError("webhook down")
