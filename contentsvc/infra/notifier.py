"""Notifications des transitions de cycle de vie.

Objectif du module
------------------
- Publier un événement (`content.review`, `content.published`, ...) vers un webhook externe
  chargé de l'envoi des e-mails.
- Offrir une variante journalisée quand les notifications sont désactivées.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
import structlog


class Notifier(Protocol):
    """Contrat d'envoi d'une notification."""

    async def notify(self, event_kind: str, context: dict[str, Any]) -> None: ...


class LoggingNotifier:
    """Notifier inerte: journalise l'événement sans l'envoyer."""

    def __init__(self) -> None:
        self._log = structlog.get_logger(__name__)

    async def notify(self, event_kind: str, context: dict[str, Any]) -> None:
        self._log.info(
            "notification_skipped", event=event_kind, content_id=context.get("content_id")
        )


class WebhookNotifier:
    """Envoie `{event, context}` en POST JSON vers `url`."""

    def __init__(
        self,
        url: str,
        timeout_s: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise le client HTTP du webhook."""
        self.url = url
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_s), transport=transport)

    async def notify(self, event_kind: str, context: dict[str, Any]) -> None:
        """Publie l'événement; lève `httpx.HTTPError` en cas d'échec."""
        resp = await self._client.post(self.url, json={"event": event_kind, "context": context})
        resp.raise_for_status()

    async def aclose(self) -> None:
        await self._client.aclose()
