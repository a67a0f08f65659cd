"""Garde de concurrence optimiste.

Avant toute mise à jour, le `versionKey` courant est relu chez le provider (lecture en mode édition
limitée au champ `versionKey`) puis attaché à la requête. Le provider reste seul arbitre: il rejette
les jetons périmés, ce service ne réconcilie jamais deux écritures.
"""

from __future__ import annotations

import structlog

from contentsvc.core.messages import UPDATE
from contentsvc.domain.errors import UpstreamError
from contentsvc.domain.upstream import checked

VERSION_QUERY = {"mode": "edit", "fields": "versionKey"}


class ConcurrencyGuard:
    """Lit le jeton de version courant d'un contenu."""

    def __init__(self, provider):
        self.provider = provider
        self._log = structlog.get_logger(__name__)

    async def fetch_current_version(self, content_id: str, headers: dict | None = None) -> str:
        """Retourne le `versionKey` courant de `content_id`.

        Raises:
            UpstreamError: lecture en échec ou jeton absent de la réponse.
        """
        result = await checked(
            self.provider.get_by_id(content_id, dict(VERSION_QUERY), headers),
            UPDATE,
            "read_version",
        )
        version_key = (result.result.get("content") or {}).get("versionKey")
        if not version_key:
            self._log.error("version_key_missing", content_id=content_id)
            raise UpstreamError(UPDATE.failed_code, "versionKey missing from provider response")
        return version_key
