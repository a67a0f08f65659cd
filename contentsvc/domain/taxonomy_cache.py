"""Cache-aside des taxonomies (frameworks) du provider.

Une taxonomie absente du store est lue chez le provider puis écrite dans le store, uniquement si
la lecture a réussi. Les erreurs du store sont journalisées et absorbées; les erreurs de lecture
provider remontent en `UpstreamError`. Aucune coalescence des requêtes: deux absences simultanées
sur la même clé produisent deux lectures, la dernière écriture l'emporte.
"""

from __future__ import annotations

from typing import Any

import structlog

from contentsvc.app.metrics import TAXONOMY_CACHE
from contentsvc.core.messages import FRAMEWORK
from contentsvc.domain.upstream import checked
from contentsvc.infra.cache_store import CacheStore


class TaxonomyCache:
    """Résout un identifiant de framework en document de taxonomie."""

    def __init__(self, provider, store: CacheStore):
        self.provider = provider
        self.store = store
        self._log = structlog.get_logger(__name__)

    async def _read_cached(self, framework_id: str) -> Any | None:
        try:
            return await self.store.get(framework_id)
        except Exception as exc:
            TAXONOMY_CACHE.labels("error").inc()
            self._log.warning("taxonomy_cache_get_failed", framework=framework_id, error=repr(exc))
            return None

    async def get_or_fetch(
        self, framework_id: str, headers: dict | None = None
    ) -> dict[str, Any]:
        """Retourne le document `{framework: {categories: [...]}}` du framework."""
        cached = await self._read_cached(framework_id)
        if cached:
            TAXONOMY_CACHE.labels("hit").inc()
            return cached

        TAXONOMY_CACHE.labels("miss").inc()
        result = await checked(
            self.provider.get_framework(framework_id, headers), FRAMEWORK, "framework_read"
        )
        document = result.result
        self._log.info("taxonomy_fetched", framework=framework_id)
        try:
            await self.store.set(framework_id, document)
        except Exception as exc:
            TAXONOMY_CACHE.labels("set_error").inc()
            self._log.error("taxonomy_cache_set_failed", framework=framework_id, error=repr(exc))
        return document
