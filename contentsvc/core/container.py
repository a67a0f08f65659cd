"""
Conteneur d'injection de dépendances du service de contenus.

Instancie les composants centraux (settings, client provider, store du cache de taxonomies,
notifier, orchestrateur) et expose un singleton `container` utilisé par la couche API.
"""

import structlog

from contentsvc.core.settings import Settings, get_settings
from contentsvc.domain.facets import FacetEnricher
from contentsvc.domain.orchestrator import LifecycleOrchestrator
from contentsvc.domain.taxonomy_cache import TaxonomyCache
from contentsvc.domain.validation import RequestValidator
from contentsvc.infra.cache_store import InMemoryCacheStore, RedisCacheStore
from contentsvc.infra.notifier import LoggingNotifier, WebhookNotifier
from contentsvc.infra.provider_client import ProviderClient

log = structlog.get_logger(__name__)


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        s = self.settings
        self.provider = ProviderClient(
            base_url=s.PROVIDER_BASE_URL,
            api_key=s.PROVIDER_API_KEY,
            timeout_s=s.PROVIDER_TIMEOUT_S,
            max_connections=s.PROVIDER_MAX_CONNECTIONS,
        )

        if s.REDIS_URL:
            try:
                self.cache_store = RedisCacheStore(
                    s.REDIS_URL, prefix=s.TAXONOMY_CACHE_PREFIX, ttl_s=s.TAXONOMY_CACHE_TTL_S
                )
                self.storage_backend = "redis"
            except Exception as err:
                if s.REQUIRE_REDIS:
                    raise RuntimeError("Redis required but unavailable") from err
                log.warning("redis_unavailable_fallback_memory", error=repr(err))
                self.cache_store = InMemoryCacheStore()
                self.storage_backend = "memory-fallback"
        else:
            if s.REQUIRE_REDIS:
                raise RuntimeError("Redis required but REDIS_URL not set")
            self.cache_store = InMemoryCacheStore()
            self.storage_backend = "memory"

        if s.NOTIFY_ENABLED and s.NOTIFY_WEBHOOK_URL:
            self.notifier = WebhookNotifier(s.NOTIFY_WEBHOOK_URL)
        else:
            self.notifier = LoggingNotifier()

        self.taxonomy = TaxonomyCache(self.provider, self.cache_store)
        self.orchestrator = LifecycleOrchestrator(
            self.provider,
            self.taxonomy,
            notifier=self.notifier,
            validator=RequestValidator(),
            enricher=FacetEnricher(),
            code_prefix=s.CONTENT_CODE_PREFIX,
            default_language=s.DEFAULT_LANGUAGE,
            content_content_types=s.CONTENT_DEFAULT_CONTENT_TYPES,
        )

    async def aclose(self) -> None:
        """Attend les notifications en vol puis ferme les clients réseau."""
        await self.orchestrator.drain_notifications()
        await self.provider.aclose()
        for resource in (self.notifier, self.cache_store):
            close = getattr(resource, "aclose", None)
            if close is not None:
                await close()


container = Container()
