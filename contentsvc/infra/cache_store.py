"""
Stores clé/valeur pour le cache des taxonomies.

Ce module fournit une version en mémoire et une version Redis d'un store minimal
`get(key) -> value | None` / `set(key, value)`. Aucune politique d'éviction n'est imposée ici; la
version Redis applique un TTL optionnel.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol

import redis.asyncio as aioredis


class CacheStore(Protocol):
    """Contrat du store utilisé par le cache de taxonomies."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...


class InMemoryCacheStore:
    """
    Store en mémoire (utilisé pour dev/tests).

    Les écritures concurrentes sur une même clé se résolvent en dernier-écrivain-gagne.
    """

    def __init__(self):
        """Initialise un store mémoire vide."""
        self._db: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        """Retourne la valeur, ou None si absente."""
        return self._db.get(key)

    async def set(self, key: str, value: Any) -> None:
        """Enregistre/écrase la valeur."""
        async with self._lock:
            self._db[key] = value

    def __len__(self) -> int:
        return len(self._db)


class RedisCacheStore:
    """Store adossé à Redis (clé: `{prefix}{key}`, valeur JSON)."""

    def __init__(self, url: str, prefix: str = "", ttl_s: int = 0):
        """Crée un client Redis asynchrone à partir de l'URL fournie."""
        self.client = aioredis.Redis.from_url(url, decode_responses=True)
        self.prefix = prefix
        self.ttl_s = ttl_s

    async def get(self, key: str) -> Any | None:
        """Charge et désérialise `{prefix}{key}`, si présent."""
        raw = await self.client.get(f"{self.prefix}{key}")
        return json.loads(raw) if raw else None

    async def set(self, key: str, value: Any) -> None:
        """Sérialise en JSON et stocke sous `{prefix}{key}` (avec TTL si configuré)."""
        await self.client.set(
            f"{self.prefix}{key}", json.dumps(value), ex=self.ttl_s if self.ttl_s > 0 else None
        )

    async def aclose(self) -> None:
        """Ferme la connexion Redis."""
        await self.client.aclose()
