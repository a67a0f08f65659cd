# ============================================================
# Module : contentsvc/infra/provider_client.py
# Objet  : Client HTTP asynchrone vers le provider de contenus.
# Contexte : Seul point d'accès réseau au backend de gestion de contenus.
# Invariants :
#  - Chaque appel renvoie une enveloppe ProviderResult, jamais une exception HTTP brute.
#  - Les erreurs de transport (timeout, connexion) lèvent ProviderTransportError.
#  - Aucun retry ici: le provider reste le seul arbitre des conflits.
# ============================================================
"""Client HTTP du provider de contenus.

Ce module encapsule les appels REST du provider (recherche, lecture, création, mise à jour,
transitions de cycle de vie, frameworks) derrière une interface asynchrone unique.
"""

from __future__ import annotations

import time as _t
from typing import Any

import httpx
import structlog

from contentsvc.app.metrics import PROVIDER_CALLS, PROVIDER_LATENCY
from contentsvc.core.http_constants import HTTP_BAD_GATEWAY, HTTP_GATEWAY_TIMEOUT
from contentsvc.domain.entities import ProviderResult

_SEARCH_PATH = "/content/v3/search"
_COMPOSITE_SEARCH_PATH = "/composite/v3/search"


class ProviderTransportError(RuntimeError):
    """Erreur réseau entre le service et le provider (avec statut indicatif)."""

    def __init__(self, status_code: int, message: str) -> None:
        """Initialize provider transport error."""
        self.status_code = status_code
        super().__init__(message)


class ProviderClient:
    """Client asynchrone du provider.

    Variables de configuration utilisées:
      - `base_url`: URL racine du provider.
      - `api_key`: jeton Bearer ajouté à chaque requête (optionnel).
      - `timeout_s`: timeout global par requête; son dépassement devient un 504.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout_s: float = 10.0,
        max_connections: int = 50,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the provider client with a pooled AsyncClient."""
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._log = structlog.get_logger(__name__).bind(component="provider_client")
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(
                max_keepalive_connections=max(1, max_connections // 2),
                max_connections=max_connections,
            ),
            transport=transport,
        )

    async def aclose(self) -> None:
        """Ferme le pool de connexions."""
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> ProviderResult:
        start = _t.perf_counter()
        outcome = "error"
        try:
            resp = await self._client.request(
                method, path, headers=headers or {}, json=json, params=params
            )
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            if not isinstance(payload, dict):
                self._log.warning("provider_payload_not_object", operation=operation, path=path)
                payload = None
            result = ProviderResult.from_payload(payload, resp.status_code)
            outcome = "success" if result.ok else "failure"
            return result
        except httpx.TimeoutException as exc:
            self._log.error("provider_timeout", operation=operation, path=path)
            raise ProviderTransportError(HTTP_GATEWAY_TIMEOUT, f"provider timeout: {exc}") from exc
        except httpx.HTTPError as exc:
            self._log.error("provider_transport_error", operation=operation, error=repr(exc))
            raise ProviderTransportError(HTTP_BAD_GATEWAY, f"provider unreachable: {exc}") from exc
        finally:
            PROVIDER_CALLS.labels(operation, outcome).inc()
            PROVIDER_LATENCY.labels(operation).observe(_t.perf_counter() - start)

    # --- recherche -------------------------------------------------------

    async def composite_search(self, body: dict, headers: dict | None = None) -> ProviderResult:
        """Recherche composite (facettes incluses)."""
        return await self._request(
            "composite_search", "POST", _COMPOSITE_SEARCH_PATH, headers=headers, json=body
        )

    async def search(self, body: dict, headers: dict | None = None) -> ProviderResult:
        """Recherche de contenus par identifiants ou critères."""
        return await self._request("search", "POST", _SEARCH_PATH, headers=headers, json=body)

    async def plugins_search(self, body: dict, headers: dict | None = None) -> ProviderResult:
        """Recherche de plugins d'édition."""
        return await self._request(
            "plugins_search", "POST", _SEARCH_PATH, headers=headers, json=body
        )

    # --- lecture ---------------------------------------------------------

    async def get_by_id(
        self, content_id: str, query: dict | None = None, headers: dict | None = None
    ) -> ProviderResult:
        """Lit un contenu; `query` porte `mode`, `fields`, etc."""
        return await self._request(
            "read", "GET", f"/content/v3/read/{content_id}", headers=headers, params=query
        )

    async def get_framework(self, framework_id: str, headers: dict | None = None) -> ProviderResult:
        """Lit un framework (catégories et termes)."""
        return await self._request(
            "framework_read", "GET", f"/framework/v3/read/{framework_id}", headers=headers
        )

    # --- mutations -------------------------------------------------------

    async def _post(
        self, operation: str, path: str, body: dict, headers: dict | None
    ) -> ProviderResult:
        return await self._request(operation, "POST", path, headers=headers, json=body)

    async def create(self, body: dict, headers: dict | None = None) -> ProviderResult:
        return await self._post("create", "/content/v3/create", body, headers)

    async def update(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        return await self._request(
            "update", "PATCH", f"/content/v3/update/{content_id}", headers=headers, json=body
        )

    async def system_update(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        """Mise à jour technique (métadonnées seules, sans contrôle de versionKey)."""
        return await self._request(
            "system_update",
            "PATCH",
            f"/system/v3/content/update/{content_id}",
            headers=headers,
            json=body,
        )

    async def review(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        return await self._post("review", f"/content/v3/review/{content_id}", body, headers)

    async def publish(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        return await self._post("publish", f"/content/v3/publish/{content_id}", body, headers)

    async def unlisted_publish(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        return await self._post(
            "unlisted_publish", f"/content/v3/unlisted/publish/{content_id}", body, headers
        )

    async def reject(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        return await self._post("reject", f"/content/v3/reject/{content_id}", body, headers)

    async def retire(self, content_id: str, headers: dict | None = None) -> ProviderResult:
        return await self._request(
            "retire", "DELETE", f"/content/v3/retire/{content_id}", headers=headers
        )

    async def copy(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        return await self._post("copy", f"/content/v3/copy/{content_id}", body, headers)

    async def accept_flag(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        return await self._post(
            "accept_flag", f"/content/v3/flag/accept/{content_id}", body, headers
        )

    async def reject_flag(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        return await self._post(
            "reject_flag", f"/content/v3/flag/reject/{content_id}", body, headers
        )

    async def upload_url(
        self, body: dict, content_id: str, headers: dict | None = None
    ) -> ProviderResult:
        """Demande une URL pré-signée de téléversement."""
        return await self._post("upload_url", f"/content/v3/upload/url/{content_id}", body, headers)
