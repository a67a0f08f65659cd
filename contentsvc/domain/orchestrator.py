"""Orchestrateur du cycle de vie des contenus.

Ce module coordonne, pour chaque opération, la séquence validation -> garde -> appel provider ->
composition de la réponse. Les gardes (concurrence optimiste, verrouillage, propriété) et
l'agrégation des échecs partiels du retrait en lot vivent ici; le transport HTTP, le cache et les
notifications sont des collaborateurs injectés.
"""

from __future__ import annotations

import asyncio
import copy
import secrets
import string
from typing import Any

import structlog

from contentsvc.app.metrics import NOTIFICATIONS, RETIRE_BATCH_FAILURES
from contentsvc.core import messages as msg
from contentsvc.core.http_constants import (
    CODE_SUFFIX_LENGTH,
    HTTP_INTERNAL_SERVER_ERROR,
    RELEASE_LOCK_API,
    RESPONSE_SERVER_ERROR,
)
from contentsvc.domain.concurrency import ConcurrencyGuard
from contentsvc.domain.entities import BadgeAssertion, OperationResult, RetireFailure
from contentsvc.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from contentsvc.domain.facets import FacetEnricher
from contentsvc.domain.lock_validator import LockValidator
from contentsvc.domain.taxonomy_cache import TaxonomyCache
from contentsvc.domain.upstream import checked
from contentsvc.domain.validation import RequestValidator
from contentsvc.infra.notifier import LoggingNotifier, Notifier
from contentsvc.infra.provider_client import ProviderTransportError

_CODE_ALPHABET = string.ascii_letters + string.digits


def _missing(messages: msg.OperationMessages) -> ValidationError:
    return ValidationError(messages.missing_code, messages.missing_message)


def _content_of(request: Any) -> dict[str, Any] | None:
    if not isinstance(request, dict):
        return None
    content = request.get("content")
    return content if isinstance(content, dict) else None


def _version_summary(result: dict[str, Any]) -> dict[str, Any]:
    return {"content_id": result.get("node_id"), "versionKey": result.get("versionKey")}


def _signal(error_cls: type, message: str) -> OperationResult:
    """Réponse de succès portant le statut d'un signal (conflit, absence)."""
    return OperationResult(
        result={"content": {"message": message}},
        status_code=error_cls.status_code,
        response_code=error_cls.response_code,
    )


class LifecycleOrchestrator:
    """Point d'entrée de toutes les opérations de cycle de vie et de recherche."""

    def __init__(
        self,
        provider,
        taxonomy: TaxonomyCache,
        notifier: Notifier | None = None,
        validator: RequestValidator | None = None,
        enricher: FacetEnricher | None = None,
        *,
        code_prefix: str = "org.content.",
        default_language: str = "en",
        content_content_types: list[str] | None = None,
    ):
        """Initialise l'orchestrateur avec ses collaborateurs.

        Paramètres:
        - provider: client du provider (interface de `ProviderClient`).
        - taxonomy: cache-aside des frameworks, partagé entre requêtes.
        - notifier: destinataire des événements de transition (fire-and-forget).
        - validator: profils de validation `create` / `update`.
        - enricher: fusion facettes/taxonomie.
        """
        self.provider = provider
        self.taxonomy = taxonomy
        self.notifier = notifier or LoggingNotifier()
        self.validator = validator or RequestValidator()
        self.enricher = enricher or FacetEnricher()
        self.guard = ConcurrencyGuard(provider)
        self.lock = LockValidator(provider)
        self.code_prefix = code_prefix
        self.default_language = default_language
        self.content_content_types = list(content_content_types or [])
        self._pending: set[asyncio.Task] = set()
        self._log = structlog.get_logger(__name__)

    # --- notifications -----------------------------------------------------

    def _notify(self, event_kind: str, context: dict[str, Any]) -> None:
        """Planifie l'envoi d'une notification sans l'attendre."""
        task = asyncio.get_running_loop().create_task(self._deliver(event_kind, context))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, event_kind: str, context: dict[str, Any]) -> None:
        try:
            await self.notifier.notify(event_kind, context)
            NOTIFICATIONS.labels(event_kind, "sent").inc()
        except Exception as exc:
            NOTIFICATIONS.labels(event_kind, "failed").inc()
            self._log.warning("notification_failed", event=event_kind, error=repr(exc))

    async def drain_notifications(self) -> None:
        """Attend les notifications en vol (arrêt du service, tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def generate_code(self) -> str:
        """Code lisible: préfixe configuré + suffixe aléatoire alphanumérique."""
        suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(CODE_SUFFIX_LENGTH))
        return f"{self.code_prefix}{suffix}"

    # --- recherche ---------------------------------------------------------

    async def search(
        self,
        request: dict[str, Any] | None,
        *,
        object_type: list[str] | None = None,
        fields: list[str] | None = None,
        framework: str | None = None,
        language: str | None = None,
        headers: dict | None = None,
    ) -> OperationResult:
        """Recherche composite, enrichie par la taxonomie si un framework est fourni.

        Un échec de résolution du framework n'échoue pas la requête: le résultat est alors
        renvoyé sans enrichissement.
        """
        if not isinstance(request, dict) or not isinstance(request.get("filters"), dict):
            raise _missing(msg.SEARCH)
        request = copy.deepcopy(request)
        filters = request["filters"]
        if fields:
            request["fields"] = list(fields)
        if object_type:
            filters["objectType"] = list(object_type)

        res = await checked(
            self.provider.composite_search({"request": request}, headers), msg.SEARCH, "search"
        )
        result = res.result
        if framework:
            try:
                document = await self.taxonomy.get_or_fetch(framework, headers)
            except UpstreamError as exc:
                self._log.warning("framework_resolution_failed", framework=framework, code=exc.code)
                return OperationResult(result=result)
            categories = (document.get("framework") or {}).get("categories")
            if result.get("facets") and categories:
                self.enricher.enrich(
                    result["facets"], categories, language or self.default_language
                )
        self._log.info("content_searched", count=result.get("count"))
        return OperationResult(result=result)

    async def search_content(self, request: dict[str, Any] | None, **kwargs) -> OperationResult:
        """Recherche restreinte aux objets `Content`."""
        return await self.search(request, object_type=["Content"], **kwargs)

    async def search_plugins(
        self, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        if not isinstance(request, dict) or not isinstance(request.get("filters"), dict):
            raise _missing(msg.SEARCH_PLUGINS)
        request = copy.deepcopy(request)
        request["filters"]["objectType"] = ["content"]
        request["filters"]["contentType"] = ["plugin"]
        res = await checked(
            self.provider.plugins_search({"request": request}, headers),
            msg.SEARCH_PLUGINS,
            "plugins_search",
        )
        return OperationResult(result=res.result)

    async def get_my_content(
        self, created_by: str | None, headers: dict | None = None
    ) -> OperationResult:
        if not created_by:
            raise _missing(msg.GET_MY)
        request = {
            "filters": {"createdBy": created_by, "contentType": list(self.content_content_types)}
        }
        res = await checked(
            self.provider.composite_search({"request": request}, headers), msg.GET_MY, "get_my"
        )
        return OperationResult(result=res.result)

    async def get_content(
        self, content_id: str | None, query: dict | None = None, headers: dict | None = None
    ) -> OperationResult:
        if not content_id:
            raise _missing(msg.GET)
        res = await checked(self.provider.get_by_id(content_id, query, headers), msg.GET, "read")
        return OperationResult(result=res.result)

    # --- création / mise à jour ------------------------------------------

    async def create(
        self, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        """Crée un contenu après validation du profil `create` et attribution d'un code."""
        content = _content_of(request)
        if content is None or not self.validator.validate(content, "create"):
            raise _missing(msg.CREATE)
        request = copy.deepcopy(request)
        request["content"]["code"] = self.generate_code()
        res = await checked(
            self.provider.create({"request": request}, headers), msg.CREATE, "create"
        )
        return OperationResult(result=_version_summary(res.result))

    async def update(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        """Met à jour un contenu avec le `versionKey` fraîchement relu.

        Les deux appels sont séquentiels: la lecture du jeton doit précéder la mise à jour.
        """
        content = _content_of(request)
        if not content_id or content is None or not self.validator.validate(content, "update"):
            raise _missing(msg.UPDATE)
        version_key = await self.guard.fetch_current_version(content_id, headers)
        request = copy.deepcopy(request)
        request["content"]["versionKey"] = version_key
        res = await checked(
            self.provider.update({"request": request}, content_id, headers), msg.UPDATE, "update"
        )
        return OperationResult(result=_version_summary(res.result))

    # --- transitions -------------------------------------------------------

    async def review(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        if not content_id:
            raise _missing(msg.REVIEW)
        res = await checked(
            self.provider.review({"request": request or {}}, content_id, headers),
            msg.REVIEW,
            "review",
        )
        self._notify("content.review", {"content_id": content_id})
        return OperationResult(result=_version_summary(res.result))

    async def _publish(
        self,
        kind: str,
        content_id: str | None,
        request: dict[str, Any] | None,
        headers: dict | None,
    ) -> OperationResult:
        messages = msg.PUBLISH if kind == "publish" else msg.UNLISTED_PUBLISH
        content = _content_of(request)
        if not content_id or content is None or not content.get("lastPublishedBy"):
            raise _missing(messages)
        call = getattr(self.provider, kind)
        res = await checked(call({"request": request}, content_id, headers), messages, kind)
        event = "content.published" if kind == "publish" else "content.unlisted_published"
        self._notify(
            event, {"content_id": content_id, "published_by": content.get("lastPublishedBy")}
        )
        summary = _version_summary(res.result)
        summary["publishStatus"] = res.result.get("publishStatus")
        return OperationResult(result=summary)

    async def publish(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        """Publie un contenu; `content.lastPublishedBy` est obligatoire."""
        return await self._publish("publish", content_id, request, headers)

    async def unlisted_publish(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        """Publie un contenu hors catalogue; mêmes exigences que `publish`."""
        return await self._publish("unlisted_publish", content_id, request, headers)

    async def reject(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        if not content_id:
            raise _missing(msg.REJECT)
        res = await checked(
            self.provider.reject({"request": request or {}}, content_id, headers),
            msg.REJECT,
            "reject",
        )
        self._notify("content.rejected", {"content_id": content_id})
        return OperationResult(result=res.result)

    async def copy(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        """Copie un contenu; le résultat provider est renvoyé tel quel."""
        if not content_id:
            raise _missing(msg.COPY)
        res = await checked(
            self.provider.copy({"request": request or {}}, content_id, headers), msg.COPY, "copy"
        )
        return OperationResult(result=res.result)

    async def upload_url(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        content = _content_of(request)
        if not content_id or content is None or not content.get("fileName"):
            raise _missing(msg.UPLOAD_URL)
        res = await checked(
            self.provider.upload_url({"request": request}, content_id, headers),
            msg.UPLOAD_URL,
            "upload_url",
        )
        return OperationResult(result=res.result)

    # --- signalements ------------------------------------------------------

    async def flag(self, content_id: str | None, request: dict[str, Any] | None) -> OperationResult:
        """Accusé de réception d'un signalement; aucun appel provider."""
        self._log.info("content_flag_acknowledged", content_id=content_id)
        return OperationResult(result={})

    async def _flag_decision(
        self,
        kind: str,
        content_id: str | None,
        request: dict[str, Any] | None,
        headers: dict | None,
    ) -> OperationResult:
        messages = msg.ACCEPT_FLAG if kind == "accept_flag" else msg.REJECT_FLAG
        if not content_id or not request:
            raise _missing(messages)
        call = getattr(self.provider, kind)
        res = await checked(call({"request": request}, content_id, headers), messages, kind)
        event = "content.flag_accepted" if kind == "accept_flag" else "content.flag_rejected"
        self._notify(event, {"content_id": content_id})
        return OperationResult(result=res.result)

    async def accept_flag(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        return await self._flag_decision("accept_flag", content_id, request, headers)

    async def reject_flag(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        return await self._flag_decision("reject_flag", content_id, request, headers)

    # --- retrait en lot ----------------------------------------------------

    async def _retire_one(self, content_id: str, headers: dict | None) -> RetireFailure | None:
        try:
            res = await self.provider.retire(content_id, headers)
        except ProviderTransportError as exc:
            self._log.error("content_retire_failed", content_id=content_id, error=str(exc))
            return RetireFailure(
                content_id=content_id,
                err_code=msg.RETIRE.failed_code,
                err_msg=msg.RETIRE.failed_message,
                status_code=exc.status_code,
            )
        except Exception as exc:
            self._log.exception("content_retire_crashed", content_id=content_id, error=repr(exc))
            return RetireFailure(
                content_id=content_id,
                err_code=msg.RETIRE.failed_code,
                err_msg=msg.RETIRE.failed_message,
            )
        if res.ok:
            return None
        self._log.error("content_retire_rejected", content_id=content_id, err=res.err)
        return RetireFailure(
            content_id=content_id,
            err_code=res.err or msg.RETIRE.failed_code,
            err_msg=res.errmsg or msg.RETIRE.failed_message,
            response_code=res.response_code or RESPONSE_SERVER_ERROR,
            status_code=res.http_status,
        )

    @staticmethod
    def _batch_error(failures: list[RetireFailure]) -> UpstreamError:
        """Agrège les échecs unitaires en une erreur portant la liste complète.

        Si tous les échecs partagent le même code, statut et responseCode, ceux-ci sont repris;
        sinon l'erreur porte un code agrégé `ERR_CONTENT_RETIRE_MULTIPLE_FAILURES`.
        """
        payload = [f.model_dump(by_alias=True) for f in failures]
        signatures = {(f.err_code, f.status_code, f.response_code) for f in failures}
        if len(signatures) == 1:
            first = failures[0]
            return UpstreamError(
                first.err_code or msg.RETIRE.failed_code,
                first.err_msg or msg.RETIRE.failed_message,
                status_code=first.status_code,
                response_code=first.response_code,
                result=payload,
            )
        statuses = {f.status_code for f in failures}
        return UpstreamError(
            msg.RETIRE_MULTIPLE_FAILURES_CODE,
            f"{len(failures)} contents could not be retired",
            status_code=statuses.pop() if len(statuses) == 1 else HTTP_INTERNAL_SERVER_ERROR,
            response_code=RESPONSE_SERVER_ERROR,
            result=payload,
        )

    async def retire_batch(
        self,
        content_ids: list[str] | None,
        acting_user_id: str | None,
        headers: dict | None = None,
    ) -> OperationResult:
        """Retire un lot de contenus appartenant tous à l'acteur.

        Étapes:
        - recherche des contenus par identifiants;
        - contrôle de propriété: l'ensemble des `createdBy` doit valoir exactement {acteur},
          sinon aucun retrait n'est émis;
        - un retrait par identifiant, en parallèle; les échecs sont collectés sans interrompre
          le lot.

        Retour: liste vide si tout a réussi. Sinon `UpstreamError` dont `result` est la liste
        complète des échecs.
        """
        if not isinstance(content_ids, list) or not content_ids:
            raise _missing(msg.RETIRE)
        found = await checked(
            self.provider.search({"request": {"search": {"identifier": content_ids}}}, headers),
            msg.SEARCH,
            "retire_lookup",
        )
        owners = {c.get("createdBy") for c in found.result.get("content") or []}
        if not acting_user_id or owners != {acting_user_id}:
            self._log.warning("retire_owner_mismatch", user=acting_user_id, owners=len(owners))
            raise AuthorizationError(msg.INVALID_USER_CODE, msg.INVALID_USER_MESSAGE)

        outcomes = await asyncio.gather(*(self._retire_one(cid, headers) for cid in content_ids))
        failures = [f for f in outcomes if f is not None]
        if failures:
            RETIRE_BATCH_FAILURES.inc(len(failures))
            raise self._batch_error(failures)
        self._log.info("contents_retired", count=len(content_ids))
        return OperationResult(result=[])

    # --- badges ------------------------------------------------------------

    async def _current_badges(self, content_id: str, headers: dict | None) -> list[dict[str, Any]]:
        res = await checked(self.provider.get_by_id(content_id, None, headers), msg.GET, "read")
        content = res.result.get("content") or {}
        return list(content.get("badgeAssertions") or [])

    async def _write_badges(
        self, content_id: str, badges: list[dict[str, Any]], headers: dict | None
    ) -> OperationResult:
        body = {"request": {"content": {"badgeAssertions": badges}}}
        res = await checked(
            self.provider.system_update(body, content_id, headers), msg.UPDATE, "system_update"
        )
        return OperationResult(result=res.result)

    async def assign_badge(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        """Ajoute une assertion de badge si son triplet n'existe pas encore.

        Un doublon renvoie un signal de conflit (409) sans aucune mise à jour.
        """
        content = _content_of(request)
        badge = content.get("badgeAssertion") if content else None
        if not content_id or not isinstance(badge, dict):
            raise _missing(msg.ASSIGN_BADGE)
        key = BadgeAssertion.model_validate(badge).key()
        badges = await self._current_badges(content_id, headers)
        if any(
            isinstance(b, dict) and BadgeAssertion.model_validate(b).key() == key for b in badges
        ):
            return _signal(ConflictError, msg.BADGE_EXISTS_MESSAGE)
        badges.append(badge)
        return await self._write_badges(content_id, badges, headers)

    async def revoke_badge(
        self, content_id: str | None, request: dict[str, Any] | None, headers: dict | None = None
    ) -> OperationResult:
        """Retire les assertions portant l'`assertionId` demandé.

        Une assertion absente renvoie un signal d'absence (404) sans aucune mise à jour.
        """
        content = _content_of(request)
        badge = content.get("badgeAssertion") if content else None
        assertion_id = badge.get("assertionId") if isinstance(badge, dict) else None
        if not content_id or not assertion_id:
            raise _missing(msg.REVOKE_BADGE)
        badges = await self._current_badges(content_id, headers)
        kept = [b for b in badges if b.get("assertionId") != assertion_id]
        if len(kept) == len(badges):
            return _signal(NotFoundError, msg.BADGE_MISSING_MESSAGE)
        return await self._write_badges(content_id, kept, headers)

    # --- verrouillage ------------------------------------------------------

    async def validate_lock(
        self,
        request: dict[str, Any] | None,
        acting_user_id: str | None,
        headers: dict | None = None,
    ) -> OperationResult:
        """Valide le verrouillage de `request.resourceId` pour l'acteur.

        L'opération `retireLock` est autorisée quel que soit l'état du contenu.
        """
        resource_id = request.get("resourceId") if isinstance(request, dict) else None
        if not resource_id:
            raise _missing(msg.LOCK)
        decision = await self.lock.validate(
            resource_id,
            acting_user_id,
            is_release_operation=request.get("apiName") == RELEASE_LOCK_API,
            headers=headers,
        )
        result: dict[str, Any] = {"validation": decision.allowed, "message": decision.reason}
        if decision.fetch_failed:
            raise UpstreamError(
                msg.LOCK.failed_code,
                decision.reason,
                status_code=HTTP_INTERNAL_SERVER_ERROR,
                result=result,
            )
        if decision.allowed:
            result["contentdata"] = decision.content
        return OperationResult(result=result)
