"""Validation du verrouillage d'un contenu.

Table de décision, évaluée dans l'ordre:
1. lecture impossible -> refus "Unable to fetch content details" (échec signalé, pas d'exception);
2. statut différent de Draft hors opération de libération -> refus "not in draft state";
3. acteur ni propriétaire ni collaborateur -> refus "You are not authorized";
4. sinon -> accord, avec l'instantané du contenu lu.
"""

from __future__ import annotations

import structlog

from contentsvc.core.http_constants import DRAFT_STATUS
from contentsvc.core.messages import (
    LOCK_FETCH_FAILED,
    LOCK_NOT_AUTHORIZED,
    LOCK_NOT_DRAFT,
    LOCK_VALIDATED,
)
from contentsvc.domain.entities import ContentItem, LockDecision
from contentsvc.infra.provider_client import ProviderTransportError

EDIT_QUERY = {"mode": "edit"}


class LockValidator:
    """Décide si un acteur peut éditer/verrouiller un contenu. Aucune mutation."""

    def __init__(self, provider):
        self.provider = provider
        self._log = structlog.get_logger(__name__)

    async def validate(
        self,
        content_id: str,
        acting_user_id: str | None,
        is_release_operation: bool = False,
        headers: dict | None = None,
    ) -> LockDecision:
        try:
            result = await self.provider.get_by_id(content_id, dict(EDIT_QUERY), headers)
        except ProviderTransportError as exc:
            self._log.error("lock_content_fetch_failed", content_id=content_id, error=str(exc))
            return LockDecision(allowed=False, reason=LOCK_FETCH_FAILED, fetch_failed=True)
        if not result.ok:
            self._log.error("lock_content_fetch_rejected", content_id=content_id, err=result.err)
            return LockDecision(
                allowed=False, reason=result.errmsg or LOCK_FETCH_FAILED, fetch_failed=True
            )

        snapshot = result.result.get("content")
        if not isinstance(snapshot, dict):
            snapshot = {}
        content = ContentItem.model_validate(snapshot)
        if content.status != DRAFT_STATUS and not is_release_operation:
            return LockDecision(allowed=False, reason=LOCK_NOT_DRAFT)
        if not content.is_editable_by(acting_user_id):
            self._log.info("lock_not_authorized", content_id=content_id, user=acting_user_id)
            return LockDecision(allowed=False, reason=LOCK_NOT_AUTHORIZED)
        return LockDecision(allowed=True, reason=LOCK_VALIDATED, content=snapshot)
