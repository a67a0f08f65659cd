"""
Entités du domaine de gestion de contenus.

Ce module définit les modèles échangés entre l'orchestrateur, ses gardes et le provider. Les
facettes de recherche et les taxonomies restent des dictionnaires JSON bruts (mutés en place par
l'enrichissement), seules les structures porteuses de décisions sont typées ici.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from contentsvc.core.http_constants import (
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_OK,
    HTTP_STATUS_MAX,
    HTTP_STATUS_MIN,
    RESPONSE_OK,
    RESPONSE_SERVER_ERROR,
)


class ProviderResult(BaseModel):
    """Enveloppe de réponse du provider.

    Un `response_code` différent de `OK` est un échec, quel que soit le statut HTTP de transport.
    """

    response_code: str = RESPONSE_OK
    status_code: int = HTTP_OK
    err: str | None = None
    errmsg: str | None = None
    result: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Vrai si le provider signale un succès."""
        return self.response_code == RESPONSE_OK

    @property
    def http_status(self) -> int:
        """Statut HTTP à renvoyer au client (500 si l'indication est hors plage)."""
        if HTTP_STATUS_MIN <= self.status_code < HTTP_STATUS_MAX:
            return self.status_code
        return HTTP_INTERNAL_SERVER_ERROR

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None, status_code: int) -> ProviderResult:
        """Construit l'enveloppe depuis le JSON `{responseCode, params, result}` du provider."""
        payload = payload if isinstance(payload, dict) else {}
        params = payload.get("params")
        if not isinstance(params, dict):
            params = {}
        result = payload.get("result")
        return cls(
            response_code=str(payload.get("responseCode") or RESPONSE_SERVER_ERROR),
            status_code=status_code,
            err=params.get("err"),
            errmsg=params.get("errmsg"),
            result=result if isinstance(result, dict) else {},
        )


class BadgeAssertion(BaseModel):
    """Assertion de badge, unique par le triplet (assertionId, badgeId, issuerId)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    # Identifiants opaques: comparés tels quels, sans coercition (str ou int selon l'émetteur).
    assertion_id: Any = Field(default=None, alias="assertionId")
    badge_id: Any = Field(default=None, alias="badgeId")
    issuer_id: Any = Field(default=None, alias="issuerId")

    def key(self) -> tuple[Any, Any, Any]:
        """Clé d'unicité de l'assertion."""
        return (self.assertion_id, self.badge_id, self.issuer_id)


class ContentItem(BaseModel):
    """Copie transitoire d'un contenu tel que rapporté par le provider."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    # Seuls les champs de décision sont lus; le reste de l'instantané est gardé tel quel.
    identifier: Any = None
    status: Any = None
    created_by: Any = Field(default=None, alias="createdBy")
    collaborators: Any = None

    def is_editable_by(self, user_id: str | None) -> bool:
        """Vrai si l'utilisateur est propriétaire ou collaborateur."""
        if not user_id:
            return False
        collaborators = self.collaborators if isinstance(self.collaborators, list) else []
        return self.created_by == user_id or user_id in collaborators


class RetireFailure(BaseModel):
    """Échec unitaire d'un retrait en lot."""

    content_id: str = Field(serialization_alias="contentId")
    err_code: str | None = Field(default=None, serialization_alias="errCode")
    err_msg: str | None = Field(default=None, serialization_alias="errMsg")
    response_code: str = Field(default=RESPONSE_SERVER_ERROR, exclude=True)
    status_code: int = Field(default=HTTP_INTERNAL_SERVER_ERROR, exclude=True)


class LockDecision(BaseModel):
    """Décision de verrouillage d'un contenu pour un acteur."""

    allowed: bool
    reason: str
    fetch_failed: bool = False
    content: dict[str, Any] | None = None


class OperationResult(BaseModel):
    """Résultat composé d'une opération, prêt à être mis en enveloppe."""

    result: Any = Field(default_factory=dict)
    status_code: int = HTTP_OK
    response_code: str = RESPONSE_OK
