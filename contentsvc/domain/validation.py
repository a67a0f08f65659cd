"""Profils de validation des charges utiles de contenu.

Un profil est un modèle Pydantic décrivant les champs attendus pour une opération (création,
mise à jour). `RequestValidator.validate` ne lève jamais: il répond vrai/faux et journalise les
champs en erreur.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

log = structlog.get_logger(__name__)


class CreatableContent(BaseModel):
    """Champs requis pour créer un contenu."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    mime_type: str = Field(alias="mimeType", min_length=1)
    content_type: str = Field(alias="contentType", min_length=1)
    created_by: str = Field(alias="createdBy", min_length=1)


class UpdatableContent(BaseModel):
    """Champs acceptés pour mettre à jour un contenu.

    Au moins un champ doit être présent; l'identifiant et le statut sont gérés par le provider.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _check_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not data:
            raise ValueError("empty patch")
        forbidden = {"identifier", "status"} & set(data)
        if forbidden:
            raise ValueError(f"read-only fields: {sorted(forbidden)}")
        return data


PROFILES: dict[str, type[BaseModel]] = {
    "create": CreatableContent,
    "update": UpdatableContent,
}


class RequestValidator:
    """Valide une charge utile contre un profil nommé."""

    def __init__(self, profiles: dict[str, type[BaseModel]] | None = None) -> None:
        self.profiles = profiles or PROFILES

    def validate(self, payload: Any, profile: str) -> bool:
        """Retourne vrai si `payload` respecte le profil `profile`."""
        model = self.profiles.get(profile)
        if model is None:
            raise KeyError(f"unknown validation profile: {profile}")
        if not isinstance(payload, dict):
            return False
        try:
            model.model_validate(payload)
        except PydanticValidationError as exc:
            log.debug(
                "payload_validation_failed",
                profile=profile,
                fields=[".".join(str(p) for p in e["loc"]) for e in exc.errors()],
            )
            return False
        return True
