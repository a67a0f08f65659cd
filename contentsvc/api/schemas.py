# Schémas Pydantic exposés par l'API (corps de requête).

from typing import Any

from pydantic import BaseModel, ConfigDict


class ContentRequest(BaseModel):
    """Corps standard `{"request": {...}}`.

    Le contenu de `request` reste un dictionnaire libre: sa validation métier (champs requis,
    profils create/update) appartient à l'orchestrateur, qui renvoie une enveloppe
    `CLIENT_ERROR` plutôt qu'un 422.
    """

    model_config = ConfigDict(extra="allow")

    request: dict[str, Any] | None = None


class RetireRequest(BaseModel):
    """Corps du retrait en lot: `{"request": {"contentIds": [...]}}`."""

    model_config = ConfigDict(extra="allow")

    request: dict[str, Any] | None = None

    def content_ids(self) -> list[str] | None:
        ids = (self.request or {}).get("contentIds")
        return ids if isinstance(ids, list) else None
