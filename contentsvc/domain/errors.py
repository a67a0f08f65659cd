"""Erreurs métier du service de contenus.

Toutes les erreurs portent un code machine, un message, un `responseCode` d'enveloppe et un statut
HTTP indicatif; la couche API les traduit en enveloppe d'erreur standard.
"""

from __future__ import annotations

from typing import Any

from contentsvc.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_UNAUTHORIZED,
    RESPONSE_CLIENT_ERROR,
    RESPONSE_CONFLICT,
    RESPONSE_NOT_FOUND,
    RESPONSE_SERVER_ERROR,
    RESPONSE_UNAUTHORIZED,
)


class ContentServiceError(Exception):
    """Erreur de base du service."""

    status_code: int = HTTP_INTERNAL_SERVER_ERROR
    response_code: str = RESPONSE_SERVER_ERROR

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: int | None = None,
        response_code: str | None = None,
        result: Any = None,
    ) -> None:
        """Initialise l'erreur avec son code, son message et un résultat optionnel."""
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if response_code is not None:
            self.response_code = response_code
        self.result = result


class ValidationError(ContentServiceError):
    """Entrée manquante ou invalide (faute client, ne pas rejouer)."""

    status_code = HTTP_BAD_REQUEST
    response_code = RESPONSE_CLIENT_ERROR


class AuthorizationError(ContentServiceError):
    """Incohérence propriétaire/collaborateur/état."""

    status_code = HTTP_UNAUTHORIZED
    response_code = RESPONSE_UNAUTHORIZED


class NotFoundError(ContentServiceError):
    """Contenu référencé absent."""

    status_code = HTTP_NOT_FOUND
    response_code = RESPONSE_NOT_FOUND


class UpstreamError(ContentServiceError):
    """Appel provider en échec (transport ou responseCode non OK)."""


class ConflictError(ContentServiceError):
    """Doublon (assertion de badge); sert de signal de succès, jamais levé vers le client."""

    status_code = HTTP_CONFLICT
    response_code = RESPONSE_CONFLICT
