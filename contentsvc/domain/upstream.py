"""Traduction des réponses provider en résultats ou en `UpstreamError`.

Règles de traduction d'un échec:
- code: `params.err` du provider, sinon le code de repli de l'opération;
- message: `params.errmsg`, sinon le message de repli;
- responseCode: celui du provider, sinon `SERVER_ERROR`;
- statut HTTP: celui du provider s'il est dans [100, 600), sinon 500.
"""

from __future__ import annotations

from collections.abc import Awaitable

import structlog

from contentsvc.core.http_constants import RESPONSE_SERVER_ERROR
from contentsvc.core.messages import OperationMessages
from contentsvc.domain.entities import ProviderResult
from contentsvc.domain.errors import UpstreamError
from contentsvc.infra.provider_client import ProviderTransportError

log = structlog.get_logger(__name__)


def upstream_error(result: ProviderResult, messages: OperationMessages) -> UpstreamError:
    """Construit l'erreur correspondant à une réponse provider non OK."""
    return UpstreamError(
        result.err or messages.failed_code,
        result.errmsg or messages.failed_message,
        status_code=result.http_status,
        response_code=result.response_code or RESPONSE_SERVER_ERROR,
    )


async def checked(
    call: Awaitable[ProviderResult], messages: OperationMessages, operation: str
) -> ProviderResult:
    """Attend un appel provider et garantit un résultat OK.

    Raises:
        UpstreamError: erreur de transport ou `responseCode` non OK.
    """
    try:
        result = await call
    except ProviderTransportError as exc:
        log.error("provider_call_failed", operation=operation, error=str(exc))
        raise UpstreamError(
            messages.failed_code,
            messages.failed_message,
            status_code=exc.status_code,
            response_code=RESPONSE_SERVER_ERROR,
        ) from exc
    if not result.ok:
        log.error(
            "provider_call_rejected",
            operation=operation,
            response_code=result.response_code,
            err=result.err,
            errmsg=result.errmsg,
        )
        raise upstream_error(result, messages)
    return result
