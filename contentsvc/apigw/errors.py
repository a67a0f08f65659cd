"""Enveloppes de réponse standardisées et gestionnaires d'erreurs.

Toutes les réponses exposées partagent la forme
`{success, responseCode, result | error{code, message}, trace_id}`; les erreurs du domaine sont
traduites ici via les exception handlers FastAPI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from contentsvc.core.http_constants import (
    HTTP_INTERNAL_SERVER_ERROR,
    RESPONSE_CLIENT_ERROR,
    RESPONSE_NOT_FOUND,
    RESPONSE_SERVER_ERROR,
    RESPONSE_UNAUTHORIZED,
)
from contentsvc.domain.entities import OperationResult
from contentsvc.domain.errors import ContentServiceError

log = structlog.get_logger(__name__)

INTERNAL_ERROR_CODE = "INTERNAL_ERROR"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


@dataclass
class ErrorEnvelope:
    """Bloc `error` d'une réponse en échec."""

    code: str
    message: str


def extract_trace_id(request: Request) -> str | None:
    """Identifiant de corrélation: en-tête `X-Trace-ID`, sinon id posé par le middleware."""
    trace_id = request.headers.get("X-Trace-ID")
    if trace_id:
        return trace_id
    return getattr(request.state, "request_id", None)


def success_response(
    outcome: OperationResult, trace_id: str | None = None
) -> JSONResponse:
    """Met en enveloppe de succès le résultat d'une opération."""
    return JSONResponse(
        status_code=outcome.status_code,
        content={
            "success": True,
            "responseCode": outcome.response_code,
            "result": outcome.result,
            "trace_id": trace_id,
        },
    )


def error_response(
    status_code: int,
    response_code: str,
    envelope: ErrorEnvelope,
    result: Any = None,
    trace_id: str | None = None,
) -> JSONResponse:
    """Construit une réponse d'erreur; `result` est joint quand l'erreur en porte un."""
    content: dict[str, Any] = {
        "success": False,
        "responseCode": response_code,
        "error": {"code": envelope.code, "message": envelope.message},
        "trace_id": trace_id,
    }
    if result is not None:
        content["result"] = result
    return JSONResponse(status_code=status_code, content=content)


def handle_service_error(request: Request, exc: ContentServiceError) -> JSONResponse:
    """Traduit une erreur du domaine en enveloppe d'erreur."""
    trace_id = extract_trace_id(request)
    log.warning(
        "service_error",
        code=exc.code,
        status_code=exc.status_code,
        response_code=exc.response_code,
        trace_id=trace_id,
    )
    return error_response(
        exc.status_code,
        exc.response_code,
        ErrorEnvelope(code=exc.code, message=exc.message),
        result=exc.result,
        trace_id=trace_id,
    )


_HTTP_RESPONSE_CODES = {
    400: RESPONSE_CLIENT_ERROR,
    401: RESPONSE_UNAUTHORIZED,
    404: RESPONSE_NOT_FOUND,
    405: RESPONSE_CLIENT_ERROR,
    422: RESPONSE_CLIENT_ERROR,
}


def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Enveloppe les HTTPException de FastAPI/Starlette (route inconnue, méthode refusée...)."""
    response_code = _HTTP_RESPONSE_CODES.get(exc.status_code, RESPONSE_SERVER_ERROR)
    return error_response(
        exc.status_code,
        response_code,
        ErrorEnvelope(code=f"HTTP_{exc.status_code}", message=str(exc.detail)),
        trace_id=extract_trace_id(request),
    )


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Filet de sécurité: toute exception non prévue devient un 500 générique."""
    trace_id = extract_trace_id(request)
    log.error(
        "unexpected_error",
        exception_type=type(exc).__name__,
        trace_id=trace_id,
        exc_info=True,
    )
    return error_response(
        HTTP_INTERNAL_SERVER_ERROR,
        RESPONSE_SERVER_ERROR,
        ErrorEnvelope(code=INTERNAL_ERROR_CODE, message=INTERNAL_ERROR_MESSAGE),
        trace_id=trace_id,
    )


def install_error_handlers(app: FastAPI) -> None:
    """Enregistre les gestionnaires d'erreurs sur l'application."""
    app.add_exception_handler(ContentServiceError, handle_service_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_generic_exception)
