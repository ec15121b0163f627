"""Enveloppe d'erreur standard de l'API.

Toutes les erreurs sont rendues sous la forme `{"error": ..., "code": ..., "details": ...}`
(`details` seulement s'il est connu). Le statut HTTP est choisi à partir de
l'`ErrorKind` porté par l'exception du domaine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from zodiac_backend.core.http_constants import HTTP_BAD_REQUEST, HTTP_INTERNAL_SERVER_ERROR
from zodiac_backend.domain.errors import ErrorKind, ZodiacAppError

log = structlog.get_logger(__name__)

# Erreurs imputables à l'appelant; le reste est une erreur serveur
CLIENT_ERROR_KINDS = frozenset(
    {
        ErrorKind.INVALID_INPUT,
        ErrorKind.INVALID_DATE,
        ErrorKind.INSUFFICIENT_FUNDS,
        ErrorKind.UNSUPPORTED_TYPE,
        ErrorKind.TOO_LARGE,
        ErrorKind.USER_REJECTED,
    }
)


@dataclass
class ErrorEnvelope:
    error: str
    code: str | None = None
    details: Any = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.code:
            body["code"] = self.code
        if self.details:
            body["details"] = self.details
        return body


def status_for(kind: ErrorKind) -> int:
    return HTTP_BAD_REQUEST if kind in CLIENT_ERROR_KINDS else HTTP_INTERNAL_SERVER_ERROR


def create_error_response(
    status_code: int, error: str, code: str | None = None, details: Any = None
) -> JSONResponse:
    envelope = ErrorEnvelope(error=error, code=code, details=details)
    return JSONResponse(status_code=status_code, content=envelope.to_dict())


def handle_app_error(request: Request, exc: ZodiacAppError) -> JSONResponse:
    status_code = status_for(exc.kind)
    log_method = log.warning if status_code == HTTP_BAD_REQUEST else log.error
    log_method(
        "api_error",
        path=request.url.path,
        code=exc.kind.value,
        status_code=status_code,
        error_message=exc.message,
    )
    return create_error_response(status_code, exc.message, exc.kind.value, exc.details)


def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    log.warning("http_exception", path=request.url.path, status_code=exc.status_code)
    return create_error_response(exc.status_code, str(exc.detail))


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    log.warning("request_validation_failed", path=request.url.path, errors=len(details))
    return create_error_response(
        HTTP_BAD_REQUEST, "Invalid request", ErrorKind.INVALID_INPUT.value, details
    )


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "unexpected_error",
        path=request.url.path,
        exception_type=type(exc).__name__,
        exc_info=exc,
    )
    return create_error_response(
        HTTP_INTERNAL_SERVER_ERROR, "An unexpected error occurred", ErrorKind.UNKNOWN.value
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ZodiacAppError, handle_app_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_generic_exception)
