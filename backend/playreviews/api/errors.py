"""Traduccion de la taxonomia de errores del core al sobre HTTP."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from playreviews.domain.errors import (
    ConflictError,
    InternalError,
    InvalidArgument,
    NotFound,
    ReviewsError,
    StorageError,
)
from playreviews.logging_utils import get_logger

logger = get_logger(__name__)

_GENERIC_MESSAGE = "Internal server error"


class InvalidRequest(InvalidArgument):
    """Peticion bien tipada pero no enrutable (p.ej. URI desconocida)."""

    code = "INVALID_REQUEST"


class MethodNotFound(NotFound):
    code = "METHOD_NOT_FOUND"


def _status_for(exc: ReviewsError) -> int:
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, InvalidArgument):
        return 400
    if isinstance(exc, NotFound):
        return 404
    if isinstance(exc, StorageError):
        return 503
    return 500


def error_body(code: str, message: str) -> dict[str, dict[str, str]]:
    return {"error": {"code": code, "message": message}}


async def _reviews_error_handler(request: Request, exc: ReviewsError) -> JSONResponse:
    status = _status_for(exc)
    if isinstance(exc, InternalError) or status >= 500:
        # Detalle solo en el log del servidor.
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc, exc_info=exc)
        message = _GENERIC_MESSAGE if status == 500 else "Storage unavailable"
        return JSONResponse(status_code=status, content=error_body(exc.code, message))
    return JSONResponse(status_code=status, content=error_body(exc.code, exc.message))


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_body(InvalidArgument.code, f"Invalid request body: {exc.errors()}"),
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500, content=error_body(InternalError.code, _GENERIC_MESSAGE)
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReviewsError, _reviews_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unexpected_error_handler)
