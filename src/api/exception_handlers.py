"""Exception handlers for the FastAPI application.

Every error body has the same shape: ``error_code``, ``message`` and
``details``.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, AuthError, ErrorCode
from domain.repositories.errors import UniqueViolation

logger = structlog.get_logger()

UNEXPECTED_ERROR_MESSAGE = "Ocorreu um erro inesperado. Tente novamente."


def error_response(
    status_code: int, error_code: str, message: Any, details: Any = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details},
    )


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        extra = {"auth_reason": exc.code.value} if isinstance(exc, AuthError) else {}
        logger.warning(
            "app_exception",
            error_code=exc.error_code.value,
            status_code=exc.status_code,
            message=exc.message,
            **extra,
        )
        return error_response(exc.status_code, exc.error_code.value, exc.message, exc.details)

    @app.exception_handler(UniqueViolation)
    async def unique_violation_handler(request: Request, exc: UniqueViolation) -> JSONResponse:
        """A write lost a race against a uniqueness constraint."""
        logger.warning("unique_violation", constraint=exc.constraint)
        return error_response(
            409,
            ErrorCode.CONSISTENCY_CONFLICT.value,
            "Concurrent change detected, re-fetch and retry",
            {"constraint": exc.constraint},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(exc.status_code, "HTTP_ERROR", exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = _field_errors(exc)
        logger.info("validation_error", fields=[d["field"] for d in details])
        return error_response(422, ErrorCode.VALIDATION_ERROR.value, "Dados inválidos", details)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Anything unexpected becomes a 500; the message is hidden in production."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )
        message = UNEXPECTED_ERROR_MESSAGE if settings.is_production else str(exc)
        return error_response(
            500, ErrorCode.INTERNAL_ERROR.value, message, {"request_id": request_id}
        )
