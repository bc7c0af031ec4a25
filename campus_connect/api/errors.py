from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from campus_connect.core.config import settings
from campus_connect.services.error_codes import ErrorCode
from campus_connect.services.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    UnauthorizedError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

HTTP_STATUS_CODES = {
    400: ErrorCode.INVALID_INPUT,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
}


def status_for(err: ServiceError) -> int:
    if isinstance(err, UnauthorizedError):
        return 401
    if isinstance(err, PermissionDeniedError):
        return 403
    if isinstance(err, NotFoundError):
        return 404
    if isinstance(err, ConflictError):
        return 409
    if isinstance(err, ValidationError):
        return 400
    return 500


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = {"error": message, "code": code}
    if details and not settings.is_production:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _validation_summary(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("service_error", code=exc.code, path=request.url.path, exc_info=exc)
    else:
        logger.info(
            "request_rejected",
            status=status_code,
            code=exc.code,
            path=request.url.path,
        )
    return error_response(status_code, exc.code, exc.message, details=exc.message)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_STATUS_CODES.get(exc.status_code)
    code_value = code.value if code else f"HTTP_{exc.status_code}"
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code < 500:
        logger.info("request_rejected", status=exc.status_code, code=code_value, path=request.url.path)
    return error_response(
        exc.status_code,
        code_value,
        message,
        details=str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    summary = _validation_summary(exc)
    logger.info(
        "request_rejected",
        status=400,
        code=ErrorCode.INVALID_INPUT.value,
        path=request.url.path,
    )
    return error_response(400, ErrorCode.INVALID_INPUT.value, "Invalid input", details=summary)


async def _store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("store_error", path=request.url.path, exc_info=exc)
    return error_response(
        500,
        ErrorCode.INTERNAL.value,
        "Internal server error",
        details=f"{type(exc).__name__}: {exc}",
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_error", path=request.url.path, exc_info=exc)
    return error_response(
        500,
        ErrorCode.INTERNAL.value,
        "Internal server error",
        details=f"{type(exc).__name__}: {exc}",
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)
    app.add_exception_handler(OSError, _store_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
