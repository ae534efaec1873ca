"""Exception handlers that render every failure in the error envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.domain.errors import (
    ConflictError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from app.infrastructure.api.auth import AuthenticationError, PermissionDeniedError

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ConflictError: 409,
    InvalidStateError: 400,
    ValidationFailedError: 400,
    AuthenticationError: 401,
    PermissionDeniedError: 403,
}


def error_body(message: str, errors: list[dict] | None = None) -> dict:
    return {"success": False, "message": message, "errors": errors or []}


def _status_for(exc: DomainError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 400


def _field_name(loc: tuple) -> str:
    # ("body", "routeId") -> "routeId"; ("query", "page") -> "page"
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    status = _status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(
        status_code=status,
        content=error_body(exc.message, [e.to_dict() for e in exc.errors]),
        headers=headers,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{"field": _field_name(tuple(e["loc"])), "message": e["msg"]} for e in exc.errors()]
    return JSONResponse(status_code=400, content=error_body("Validation failed", errors))


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code, content=error_body(str(exc.detail)), headers=exc.headers
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = f"Internal server error: {exc}" if settings.debug else "Internal server error"
    return JSONResponse(status_code=500, content=error_body(message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
