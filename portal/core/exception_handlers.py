"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain, storage and
framework exceptions to JSON error bodies of the form
{"error": code, "message": text, "details": {...}}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.core.config import get_settings
from portal.domain.exceptions import PortalException

logger = logging.getLogger(__name__)

# Map error_code to HTTP status; unknown codes fall back to 400.
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "VALIDATION_ERROR": 400,
    "EMAIL_ALREADY_REGISTERED": 409,
    "INVALID_RESET_TOKEN": 400,
    "REMOTE_FAILURE": 503,
    "SESSION_RESOLVING": 503,
    "STORAGE_NOT_FOUND": 404,
    "STORAGE_PERMISSION_ERROR": 403,
    "STORAGE_UPLOAD_ERROR": 502,
    "STORAGE_DOWNLOAD_ERROR": 502,
    "STORAGE_DELETE_ERROR": 502,
}

_RETRY_AFTER_SECONDS = "1"


def status_for(exc: PortalException) -> int:
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _portal_exception_handler(request: Request, exc: PortalException) -> JSONResponse:
    """Return JSON from PortalException.to_dict() with the mapped status code."""
    status = status_for(exc)
    if status >= 500:
        logger.warning("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    headers = {"Retry-After": _RETRY_AFTER_SECONDS} if status == 503 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""
    app.add_exception_handler(PortalException, _portal_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
