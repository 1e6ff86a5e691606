"""FastAPI exception handlers aligned with the HTTP API contract."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...services.errors import (
    IdeaNotFoundError,
    IdeaValidationError,
    ServiceError,
    StorageError,
)

logger = logging.getLogger(__name__)

DEFAULT_ERRORS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("validation_error", "Invalid request payload"),
    status.HTTP_404_NOT_FOUND: ("not_found", "Resource not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("method_not_allowed", "Method not allowed"),
    status.HTTP_500_INTERNAL_SERVER_ERROR: ("internal_error", "Internal server error"),
    status.HTTP_502_BAD_GATEWAY: ("service_error", "Processing failed"),
}


def _response(
    status_code: int, message: Optional[str] = None, detail: Optional[Dict[str, Any]] = None
) -> JSONResponse:
    """Build the {"error", "message", "detail"} body; message falls back per status."""
    error, default_message = DEFAULT_ERRORS.get(
        status_code, DEFAULT_ERRORS[status.HTTP_500_INTERNAL_SERVER_ERROR]
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message or default_message, "detail": detail},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _response(status.HTTP_400_BAD_REQUEST, detail={"errors": jsonable_encoder(exc.errors())})


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else None
    return _response(exc.status_code, message)


async def idea_validation_handler(request: Request, exc: IdeaValidationError) -> JSONResponse:
    logger.warning("Rejected request to %s: %s", request.url.path, exc)
    return _response(status.HTTP_400_BAD_REQUEST, exc.message)


async def idea_not_found_handler(request: Request, exc: IdeaNotFoundError) -> JSONResponse:
    return _response(status.HTTP_404_NOT_FOUND, exc.message)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    # Upstream details stay in the log; callers get the generic message.
    logger.error("Refinement service error on %s: %s", request.url.path, exc)
    return _response(status.HTTP_502_BAD_GATEWAY)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage error on %s: %s", request.url.path, exc)
    return _response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Idea storage unavailable")


async def internal_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return _response(status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    """Attach shared exception handlers to the FastAPI application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IdeaValidationError, idea_validation_handler)
    app.add_exception_handler(IdeaNotFoundError, idea_not_found_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(Exception, internal_exception_handler)


__all__ = [
    "register_error_handlers",
    "validation_exception_handler",
    "http_exception_handler",
    "internal_exception_handler",
]
