"""
Error envelope and global exception handlers.

Every error leaving the API has the same shape:

    {
        "error": {
            "status_code": 404,
            "error_code": "RESOURCE_MOVIE_NOT_FOUND",
            "message": "Movie with slug 'ghost-movie' not found",
            "type": "Not Found",
            "details": {"resource_type": "Movie", "resource_id": "ghost-movie"},
            "path": "/api/movies/ghost-movie",
            "request_id": "6f1c..."
        }
    }

``details`` is omitted when empty and ``request_id`` when the request did
not pass through the logging middleware.
"""

import logging
from typing import Any, NamedTuple

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from streamcms.exceptions import CMSException, ErrorCode
from streamcms.middleware.logging import get_request_id

logger = logging.getLogger(__name__)


class StatusInfo(NamedTuple):
    label: str
    error_code: ErrorCode


STATUS_INFO: dict[int, StatusInfo] = {
    400: StatusInfo("Bad Request", ErrorCode.VALIDATION_FAILED),
    401: StatusInfo("Unauthorized", ErrorCode.AUTH_FAILED),
    403: StatusInfo("Forbidden", ErrorCode.AUTH_PERMISSION_DENIED),
    404: StatusInfo("Not Found", ErrorCode.RESOURCE_NOT_FOUND),
    405: StatusInfo("Method Not Allowed", ErrorCode.VALIDATION_FAILED),
    409: StatusInfo("Conflict", ErrorCode.VALIDATION_DUPLICATE_RESOURCE),
    422: StatusInfo("Validation Error", ErrorCode.VALIDATION_FAILED),
    500: StatusInfo("Internal Server Error", ErrorCode.INTERNAL_ERROR),
    503: StatusInfo("Service Unavailable", ErrorCode.SERVICE_UNAVAILABLE),
}


def get_error_type(status_code: int) -> str:
    info = STATUS_INFO.get(status_code)
    return info.label if info else "Error"


def get_http_error_code(status_code: int) -> str:
    """Error code for a plain HTTPException, which carries none of its own."""
    info = STATUS_INFO.get(status_code)
    return (info.error_code if info else ErrorCode.UNKNOWN_ERROR).value


def create_error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: ErrorCode | str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "status_code": status_code,
        "error_code": error_code.value if isinstance(error_code, ErrorCode) else error_code,
        "message": message,
        "type": get_error_type(status_code),
    }
    if details:
        body["details"] = details
    body["path"] = request.url.path

    request_id = get_request_id()
    if request_id:
        body["request_id"] = request_id

    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


async def cms_exception_handler(request: Request, exc: CMSException) -> JSONResponse:
    """Domain errors raised by services: missing movies, slug conflicts, bad uploads."""
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}",
        extra={"status_code": exc.status_code, "error_code": exc.error_code.value, "path": request.url.path},
    )
    return create_error_response(request, exc.status_code, exc.message, exc.error_code, details=exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Mostly routing misses (unknown path, wrong method)
    error_code = get_http_error_code(exc.status_code)
    logger.info(
        f"HTTP {exc.status_code} on {request.method} {request.url.path}",
        extra={"status_code": exc.status_code, "error_code": error_code, "path": request.url.path},
    )
    return create_error_response(
        request, exc.status_code, str(exc.detail), error_code, headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError | PydanticValidationError
) -> JSONResponse:
    """Flatten pydantic errors into ``{field, message, type}`` entries."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path")),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.info(
        f"Rejected payload on {request.method} {request.url.path}: {[e['field'] for e in errors]}",
        extra={"status_code": 422, "error_code": ErrorCode.VALIDATION_FAILED.value, "path": request.url.path},
    )
    return create_error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        ErrorCode.VALIDATION_FAILED,
        details={"validation_errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        f"Unhandled {exc.__class__.__name__} on {request.method} {request.url.path}: {exc}",
        extra={"status_code": 500, "error_code": ErrorCode.INTERNAL_ERROR.value, "path": request.url.path},
    )
    return create_error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        ErrorCode.INTERNAL_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    handlers = (
        (CMSException, cms_exception_handler),
        (StarletteHTTPException, http_exception_handler),
        (RequestValidationError, validation_exception_handler),
        (PydanticValidationError, validation_exception_handler),
        (Exception, unhandled_exception_handler),
    )
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, handler)
