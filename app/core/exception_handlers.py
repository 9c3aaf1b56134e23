"""Exception → HTTP response mapping for the workflow API.

Register with register_exception_handlers(app). Every error body has the
same shape: {"error", "message", "details"} plus the request id when the
RequestIDMiddleware assigned one.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import WorkflowEngineException

logger = logging.getLogger(__name__)

# error_code → HTTP status. Unlisted codes are client errors (400).
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "COMMENT_REQUIRED": 400,
    "PERMISSION_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "WORKFLOW_NOT_FOUND": 404,
    "CONCURRENCY_CONFLICT": 409,
    "SQL_NOT_CONFIGURED": 503,
}


def status_for(exc: WorkflowEngineException) -> int:
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _error_body(
    request: Request, error: str, message: Any, details: Any = None
) -> dict[str, Any]:
    body: dict[str, Any] = {"error": error, "message": message}
    if details is not None:
        body["details"] = details
    request_id = request.scope.get("state", {}).get("request_id")
    if request_id:
        body["request_id"] = request_id
    return body


async def _workflow_exception_handler(
    request: Request, exc: WorkflowEngineException
) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.message)
    elif status in (403, 409):
        # Denials and lost races are expected but worth seeing in the log.
        logger.info(
            "%s %s -> %d %s: %s",
            request.method,
            request.url.path,
            status,
            exc.error_code,
            exc.message,
        )
    body = exc.to_dict()
    request_id = request.scope.get("state", {}).get("request_id")
    if request_id:
        body["request_id"] = request_id
    return JSONResponse(status_code=status, content=body)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies and parameters (422)."""
    return JSONResponse(
        status_code=422,
        content=_error_body(
            request, "VALIDATION_ERROR", "Request validation failed", exc.errors()
        ),
    )


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, "HTTP_ERROR", exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500; the exception text is only exposed when debug is on."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content=_error_body(request, "INTERNAL_ERROR", message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers above. Call once, right after creating the app."""
    app.add_exception_handler(WorkflowEngineException, _workflow_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
