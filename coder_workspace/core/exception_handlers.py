"""Exception handlers: domain and Coder errors to JSON responses.

Every error body has the shape {"error", "message", "details", "request_id"}
so the review host can show one message format and users can quote the
request id when reporting a failure.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coder_workspace.core.config import get_settings
from coder_workspace.domain.exceptions import CoderWorkspaceException
from coder_workspace.middleware.request_id import current_request_id

logger = logging.getLogger(__name__)

# Upstream Coder failures are gateway errors, not client errors
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "WORKSPACE_NOT_FOUND": 404,
    "BINDING_NOT_FOUND": 404,
    "WORKSPACE_CONFLICT": 409,
    "CODER_API_ERROR": 502,
    "CODER_ROUTE_UNSUPPORTED": 502,
    "CODER_UNAUTHORIZED": 502,
    "CODER_UNREACHABLE": 502,
    "WORKSPACE_DELETE_FAILED": 502,
}


def status_for(exc: CoderWorkspaceException) -> int:
    """HTTP status for a service exception; unknown codes are treated as bad input."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _error_response(
    status_code: int, error: str, message: Any, details: Any = None
) -> JSONResponse:
    content: dict[str, Any] = {"error": error, "message": message}
    if details is not None:
        content["details"] = details
    content["request_id"] = current_request_id()
    return JSONResponse(status_code=status_code, content=content)


def _service_exception_handler(request: Request, exc: CoderWorkspaceException) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.warning(
            "%s %s failed upstream (%s): %s",
            request.method,
            request.url.path,
            exc.error_code,
            exc.message,
        )
    body = exc.to_dict()
    return _error_response(status, body["error"], body["message"], body["details"])


def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 with one {field, message} entry per invalid body or header value."""
    fields = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return _error_response(422, "VALIDATION_ERROR", "Request validation failed", fields)


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, "HTTP_ERROR", exc.detail)


def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500; the exception text is only exposed in debug mode."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return _error_response(500, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on `app`. Call once from create_app()."""
    app.add_exception_handler(CoderWorkspaceException, _service_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
