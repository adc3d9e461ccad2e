"""Exception handlers — classified errors to JSON responses.

Learn: The one place where failures become HTTP. Every error response
has the same envelope:

    {"success": false, "error": {"code": "...", "message": "...", "details": [...]}}

AppError maps itself. Request validation becomes VALIDATION_ERROR (or
BAD_REQUEST when the body isn't JSON at all). Anything else is logged
with its traceback and rewritten to a generic INTERNAL_ERROR — the
caller never sees the underlying exception.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tokengate.errors import (
    AppError,
    BadRequestError,
    FieldError,
    InternalError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger()


def error_response(exc: AppError) -> JSONResponse:
    headers = None
    if exc.status_code == 401:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.to_dict()},
        headers=headers,
    )


def _from_validation(exc: RequestValidationError) -> AppError:
    errors = exc.errors()
    for err in errors:
        if err.get("type") == "json_invalid":
            return BadRequestError("Invalid JSON body")
        if err.get("type") == "missing" and tuple(err.get("loc", ())) == ("body",):
            return BadRequestError("Request body is required")

    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        details.append(
            FieldError(field=".".join(loc) or "body", message=err.get("msg", "Invalid value"))
        )
    return ValidationError(details=details)


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for classified, validation, routing and unexpected errors."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(
                "http.internal_error",
                path=request.url.path,
                method=request.method,
                code=exc.code.value,
                cause=repr(exc.cause),
            )
        else:
            logger.warning(
                "http.client_error",
                path=request.url.path,
                method=request.method,
                status_code=exc.status_code,
                code=exc.code.value,
            )
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        app_error = _from_validation(exc)
        logger.warning(
            "http.validation_error",
            path=request.url.path,
            method=request.method,
            code=app_error.code.value,
        )
        return error_response(app_error)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(NotFoundError())
        if exc.status_code >= 500:
            return error_response(InternalError())
        app_error = BadRequestError(str(exc.detail) if exc.detail else None)
        app_error.status_code = exc.status_code
        return error_response(app_error)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(
            "http.unhandled_error",
            path=request.url.path,
            method=request.method,
        )
        return error_response(InternalError(cause=exc))
