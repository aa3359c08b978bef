"""Problem-document error responses.

Every error leaves the API as ``application/problem+json``. Validation
problems add an ``errors`` map of field name to messages. 500 responses
never include internal exception text.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from metalflow.core.exceptions import AppError

logger = logging.getLogger(__name__)

PROBLEM_CONTENT_TYPE = "application/problem+json"
GENERIC_SERVER_ERROR = "An unexpected error occurred. Please try again later."


def problem_response(
    request: Request,
    status_code: int,
    title: str,
    detail: str,
    error_code: str | None = None,
    errors: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "type": f"https://httpstatuses.com/{status_code}",
        "title": title,
        "status": status_code,
        "detail": detail,
        "instance": request.url.path,
    }
    if error_code:
        body["errorCode"] = error_code
    if errors:
        body["errors"] = errors
    return JSONResponse(
        status_code=status_code, content=body, media_type=PROBLEM_CONTENT_TYPE, headers=headers
    )


def app_error_response(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        return problem_response(
            request,
            exc.status_code,
            exc.title,
            GENERIC_SERVER_ERROR,
            exc.error_code,
            headers=exc.headers,
        )
    return problem_response(
        request,
        exc.status_code,
        exc.title,
        exc.message,
        exc.error_code,
        exc.details,
        headers=exc.headers,
    )


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    if not parts:
        return "request"
    return ".".join(parts)


def _message(error: dict[str, Any]) -> str:
    # Validators raising ValueError get a "Value error, " prefix in "msg".
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    return error["msg"]


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc.__cause__ or exc,
        )
    return app_error_response(request, exc)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = _field_name(tuple(error.get("loc", ())))
        errors.setdefault(field, []).append(_message(error))
    logger.warning("Invalid request to %s: %s", request.url.path, errors)
    return problem_response(
        request,
        400,
        "Request validation failed.",
        "One or more validation errors occurred.",
        "ValidationFailed",
        errors,
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return problem_response(
        request,
        exc.status_code,
        str(exc.detail),
        str(exc.detail),
        headers=dict(exc.headers) if exc.headers else None,
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return problem_response(
        request, 500, "An internal server error occurred.", GENERIC_SERVER_ERROR
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
