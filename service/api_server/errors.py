from __future__ import annotations

"""Mapping of explorer error kinds to plain-text HTTP responses.

Every error leaves the API as ``text/plain`` so a crafted ``uri`` or
``format`` value can never be rendered as markup by a browser.
"""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lodexplorer.explore.errors import (
    ErrorKind,
    ExplorerError,
    ValidationError,
    classify_exception,
)

logger = logging.getLogger("lodexplorer.api")

ERROR_MEDIA_TYPE = "text/plain; charset=utf-8"

ERROR_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UPSTREAM: 502,
    ErrorKind.UPSTREAM_TIMEOUT: 504,
    ErrorKind.TRANSPORT: 500,
    ErrorKind.UNKNOWN: 500,
}

_TYPE_NAMES = {
    "int_parsing": "integer",
    "int_type": "integer",
    "float_parsing": "number",
    "bool_parsing": "boolean",
    "string_type": "string",
}


def error_response(
    kind: ErrorKind,
    message: str,
    *,
    status: Optional[int] = None,
    headers: Optional[Dict[str, str]] = None,
) -> PlainTextResponse:
    response = PlainTextResponse(
        content=message,
        status_code=status or ERROR_STATUS[kind],
        headers=headers,
    )
    response.headers["Content-Type"] = ERROR_MEDIA_TYPE
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Cache-Control"] = "no-store"
    return response


def response_for_exception(exc: BaseException) -> PlainTextResponse:
    kind = classify_exception(exc)
    message = str(exc) or exc.__class__.__name__
    return error_response(kind, message)


def validation_message(exc: RequestValidationError) -> str:
    """Describe the first failing parameter without echoing its value."""

    for error in exc.errors():
        loc = error.get("loc") or ()
        name = str(loc[-1]) if loc else "request"
        if error.get("type") in ("missing", "value_error.missing"):
            return ValidationError.required(name).args[0]
        type_name = _TYPE_NAMES.get(str(error.get("type")), "valid value")
        return ValidationError.wrong_type(name, type_name).args[0]
    return "Invalid request parameters"


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ExplorerError)
    async def explorer_error_handler(request: Request, exc: ExplorerError) -> PlainTextResponse:
        level = logging.WARNING if exc.kind is ErrorKind.VALIDATION else logging.ERROR
        logger.log(level, "%s on %s: %s", exc.kind.value, request.url.path, exc)
        return response_for_exception(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
        message = validation_message(exc)
        logger.warning("validation on %s: %s", request.url.path, message)
        return error_response(ErrorKind.VALIDATION, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
        kind = ErrorKind.VALIDATION if exc.status_code < 500 else ErrorKind.UNKNOWN
        return error_response(kind, detail, status=exc.status_code, headers=exc.headers)


__all__ = [
    "ERROR_MEDIA_TYPE",
    "ERROR_STATUS",
    "error_response",
    "response_for_exception",
    "validation_message",
    "install_error_handlers",
]
