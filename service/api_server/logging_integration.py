from __future__ import annotations

"""ASGI middleware emitting explorer request events and security headers."""

import time
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from lodexplorer.observability.config import ObservabilityConfig
from lodexplorer.utils.log_json import JsonLogger

SECURITY_HEADERS = {
    "Cache-Control": "no-store",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
}


class ObservabilityMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        *,
        logger: JsonLogger,
        config: ObservabilityConfig,
    ) -> None:
        super().__init__(app)
        self._logger = logger
        self._config = config

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:  # pragma: no cover - converted by RequestContextMiddleware
            self._log(request, 500, start, error=exc)
            raise
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        self._log(request, response.status_code, start)
        return response

    def _log(
        self,
        request: Request,
        status: int,
        start: float,
        error: Exception | None = None,
    ) -> None:
        if not self._config.request_logging_enabled:
            return
        if error is not None or status >= 500:
            level, event = "ERROR", "explore_error"
        elif status >= 400:
            level, event = "WARNING", "explore_rejected"
        else:
            level, event = "INFO", "explore_request"
        details = {
            "method": request.method,
            "client": request.client.host if request.client else None,
        }
        if error is not None:
            details["error"] = error.__class__.__name__
        resource = None
        if self._config.request_logging_include_resource:
            resource = request.query_params.get("uri")
        self._logger.emit(
            level,
            event,
            trace_id=getattr(request.state, "trace_id", None),
            route=request.url.path,
            status=status,
            latency_ms=round((time.perf_counter() - start) * 1000, 3),
            resource=resource,
            format=request.query_params.get("format"),
            details=details,
        )


__all__ = ["ObservabilityMiddleware", "SECURITY_HEADERS"]
