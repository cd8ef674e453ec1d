from __future__ import annotations

"""Custom ASGI middleware for the explorer API."""

import asyncio
import json
import logging
import time
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from lodexplorer.explore.errors import ErrorKind, classify_exception

from .errors import error_response, response_for_exception


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a trace id, bound the time to first byte and log each request."""

    def __init__(self, app: ASGIApp, timeout_seconds: float) -> None:
        super().__init__(app)
        self._timeout = timeout_seconds
        self._logger = logging.getLogger("lodexplorer.api")

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        trace_id = uuid.uuid4().hex
        start = time.perf_counter()
        request.state.trace_id = trace_id
        try:
            response = await asyncio.wait_for(call_next(request), timeout=self._timeout)
        except asyncio.TimeoutError:
            self._logger.error(
                json.dumps(
                    {
                        "event": "timeout",
                        "trace_id": trace_id,
                        "path": request.url.path,
                    }
                )
            )
            response = error_response(
                ErrorKind.UPSTREAM_TIMEOUT, "The request timed out waiting for the triple store"
            )
        except Exception as exc:
            self._logger.exception(
                "Unhandled error",
                extra={"trace_id": trace_id, "path": request.url.path, "kind": classify_exception(exc).value},
            )
            response = response_for_exception(exc)
        duration = time.perf_counter() - start
        _inject_headers(response.headers, trace_id, duration)
        self._logger.info(
            json.dumps(
                {
                    "event": "request",
                    "trace_id": trace_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status": response.status_code,
                    "latency_ms": round(duration * 1000, 2),
                }
            )
        )
        return response


class ConcurrencyLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, limit: int) -> None:
        super().__init__(app)
        self._sem = asyncio.Semaphore(max(1, limit))

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        async with self._sem:
            return await call_next(request)


def _inject_headers(headers: MutableHeaders, trace_id: str, duration: float) -> None:
    headers["X-Request-Id"] = trace_id
    headers["Server-Timing"] = f"app;dur={duration * 1000:.2f}"


__all__ = ["RequestContextMiddleware", "ConcurrencyLimitMiddleware"]
