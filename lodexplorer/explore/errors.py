from __future__ import annotations

"""Error taxonomy shared by the exploration engine and its transports."""

import asyncio
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UPSTREAM = "upstream"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class ExplorerError(Exception):
    """Base class for failures surfaced to explorer callers.

    ``str(exc)`` is the caller-facing message. Subclasses that wrap
    attacker-controlled input must only ever carry fixed text.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN


class ValidationError(ExplorerError):
    kind = ErrorKind.VALIDATION

    @classmethod
    def required(cls, name: str) -> "ValidationError":
        return cls(f"Parameter [{name}] is required")

    @classmethod
    def malformed_uri(cls, name: str = "uri") -> "ValidationError":
        return cls(f"Parameter [{name}] should be an RFC 3986 compliant URI")

    @classmethod
    def wrong_type(cls, name: str, type_name: str) -> "ValidationError":
        return cls(f"Parameter [{name}] should be a [{type_name}]")


class UpstreamQueryError(ExplorerError):
    """The triple store rejected or failed a query, or serialization broke."""

    kind = ErrorKind.UPSTREAM


class UpstreamTimeoutError(UpstreamQueryError):
    kind = ErrorKind.UPSTREAM_TIMEOUT


class TransportError(ExplorerError):
    """Writing the response to the caller failed."""

    kind = ErrorKind.TRANSPORT


def classify_exception(exc: BaseException) -> ErrorKind:
    if isinstance(exc, ExplorerError):
        return exc.kind
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorKind.UPSTREAM_TIMEOUT
    if isinstance(exc, OSError):
        return ErrorKind.TRANSPORT
    return ErrorKind.UNKNOWN


__all__ = [
    "ErrorKind",
    "ExplorerError",
    "ValidationError",
    "UpstreamQueryError",
    "UpstreamTimeoutError",
    "TransportError",
    "classify_exception",
]
