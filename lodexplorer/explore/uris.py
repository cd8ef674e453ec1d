from __future__ import annotations

"""Resolution of caller-supplied URIs against the configured base."""

import re
from typing import Optional
from urllib.parse import urljoin, urlsplit

from .errors import ValidationError

# RFC 3986 repertoire (unreserved, reserved, '%') plus non-ASCII for IRIs.
_ALLOWED_RE = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%\u00a0-\U0010ffff]*$")
_BAD_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
_SPACE_RE = re.compile(r"\s")


class UriResolver:
    """Validate and absolutize the ``uri`` request parameter.

    Error messages never contain the submitted value; the parameter may be
    reflected into a browser-rendered error page.
    """

    def __init__(self, base_uri: Optional[str] = None, *, parameter: str = "uri") -> None:
        self._parameter = parameter
        self._base: Optional[str] = None
        if base_uri:
            if not _is_reference(base_uri) or not _has_scheme(base_uri):
                raise ValueError("Configured base URI must be an absolute RFC 3986 URI")
            self._base = base_uri

    @property
    def base_uri(self) -> Optional[str]:
        return self._base

    def resolve(self, raw: Optional[str]) -> Optional[str]:
        if raw is None or raw == "":
            return None
        if not _is_reference(raw):
            raise ValidationError.malformed_uri(self._parameter)
        if self._base is not None:
            resolved = urljoin(self._base, raw)
        else:
            resolved = raw
        if not _has_scheme(resolved):
            raise ValidationError.malformed_uri(self._parameter)
        return resolved


def _is_reference(value: str) -> bool:
    if _SPACE_RE.search(value) or not _ALLOWED_RE.match(value):
        return False
    if _BAD_PERCENT_RE.search(value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        # unbalanced IPv6 brackets
        return False
    tail = parts.path + parts.query + parts.fragment
    if "[" in tail or "]" in tail:
        return False
    head, sep, _ = value.partition(":")
    if sep and "/" not in head and "?" not in head and "#" not in head:
        return bool(_SCHEME_RE.match(head))
    return True


def _has_scheme(value: str) -> bool:
    head, sep, _ = value.partition(":")
    return bool(sep) and bool(_SCHEME_RE.match(head))


__all__ = ["UriResolver"]
