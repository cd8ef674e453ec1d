from __future__ import annotations

"""Canonical query text for raw resource descriptions."""


def describe_query(uri: str) -> str:
    """Return ``DESCRIBE <uri>`` for an already validated absolute URI."""

    return f"DESCRIBE <{uri}>"


__all__ = ["describe_query"]
