from __future__ import annotations

import pytest

EX = "http://example.org/"


@pytest.mark.parametrize(
    "path, params",
    [
        ("/health", {}),
        ("/explore", {"uri": EX + "A"}),
        ("/explore/resourceTypes", {"uri": EX + "A"}),
        ("/explore/resourceTypes", {"uri": "bad uri"}),
        ("/explore/resourceTypes", {}),
    ],
)
def test_security_headers_present(app, path: str, params: dict) -> None:
    res = app.get(path, params=params)
    assert res.headers["Cache-Control"] == "no-store"
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["Referrer-Policy"] == "no-referrer"
    assert res.headers["X-Request-Id"]
    assert res.headers["Server-Timing"].startswith("app;dur=")


def test_request_ids_are_unique(app) -> None:
    first = app.get("/health").headers["X-Request-Id"]
    second = app.get("/health").headers["X-Request-Id"]
    assert first != second
