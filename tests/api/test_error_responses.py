from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from lodexplorer.kg.sparql import HttpSparqlService
from service.api_server import create_app
from service.api_server.config import ApiSettings

EX = "http://example.org/"
XSS = "<script>alert(1)</script>"


def _upstream_app(handler, explorer_config) -> TestClient:
    service = HttpSparqlService(
        "http://sparql.test/query", timeout=2.0, transport=httpx.MockTransport(handler)
    )
    api = create_app(
        settings=ApiSettings(request_timeout_seconds=5.0),
        explorer_config=explorer_config,
        sparql_service=service,
    )
    return TestClient(api)


@pytest.mark.parametrize(
    "path",
    ["/explore", "/explore/html", "/explore/resourceTypes", "/explore/resourceShortDescription"],
)
def test_missing_uri_parameter(app, path: str) -> None:
    res = app.get(path)
    assert res.status_code == 400
    assert res.headers["content-type"] == "text/plain; charset=utf-8"
    assert res.text == "Parameter [uri] is required"


@pytest.mark.parametrize("path", ["/explore", "/explore/html"])
def test_empty_uri_is_required_for_describe(app, path: str) -> None:
    res = app.get(path, params={"uri": ""})
    assert res.status_code == 400
    assert res.text == "Parameter [uri] is required"


@pytest.mark.parametrize(
    "path",
    ["/explore", "/explore/resourceTypes", "/explore/relatedFromSubjects", "/explore/resourceDepictions"],
)
def test_malformed_uri_is_not_echoed(app, path: str) -> None:
    res = app.get(path, params={"uri": XSS})
    assert res.status_code == 400
    assert res.headers["content-type"] == "text/plain; charset=utf-8"
    assert res.text == "Parameter [uri] should be an RFC 3986 compliant URI"
    assert "<script>" not in res.text


def test_upstream_failure_maps_to_502(explorer_config) -> None:
    client = _upstream_app(lambda request: httpx.Response(500, text="<b>stack</b>"), explorer_config)
    for path in ("/explore", "/explore/resourceTypes"):
        res = client.get(path, params={"uri": EX + "A"})
        assert res.status_code == 502
        assert res.headers["content-type"] == "text/plain; charset=utf-8"
        assert "<b>" not in res.text


def test_upstream_timeout_maps_to_504(explorer_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client = _upstream_app(handler, explorer_config)
    res = client.get("/explore", params={"uri": EX + "A"})
    assert res.status_code == 504
    assert res.text == "The upstream SPARQL endpoint timed out"


def test_unknown_route_is_plain_text_404(app) -> None:
    res = app.get("/explore/nothingHere", params={"uri": EX + "A"})
    assert res.status_code == 404
    assert res.headers["content-type"] == "text/plain; charset=utf-8"
