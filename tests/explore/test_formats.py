from __future__ import annotations

import pytest

from lodexplorer.explore.formats import DEFAULT_FORMAT, RdfFormat, resolve_format


@pytest.mark.parametrize(
    "token, expected, content_type",
    [
        ("rdf", RdfFormat.RDF_XML, "application/rdf+xml"),
        ("xml", RdfFormat.RDF_XML, "application/rdf+xml"),
        ("n3", RdfFormat.N3, "text/n3"),
        ("ttl", RdfFormat.TURTLE, "text/turtle"),
        ("turtle", RdfFormat.TURTLE, "text/turtle"),
        ("json", RdfFormat.JSON_LD, "application/rdf+json"),
        ("json-ld", RdfFormat.JSON_LD, "application/rdf+json"),
    ],
)
def test_known_tokens(token: str, expected: RdfFormat, content_type: str) -> None:
    fmt = resolve_format(token)
    assert fmt is expected
    assert fmt.content_type == content_type


@pytest.mark.parametrize("token", [None, "", "csv", "<b>x</b>"])
def test_unknown_or_absent_token_falls_back_to_ntriples(token) -> None:
    fmt = resolve_format(token)
    assert fmt is DEFAULT_FORMAT is RdfFormat.N_TRIPLES
    assert fmt.content_type == "text/plain"


def test_tokens_are_case_and_whitespace_insensitive() -> None:
    assert resolve_format(" TTL ") is RdfFormat.TURTLE
    assert resolve_format("JSON-LD") is RdfFormat.JSON_LD


def test_media_type_carries_utf8_charset() -> None:
    assert RdfFormat.TURTLE.media_type == "text/turtle; charset=utf-8"
    assert RdfFormat.N_TRIPLES.rdflib_format == "nt"
