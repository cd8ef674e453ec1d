from __future__ import annotations

"""Output formats offered by the raw ``/explore`` endpoint."""

from enum import Enum
from typing import Dict, Optional


class RdfFormat(Enum):
    """Serialization variants; each value is
    ``(serialization name, content type, rdflib format, Accept media type)``.
    """

    N_TRIPLES = ("N-TRIPLES", "text/plain", "nt", "application/n-triples")
    RDF_XML = ("RDF/XML", "application/rdf+xml", "xml", "application/rdf+xml")
    N3 = ("N3", "text/n3", "n3", "text/n3")
    TURTLE = ("TURTLE", "text/turtle", "turtle", "text/turtle")
    JSON_LD = ("JSON-LD", "application/rdf+json", "json-ld", "application/ld+json")

    def __init__(self, serialization: str, content_type: str, rdflib_format: str, accept: str) -> None:
        self.serialization = serialization
        self.content_type = content_type
        self.rdflib_format = rdflib_format
        self.accept = accept

    @property
    def media_type(self) -> str:
        return f"{self.content_type}; charset=utf-8"


DEFAULT_FORMAT = RdfFormat.N_TRIPLES

_TOKENS: Dict[str, RdfFormat] = {
    "rdf": RdfFormat.RDF_XML,
    "xml": RdfFormat.RDF_XML,
    "rdf/xml": RdfFormat.RDF_XML,
    "n3": RdfFormat.N3,
    "ttl": RdfFormat.TURTLE,
    "turtle": RdfFormat.TURTLE,
    "json": RdfFormat.JSON_LD,
    "json-ld": RdfFormat.JSON_LD,
}


def resolve_format(token: Optional[str]) -> RdfFormat:
    """Map a ``format`` request token to a variant; unknown tokens use the default."""

    if not token:
        return DEFAULT_FORMAT
    return _TOKENS.get(token.strip().lower(), DEFAULT_FORMAT)


__all__ = ["RdfFormat", "DEFAULT_FORMAT", "resolve_format"]
