from __future__ import annotations

"""Well-known vocabularies used by the explorer defaults and config files."""

from rdflib.namespace import DC, DCTERMS, FOAF, OWL, RDF, RDFS, SDO, SKOS, XSD

# Prefixes accepted in configuration files as ``prefix:local`` shorthands.
PREFIXES: dict[str, str] = {
    "rdf": str(RDF),
    "rdfs": str(RDFS),
    "owl": str(OWL),
    "xsd": str(XSD),
    "skos": str(SKOS),
    "foaf": str(FOAF),
    "dc": str(DC),
    "dcterms": str(DCTERMS),
    "schema": str(SDO),
}

RDF_TYPE = str(RDF.type)
RDFS_LABEL = str(RDFS.label)
FOAF_DEPICTION = str(FOAF.depiction)


def expand(value: str) -> str:
    """Expand ``prefix:local`` against :data:`PREFIXES`; return others as-is."""

    prefix, sep, local = value.partition(":")
    if sep and prefix in PREFIXES and not local.startswith("//"):
        return PREFIXES[prefix] + local
    return value


__all__ = [
    "PREFIXES",
    "RDF_TYPE",
    "RDFS_LABEL",
    "FOAF_DEPICTION",
    "expand",
]
