from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from rdflib import Graph

from lodexplorer.explore.config import ExplorerViewConfiguration
from lodexplorer.explore.facade import ExplorationFacade
from lodexplorer.kg.sparql import GraphSparqlService
from service.api_server import create_app
from service.api_server.config import ApiSettings

EX = "http://example.org/"

FIXTURE_TTL = """
@prefix ex: <http://example.org/> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix skos: <http://www.w3.org/2004/02/skos/core#> .
@prefix foaf: <http://xmlns.com/foaf/0.1/> .

ex:A a ex:Person, owl:Thing ;
    rdfs:label "Alice"@en, "Alicia"@es ;
    rdfs:comment "A person" ;
    ex:knows ex:B, [ rdfs:label "anonymous" ] ;
    skos:broader ex:Group ;
    rdfs:seeAlso "not a resource" ;
    ex:age 42 ;
    foaf:depiction <http://img.example.org/a.png>, <http://img.example.org/b.png> .

ex:B a ex:Person ;
    rdfs:label "Bob" ;
    ex:knows ex:A .

ex:C ex:mentions ex:A .

ex:D a [ a owl:Class ] .

ex:Person a owl:Class ;
    rdfs:label "Person"@en ;
    rdfs:subClassOf ex:Agent .

ex:Agent rdfs:label "Agent" ;
    rdfs:subClassOf ex:Person .

ex:Group rdfs:label "Group"@en-GB .

ex:knows rdfs:label "knows"@en .
"""


@pytest.fixture()
def graph() -> Graph:
    g = Graph()
    g.parse(data=FIXTURE_TTL, format="turtle")
    return g


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "fixture.ttl"
    path.write_text(FIXTURE_TTL, encoding="utf-8")
    return path


@pytest.fixture()
def explorer_config() -> ExplorerViewConfiguration:
    return ExplorerViewConfiguration.from_mapping(
        {"top_relationships": ["rdfs:subClassOf", "skos:broader"]}
    )


@pytest.fixture()
def sparql_service(graph: Graph) -> GraphSparqlService:
    return GraphSparqlService(graph, chunk_size=64)


@pytest.fixture()
def facade(sparql_service, explorer_config) -> ExplorationFacade:
    return ExplorationFacade(sparql_service, explorer_config)


@pytest.fixture()
def app(sparql_service, explorer_config) -> TestClient:
    settings = ApiSettings(
        host="testserver",
        port=9002,
        request_timeout_seconds=5.0,
        concurrency_limit=4,
    )
    api = create_app(
        settings=settings,
        explorer_config=explorer_config,
        sparql_service=sparql_service,
    )
    return TestClient(api)
