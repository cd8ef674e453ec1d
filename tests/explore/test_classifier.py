from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from lodexplorer.explore.classifier import GraphClassifier, first_by_priority, pick_literal
from lodexplorer.explore.errors import UpstreamQueryError
from lodexplorer.explore.models import Direction, Term, TermKind
from lodexplorer.kg.namespaces import RDF_TYPE
from lodexplorer.kg.sparql import GraphSparqlService

EX = "http://example.org/"
OWL_THING = "http://www.w3.org/2002/07/owl#Thing"
SKOS_BROADER = "http://www.w3.org/2004/02/skos/core#broader"


def lit(value: str, lang: str | None = None) -> Term:
    return Term(TermKind.LITERAL, value, lang=lang)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture()
def classifier(sparql_service, explorer_config) -> GraphClassifier:
    return GraphClassifier(sparql_service, explorer_config)


class TestPickLiteral:
    def test_exact_language_wins(self) -> None:
        values = [lit("Alicia", "es"), lit("Alice"), lit("Alice", "en")]
        assert pick_literal(values, "en").lang == "en"

    def test_language_subtag_before_untagged(self) -> None:
        values = [lit("plain"), lit("Colour", "en-GB")]
        assert pick_literal(values, "en").value == "Colour"

    def test_untagged_then_first(self) -> None:
        assert pick_literal([lit("Hola", "es"), lit("plain")], "en").value == "plain"
        assert pick_literal([lit("Hola", "es"), lit("Salut", "fr")], "en").value == "Hola"

    def test_blank_literals_are_skipped(self) -> None:
        assert pick_literal([lit("  "), lit("")], "en") is None

    def test_priority_order_is_primary_key(self) -> None:
        values = {"p2": [lit("second", "en")], "p1": [lit("first", "de")]}
        assert first_by_priority(values, ["p1", "p2"], "en") == "first"
        assert first_by_priority(values, ["p3"], "en") is None


def test_types_drop_ignored_types(classifier, explorer_config) -> None:
    types = run(classifier.get_types(EX + "A", explorer_config.ignore_types, True))
    assert [t.related_resource_uri for t in types] == [EX + "Person"]
    assert types[0].property_uri == RDF_TYPE
    assert types[0].related_resource_label == "Person"


def test_types_with_empty_ignore_set(classifier) -> None:
    types = run(classifier.get_types(EX + "A", frozenset(), True))
    assert {t.related_resource_uri for t in types} == {EX + "Person", OWL_THING}


def test_blank_node_types_are_invisible(classifier, explorer_config) -> None:
    assert run(classifier.get_types(EX + "D", explorer_config.ignore_types, True)) == []
    shown = run(classifier.get_types(EX + "D", explorer_config.ignore_types, False))
    assert len(shown) == 1
    assert shown[0].related_resource_uri.startswith("_:")


def test_all_types_walks_cyclic_hierarchy_once(classifier, explorer_config) -> None:
    types = run(classifier.get_all_types(EX + "A", explorer_config.ignore_types, True))
    uris = [t.related_resource_uri for t in types]
    assert uris == [EX + "Person", EX + "Agent"]
    assert types[1].related_resource_label == "Agent"


def test_all_types_respects_depth_limit(sparql_service, explorer_config) -> None:
    shallow = GraphClassifier(sparql_service, replace(explorer_config, max_type_depth=0))
    types = run(shallow.get_all_types(EX + "A", explorer_config.ignore_types, True))
    assert [t.related_resource_uri for t in types] == [EX + "Person"]


def test_all_types_falls_back_to_direct_types(graph, explorer_config) -> None:
    class NoHierarchy(GraphSparqlService):
        async def select(self, query):
            if "subClassOf" in query:
                raise UpstreamQueryError("unsupported")
            return await super().select(query)

    classifier = GraphClassifier(NoHierarchy(graph), explorer_config)
    types = run(classifier.get_all_types(EX + "A", explorer_config.ignore_types, True))
    assert [t.related_resource_uri for t in types] == [EX + "Person"]


def test_related_to_objects(classifier, explorer_config) -> None:
    related = run(
        classifier.get_related_to_objects(
            EX + "A",
            explorer_config.other_relationship_exclusions,
            explorer_config.ignore_types,
            True,
        )
    )
    assert len(related) == 1
    edge = related[0]
    assert edge.property_uri == EX + "knows"
    assert edge.property_label == "knows"
    assert edge.related_resource_uri == EX + "B"
    assert edge.related_resource_label == "Bob"
    assert edge.related_resource_types == (EX + "Person",)
    assert edge.direction is Direction.OUTGOING


def test_blank_related_resources_only_when_allowed(classifier, explorer_config) -> None:
    related = run(
        classifier.get_related_to_objects(
            EX + "A",
            explorer_config.other_relationship_exclusions,
            explorer_config.ignore_types,
            False,
        )
    )
    blanks = [r for r in related if r.related_resource_uri.startswith("_:")]
    assert len(blanks) == 1
    assert blanks[0].related_resource_label == "anonymous"


def test_top_and_other_views_partition_outgoing_edges(classifier, explorer_config) -> None:
    other = run(
        classifier.get_related_to_objects(
            EX + "A",
            explorer_config.other_relationship_exclusions,
            explorer_config.ignore_types,
            True,
        )
    )
    top = run(
        classifier.get_related_resource_by_property(
            EX + "A",
            list(explorer_config.top_relationships),
            explorer_config.ignore_types,
            True,
        )
    )
    everything = run(
        classifier.get_related_to_objects(
            EX + "A",
            explorer_config.ignore_relationships,
            explorer_config.ignore_types,
            True,
        )
    )
    as_keys = lambda items: {(r.property_uri, r.related_resource_uri) for r in items}
    assert as_keys(top).isdisjoint(as_keys(other))
    assert as_keys(top) | as_keys(other) == as_keys(everything)
    assert [(r.property_uri, r.related_resource_label) for r in top] == [
        (SKOS_BROADER, "Group")
    ]


def test_related_by_property_without_properties(classifier, explorer_config) -> None:
    assert run(
        classifier.get_related_resource_by_property(EX + "A", [], explorer_config.ignore_types, True)
    ) == []


def test_related_from_subjects(classifier, explorer_config) -> None:
    incoming = run(
        classifier.get_related_from_subjects(
            EX + "A", frozenset(), explorer_config.ignore_types, True
        )
    )
    keys = sorted((r.property_uri, r.related_resource_uri) for r in incoming)
    assert keys == [(EX + "knows", EX + "B"), (EX + "mentions", EX + "C")]
    assert all(r.direction is Direction.INCOMING for r in incoming)

    filtered = run(
        classifier.get_related_from_subjects(
            EX + "A", frozenset({EX + "mentions"}), explorer_config.ignore_types, True
        )
    )
    assert [r.related_resource_uri for r in filtered] == [EX + "B"]


def test_short_description(classifier, explorer_config) -> None:
    summary = run(
        classifier.get_short_resource_description(
            EX + "A", explorer_config.label_relations, explorer_config.description_relations
        )
    )
    assert summary.uri == EX + "A"
    assert summary.label == "Alice"
    assert summary.description == "A person"
    assert summary.type == EX + "Person"


def test_short_description_label_falls_back_to_uri(classifier, explorer_config) -> None:
    summary = run(
        classifier.get_short_resource_description(
            EX + "Nothing", explorer_config.label_relations, explorer_config.description_relations
        )
    )
    assert summary.label == EX + "Nothing"
    assert summary.description is None
    assert summary.type is None


def test_depictions(classifier, explorer_config) -> None:
    images = run(classifier.get_resource_depiction(EX + "A", explorer_config.depiction_relation))
    assert sorted(images) == ["http://img.example.org/a.png", "http://img.example.org/b.png"]
    assert run(classifier.get_resource_depiction(EX + "B", explorer_config.depiction_relation)) == []


class CannedService:
    """Answers every SELECT with the same SPARQL JSON payload."""

    def __init__(self, bindings) -> None:
        self.bindings = bindings
        self.queries: list[str] = []

    async def select(self, query):
        self.queries.append(query)
        return {"head": {"vars": ["image"]}, "results": {"bindings": self.bindings}}

    def stream(self, query, fmt):
        raise AssertionError("DESCRIBE not expected")


def test_depictions_are_deduplicated_in_first_seen_order(explorer_config) -> None:
    a = {"image": {"type": "uri", "value": "http://img.example.org/a.png"}}
    b = {"image": {"type": "uri", "value": "http://img.example.org/b.png"}}
    service = CannedService([a, b, a, {"image": {"type": "bnode", "value": "x"}}, b])
    classifier = GraphClassifier(service, explorer_config)
    images = run(classifier.get_resource_depiction(EX + "A", explorer_config.depiction_relation))
    assert images == ["http://img.example.org/a.png", "http://img.example.org/b.png"]
    assert len(service.queries) == 1
