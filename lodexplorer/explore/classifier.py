from __future__ import annotations

"""Classification of the triples around a resource into display views.

Every view is answered by one templated ``SELECT`` against the store; the
filtering (ignored types and predicates, blank nodes, label choice) happens
here so that it behaves identically whatever store sits behind the
:class:`~lodexplorer.kg.sparql.SparqlService`.
"""

import logging
from collections import OrderedDict
from typing import AbstractSet, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from lodexplorer.kg.namespaces import RDF_TYPE
from lodexplorer.kg.sparql import SparqlService, coerce_bindings
from lodexplorer.kg.templates import TemplateRegistry

from .config import ExplorerViewConfiguration
from .errors import UpstreamQueryError
from .models import (
    Direction,
    RelatedResourceDescription,
    ShortResourceDescription,
    Term,
    TermKind,
)

logger = logging.getLogger(__name__)

Row = Mapping[str, Term]


def pick_literal(literals: Sequence[Term], preferred_language: Optional[str]) -> Optional[Term]:
    """Choose one literal deterministically.

    Order of preference: exact language match, language sub-tag match
    (``en-GB`` for ``en``), untagged literal, then the first one seen.
    """

    candidates = [lit for lit in literals if lit.value.strip()]
    if not candidates:
        return None
    if preferred_language:
        wanted = preferred_language.lower()
        for lit in candidates:
            if lit.lang and lit.lang.lower() == wanted:
                return lit
        for lit in candidates:
            if lit.lang and lit.lang.lower().split("-", 1)[0] == wanted:
                return lit
    for lit in candidates:
        if not lit.lang:
            return lit
    return candidates[0]


def first_by_priority(
    values: Mapping[str, Sequence[Term]],
    priority: Sequence[str],
    preferred_language: Optional[str],
) -> Optional[str]:
    """Return the chosen literal of the first predicate in ``priority`` with a value."""

    for predicate in priority:
        chosen = pick_literal(values.get(predicate, ()), preferred_language)
        if chosen is not None:
            return chosen.value
    return None


class _Accumulator:
    """Collects rows of one related resource or type before it is emitted."""

    __slots__ = ("predicate", "resource", "types", "labels", "property_labels")

    def __init__(self, predicate: str, resource: str) -> None:
        self.predicate = predicate
        self.resource = resource
        self.types: List[str] = []
        self.labels: Dict[str, List[Term]] = {}
        self.property_labels: List[Term] = []

    def add_label(self, row: Row) -> None:
        prop = row.get("labelProperty")
        label = row.get("label")
        if prop is None or label is None:
            return
        bucket = self.labels.setdefault(prop.value, [])
        if label not in bucket:
            bucket.append(label)


class GraphClassifier:
    def __init__(
        self,
        service: SparqlService,
        config: ExplorerViewConfiguration,
        *,
        registry: Optional[TemplateRegistry] = None,
    ) -> None:
        self._service = service
        self._config = config
        self._registry = registry or TemplateRegistry.load_default()

    async def _select(self, template: str, **params: object) -> List[Dict[str, Term]]:
        query = self._registry.render(template, params)
        logger.debug("Running %s query", template)
        payload = await self._service.select(query)
        return coerce_bindings(payload)

    def _label(self, acc: _Accumulator) -> Optional[str]:
        return first_by_priority(
            acc.labels, self._config.label_relations, self._config.preferred_language
        )

    # -- types -----------------------------------------------------------

    async def get_types(
        self,
        uri: str,
        ignore_types: AbstractSet[str],
        ignore_blank_nodes: bool,
    ) -> List[RelatedResourceDescription]:
        rows = await self._select(
            "resource_types", uri=uri, label_relations=self._config.label_relations
        )
        found = self._collect_types(rows, RDF_TYPE, ignore_types, ignore_blank_nodes)
        return [self._type_description(acc) for acc in found.values()]

    async def get_all_types(
        self,
        uri: str,
        ignore_types: AbstractSet[str],
        ignore_blank_nodes: bool,
    ) -> List[RelatedResourceDescription]:
        """Direct types plus their super-types.

        The hierarchy is walked upwards breadth first over ``rdfs:subClassOf``
        and ``rdfs:subPropertyOf``, at most ``max_type_depth`` levels. Every
        type is visited once, so cycles terminate.
        """

        rows = await self._select(
            "resource_types", uri=uri, label_relations=self._config.label_relations
        )
        found = self._collect_types(rows, RDF_TYPE, ignore_types, ignore_blank_nodes)
        visited = set(found)
        # ignored types are still walked through: their ancestors may be relevant
        frontier = [
            row["type"].value
            for row in rows
            if "type" in row and row["type"].kind is TermKind.URI
        ]
        visited.update(frontier)
        frontier = list(OrderedDict.fromkeys(frontier))
        depth = 0
        while frontier and depth < self._config.max_type_depth:
            depth += 1
            try:
                rows = await self._select(
                    "super_types",
                    types=frontier,
                    label_relations=self._config.label_relations,
                )
            except UpstreamQueryError as exc:
                logger.warning("Type hierarchy traversal unavailable for %s: %s", uri, exc)
                break
            level = self._collect_types(rows, RDF_TYPE, ignore_types, ignore_blank_nodes)
            next_frontier: List[str] = []
            for row in rows:
                term = row.get("type")
                if term is None or term.kind is not TermKind.URI or term.value in visited:
                    continue
                visited.add(term.value)
                next_frontier.append(term.value)
            for key, acc in level.items():
                if key not in found:
                    found[key] = acc
                else:
                    for prop, labels in acc.labels.items():
                        found[key].labels.setdefault(prop, labels)
            frontier = next_frontier
        return [self._type_description(acc) for acc in found.values()]

    def _collect_types(
        self,
        rows: Iterable[Row],
        predicate: str,
        ignore_types: AbstractSet[str],
        ignore_blank_nodes: bool,
    ) -> "OrderedDict[str, _Accumulator]":
        found: "OrderedDict[str, _Accumulator]" = OrderedDict()
        for row in rows:
            term = row.get("type")
            if term is None or term.is_literal:
                continue
            if term.is_blank and ignore_blank_nodes:
                continue
            key = term.as_resource()
            if key in ignore_types:
                continue
            acc = found.get(key)
            if acc is None:
                acc = found[key] = _Accumulator(predicate, key)
            acc.add_label(row)
        return found

    def _type_description(self, acc: _Accumulator) -> RelatedResourceDescription:
        return RelatedResourceDescription(
            property_uri=acc.predicate,
            related_resource_uri=acc.resource,
            direction=Direction.OUTGOING,
            related_resource_label=self._label(acc),
        )

    # -- relationships ---------------------------------------------------

    async def get_related_to_objects(
        self,
        uri: str,
        ignore_relationships: AbstractSet[str],
        ignore_types: AbstractSet[str],
        ignore_blank_nodes: bool,
    ) -> List[RelatedResourceDescription]:
        rows = await self._select(
            "outgoing_relations", uri=uri, label_relations=self._config.label_relations
        )
        return self._relations(
            rows,
            Direction.OUTGOING,
            lambda predicate: predicate not in ignore_relationships,
            ignore_types,
            ignore_blank_nodes,
        )

    async def get_related_resource_by_property(
        self,
        uri: str,
        properties: Sequence[str],
        ignore_types: AbstractSet[str],
        ignore_blank_nodes: bool,
    ) -> List[RelatedResourceDescription]:
        wanted = list(OrderedDict.fromkeys(properties))
        if not wanted:
            return []
        rows = await self._select(
            "outgoing_relations", uri=uri, label_relations=self._config.label_relations
        )
        selected = set(wanted)
        related = self._relations(
            rows,
            Direction.OUTGOING,
            lambda predicate: predicate in selected,
            ignore_types,
            ignore_blank_nodes,
        )
        rank = {predicate: index for index, predicate in enumerate(wanted)}
        return sorted(related, key=lambda item: rank[item.property_uri])

    async def get_related_from_subjects(
        self,
        uri: str,
        ignore_relationships: AbstractSet[str],
        ignore_types: AbstractSet[str],
        ignore_blank_nodes: bool,
    ) -> List[RelatedResourceDescription]:
        rows = await self._select(
            "incoming_relations", uri=uri, label_relations=self._config.label_relations
        )
        return self._relations(
            rows,
            Direction.INCOMING,
            lambda predicate: predicate not in ignore_relationships,
            ignore_types,
            ignore_blank_nodes,
        )

    def _relations(
        self,
        rows: Iterable[Row],
        direction: Direction,
        accept: Callable[[str], bool],
        ignore_types: AbstractSet[str],
        ignore_blank_nodes: bool,
    ) -> List[RelatedResourceDescription]:
        edges: "OrderedDict[Tuple[str, str], _Accumulator]" = OrderedDict()
        for row in rows:
            prop = row.get("property")
            related = row.get("related")
            if prop is None or related is None or related.is_literal:
                continue
            if not accept(prop.value):
                continue
            if related.is_blank and ignore_blank_nodes:
                continue
            key = (prop.value, related.as_resource())
            acc = edges.get(key)
            if acc is None:
                acc = edges[key] = _Accumulator(prop.value, related.as_resource())
            rtype = row.get("relatedType")
            if rtype is not None and not rtype.is_literal:
                if not (rtype.is_blank and ignore_blank_nodes):
                    type_uri = rtype.as_resource()
                    if type_uri not in ignore_types and type_uri not in acc.types:
                        acc.types.append(type_uri)
            acc.add_label(row)
            prop_label = row.get("propertyLabel")
            if prop_label is not None and prop_label not in acc.property_labels:
                acc.property_labels.append(prop_label)
        results = []
        for acc in edges.values():
            prop_label = pick_literal(acc.property_labels, self._config.preferred_language)
            results.append(
                RelatedResourceDescription(
                    property_uri=acc.predicate,
                    related_resource_uri=acc.resource,
                    direction=direction,
                    property_label=prop_label.value if prop_label else None,
                    related_resource_label=self._label(acc),
                    related_resource_types=tuple(acc.types),
                )
            )
        return results

    # -- summaries -------------------------------------------------------

    async def get_short_resource_description(
        self,
        uri: str,
        label_relations: Sequence[str],
        description_relations: Sequence[str],
    ) -> ShortResourceDescription:
        relations = list(OrderedDict.fromkeys([*label_relations, *description_relations]))
        values: Dict[str, List[Term]] = {}
        if relations:
            rows = await self._select("resource_literals", uri=uri, relations=relations)
            for row in rows:
                prop = row.get("property")
                value = row.get("value")
                if prop is None or value is None or not value.is_literal:
                    continue
                values.setdefault(prop.value, []).append(value)
        language = self._config.preferred_language
        label = first_by_priority(values, label_relations, language)
        description = first_by_priority(values, description_relations, language)
        types = await self.get_types(
            uri, self._config.ignore_types, ignore_blank_nodes=True
        )
        return ShortResourceDescription(
            uri=uri,
            label=label or uri,
            description=description,
            type=types[0].related_resource_uri if types else None,
        )

    async def get_resource_depiction(self, uri: str, depiction_relation: str) -> List[str]:
        rows = await self._select("resource_depictions", uri=uri, relation=depiction_relation)
        images: "OrderedDict[str, None]" = OrderedDict()
        for row in rows:
            image = row.get("image")
            if image is None:
                continue
            if image.is_blank and self._config.ignore_blank_nodes:
                continue
            value = image.as_resource().strip()
            if value:
                images.setdefault(value, None)
        return list(images)


__all__ = ["GraphClassifier", "pick_literal", "first_by_priority"]
