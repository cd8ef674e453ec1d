from __future__ import annotations

"""Loader for the explorer view configuration.

The configuration is materialized once at process start into a frozen
:class:`ExplorerViewConfiguration` and handed to every component that needs
it. Collections are frozensets/tuples so concurrent requests can share one
instance without locks.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple

import yaml

from lodexplorer.kg.namespaces import expand
from lodexplorer.kg.templates import is_iri

_DEFAULT_PATH = Path(__file__).resolve().parents[1] / "config" / "explorer.yml"

_DEFAULT_LABELS = (
    "rdfs:label",
    "skos:prefLabel",
    "foaf:name",
    "dcterms:title",
    "dc:title",
    "schema:name",
)
_DEFAULT_DESCRIPTIONS = (
    "rdfs:comment",
    "dcterms:description",
    "dc:description",
    "skos:definition",
    "schema:description",
)
_DEFAULT_IGNORE_TYPES = (
    "rdfs:Resource",
    "owl:Thing",
    "owl:NamedIndividual",
)
_DEFAULT_IGNORE_RELATIONSHIPS = (
    "rdf:type",
    "owl:sameAs",
    "foaf:depiction",
)


def _expand_iri(value: Any, key: str) -> str:
    iri = expand(str(value).strip())
    if iri and not is_iri(iri):
        raise ValueError(f"Configured {key} entry is not an absolute IRI: {value!r}")
    return iri


def _expand_all(values: Iterable[str], key: str = "relation") -> Tuple[str, ...]:
    seen: list[str] = []
    for value in values:
        iri = _expand_iri(value, key)
        if iri and iri not in seen:
            seen.append(iri)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class ExplorerViewConfiguration:
    """Read-only settings consumed by the resolver and the classifier."""

    base_uri: Optional[str] = None
    ignore_types: FrozenSet[str] = field(
        default_factory=lambda: frozenset(_expand_all(_DEFAULT_IGNORE_TYPES))
    )
    ignore_relationships: FrozenSet[str] = field(
        default_factory=lambda: frozenset(_expand_all(_DEFAULT_IGNORE_RELATIONSHIPS))
    )
    ignore_incoming_relationships: FrozenSet[str] = frozenset()
    top_relationships: Tuple[str, ...] = ()
    label_relations: Tuple[str, ...] = field(
        default_factory=lambda: _expand_all(_DEFAULT_LABELS)
    )
    description_relations: Tuple[str, ...] = field(
        default_factory=lambda: _expand_all(_DEFAULT_DESCRIPTIONS)
    )
    depiction_relation: str = field(default_factory=lambda: expand("foaf:depiction"))
    ignore_blank_nodes: bool = True
    preferred_language: Optional[str] = "en"
    max_type_depth: int = 10

    @property
    def other_relationship_exclusions(self) -> FrozenSet[str]:
        """Predicates hidden from the ordinary outgoing view."""

        return self.ignore_relationships | frozenset(self.top_relationships)

    @property
    def incoming_relationship_exclusions(self) -> FrozenSet[str]:
        """Predicates hidden from the incoming view: the global set widened per view."""

        return self.ignore_relationships | self.ignore_incoming_relationships

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExplorerViewConfiguration":
        defaults = cls()
        base_uri = data.get("base_uri") or None
        language = data.get("preferred_language", defaults.preferred_language)
        return cls(
            base_uri=str(base_uri) if base_uri else None,
            ignore_types=_frozen(
                "ignore_types", data.get("ignore_types"), defaults.ignore_types
            ),
            ignore_relationships=_frozen(
                "ignore_relationships",
                data.get("ignore_relationships"),
                defaults.ignore_relationships,
            ),
            ignore_incoming_relationships=_frozen(
                "ignore_incoming_relationships",
                data.get("ignore_incoming_relationships"),
                defaults.ignore_incoming_relationships,
            ),
            top_relationships=_ordered(
                "top_relationships",
                data.get("top_relationships"),
                defaults.top_relationships,
            ),
            label_relations=_ordered(
                "label_relations", data.get("label_relations"), defaults.label_relations
            ),
            description_relations=_ordered(
                "description_relations",
                data.get("description_relations"),
                defaults.description_relations,
            ),
            depiction_relation=_expand_iri(
                data.get("depiction_relation") or defaults.depiction_relation,
                "depiction_relation",
            ),
            ignore_blank_nodes=bool(
                data.get("ignore_blank_nodes", defaults.ignore_blank_nodes)
            ),
            preferred_language=str(language).lower() if language else None,
            max_type_depth=max(0, _coerce_int(data.get("max_type_depth"), defaults.max_type_depth)),
        )

    def with_base_uri(self, base_uri: Optional[str]) -> "ExplorerViewConfiguration":
        if not base_uri:
            return self
        return replace(self, base_uri=base_uri)


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def _frozen(key: str, value: Any, default: FrozenSet[str]) -> FrozenSet[str]:
    if value is None:
        return default
    return frozenset(_expand_all(_as_list(value), key))


def _ordered(key: str, value: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value is None:
        return default
    return _expand_all(_as_list(value), key)


def load_explorer_config(path: Path | None = None) -> ExplorerViewConfiguration:
    """Load explorer settings from YAML, falling back to built-in defaults."""

    if path is None:
        path = _DEFAULT_PATH
    if not path.exists():
        return ExplorerViewConfiguration()
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Explorer configuration must be a mapping: {path}")
    return ExplorerViewConfiguration.from_mapping(raw.get("explorer", raw))


__all__ = ["ExplorerViewConfiguration", "load_explorer_config"]
