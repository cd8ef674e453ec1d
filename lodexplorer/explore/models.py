from __future__ import annotations

"""Value objects produced by the exploration engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Direction(str, Enum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"


class TermKind(str, Enum):
    URI = "uri"
    BNODE = "bnode"
    LITERAL = "literal"


@dataclass(frozen=True, slots=True)
class Term:
    """One RDF term as returned in a SPARQL result binding."""

    kind: TermKind
    value: str
    lang: Optional[str] = None
    datatype: Optional[str] = None

    @property
    def is_blank(self) -> bool:
        return self.kind is TermKind.BNODE

    @property
    def is_literal(self) -> bool:
        return self.kind is TermKind.LITERAL

    def as_resource(self) -> str:
        if self.is_blank:
            return f"_:{self.value}"
        return self.value


@dataclass(frozen=True, slots=True)
class RelatedResourceDescription:
    property_uri: str
    related_resource_uri: str
    direction: Direction = Direction.OUTGOING
    property_label: Optional[str] = None
    related_resource_label: Optional[str] = None
    related_resource_types: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class ShortResourceDescription:
    uri: str
    label: str
    description: Optional[str] = None
    type: Optional[str] = None


__all__ = [
    "Direction",
    "TermKind",
    "Term",
    "RelatedResourceDescription",
    "ShortResourceDescription",
]
