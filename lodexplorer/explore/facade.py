from __future__ import annotations

"""Entry point used by the HTTP routes and the CLI."""

import logging
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional, Tuple

from lodexplorer.kg.sparql import SparqlService
from lodexplorer.kg.templates import TemplateRegistry

from .classifier import GraphClassifier
from .config import ExplorerViewConfiguration
from .errors import ValidationError
from .formats import RdfFormat, resolve_format
from .models import RelatedResourceDescription, ShortResourceDescription
from .queries import describe_query
from .uris import UriResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HtmlView:
    uri: str
    resource_prefix: str
    view: str = "explore"


class ExplorationFacade:
    """Stateless orchestration of resolver, query builder, formats and classifier.

    A missing ``uri`` yields empty collections and a degraded short
    description; only ``describe`` and ``html_view`` insist on a value.
    """

    def __init__(
        self,
        service: SparqlService,
        config: ExplorerViewConfiguration,
        *,
        registry: Optional[TemplateRegistry] = None,
    ) -> None:
        self._service = service
        self._config = config
        self._resolver = UriResolver(config.base_uri)
        self._classifier = GraphClassifier(service, config, registry=registry)

    @property
    def config(self) -> ExplorerViewConfiguration:
        return self._config

    @property
    def service(self) -> SparqlService:
        return self._service

    def resolve(self, uri: Optional[str]) -> Optional[str]:
        return self._resolver.resolve(uri)

    def _require(self, uri: Optional[str]) -> str:
        resolved = self._resolver.resolve(uri)
        if resolved is None:
            raise ValidationError.required("uri")
        return resolved

    def describe(
        self, uri: Optional[str], format_token: Optional[str] = None
    ) -> Tuple[RdfFormat, AsyncIterator[bytes]]:
        """Validate eagerly, then hand back the lazily started byte stream."""

        resolved = self._require(uri)
        fmt = resolve_format(format_token)
        logger.info("Describing %s as %s", resolved, fmt.serialization)
        return fmt, self._service.stream(describe_query(resolved), fmt)

    def html_view(self, uri: Optional[str], resource_prefix: Optional[str] = None) -> HtmlView:
        resolved = self._require(uri)
        return HtmlView(uri=resolved, resource_prefix=resource_prefix or "")

    async def types(self, uri: Optional[str]) -> List[RelatedResourceDescription]:
        resolved = self.resolve(uri)
        if resolved is None:
            return []
        return await self._classifier.get_types(
            resolved, self._config.ignore_types, self._config.ignore_blank_nodes
        )

    async def all_types(self, uri: Optional[str]) -> List[RelatedResourceDescription]:
        resolved = self.resolve(uri)
        if resolved is None:
            return []
        return await self._classifier.get_all_types(
            resolved, self._config.ignore_types, self._config.ignore_blank_nodes
        )

    async def related_to_objects(self, uri: Optional[str]) -> List[RelatedResourceDescription]:
        resolved = self.resolve(uri)
        if resolved is None:
            return []
        return await self._classifier.get_related_to_objects(
            resolved,
            self._config.other_relationship_exclusions,
            self._config.ignore_types,
            self._config.ignore_blank_nodes,
        )

    async def top_objects(self, uri: Optional[str]) -> List[RelatedResourceDescription]:
        resolved = self.resolve(uri)
        if resolved is None:
            return []
        top = [
            predicate
            for predicate in self._config.top_relationships
            if predicate not in self._config.ignore_relationships
        ]
        return await self._classifier.get_related_resource_by_property(
            resolved,
            top,
            self._config.ignore_types,
            self._config.ignore_blank_nodes,
        )

    async def related_from_subjects(self, uri: Optional[str]) -> List[RelatedResourceDescription]:
        resolved = self.resolve(uri)
        if resolved is None:
            return []
        return await self._classifier.get_related_from_subjects(
            resolved,
            self._config.incoming_relationship_exclusions,
            self._config.ignore_types,
            self._config.ignore_blank_nodes,
        )

    async def short_description(self, uri: Optional[str]) -> ShortResourceDescription:
        resolved = self.resolve(uri)
        if resolved is None:
            raw = uri or ""
            return ShortResourceDescription(uri=raw, label=raw)
        return await self._classifier.get_short_resource_description(
            resolved,
            self._config.label_relations,
            self._config.description_relations,
        )

    async def depictions(self, uri: Optional[str]) -> List[str]:
        resolved = self.resolve(uri)
        if resolved is None:
            return []
        return await self._classifier.get_resource_depiction(
            resolved, self._config.depiction_relation
        )


__all__ = ["ExplorationFacade", "HtmlView"]
