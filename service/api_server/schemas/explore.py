from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from lodexplorer.explore.models import RelatedResourceDescription, ShortResourceDescription


class RelatedResourceView(BaseModel):
    property_uri: str = Field(..., description="Predicate IRI linking the two resources")
    property_label: Optional[str] = Field(default=None)
    related_resource_uri: str = Field(..., description="IRI (or _:id blank node) of the related resource")
    related_resource_label: Optional[str] = Field(default=None)
    related_resource_types: List[str] = Field(default_factory=list, description="rdf:type IRIs of the related resource")
    direction: str = Field(..., description="'outgoing' or 'incoming'")

    @classmethod
    def from_model(cls, item: RelatedResourceDescription) -> "RelatedResourceView":
        return cls(
            property_uri=item.property_uri,
            property_label=item.property_label,
            related_resource_uri=item.related_resource_uri,
            related_resource_label=item.related_resource_label,
            related_resource_types=list(item.related_resource_types),
            direction=item.direction.value,
        )


class ShortDescriptionView(BaseModel):
    uri: str
    label: str = Field(..., description="Preferred label, the URI itself when none exists")
    description: Optional[str] = Field(default=None)
    type: Optional[str] = Field(default=None, description="First displayable rdf:type")

    @classmethod
    def from_model(cls, item: ShortResourceDescription) -> "ShortDescriptionView":
        return cls(uri=item.uri, label=item.label, description=item.description, type=item.type)


class HtmlViewParameters(BaseModel):
    view: str = Field("explore", description="Template rendering the page")
    uri: str
    resource_prefix: str = ""
