from __future__ import annotations

import logging
from typing import AsyncIterator, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from lodexplorer.explore.facade import ExplorationFacade

from ..schemas import HtmlViewParameters, RelatedResourceView, ShortDescriptionView
from .dependencies import get_facade

logger = logging.getLogger("lodexplorer.api")

router = APIRouter(prefix="/explore", tags=["explore"])

_URI_HELP = "Absolute URI, or a reference relative to the configured base"


async def _primed(chunks: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
    """Pull the first chunk before the status line is committed.

    Failures raised while connecting to the store therefore become proper
    error responses; later failures abort the stream instead of ending it
    as if it had completed.
    """

    iterator = chunks.__aiter__()
    try:
        first = await iterator.__anext__()
    except StopAsyncIteration:
        first = b""

    async def body() -> AsyncIterator[bytes]:
        try:
            if first:
                yield first
            async for chunk in iterator:
                yield chunk
        except Exception:
            logger.exception("DESCRIBE stream aborted after response start")
            raise
        finally:
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()

    return body()


@router.get("", summary="Serialized RDF describing a resource")
async def describe(
    uri: str = Query(..., description=_URI_HELP),
    format: Optional[str] = Query(None, description="rdf, xml, n3, ttl, turtle, json, json-ld"),
    facade: ExplorationFacade = Depends(get_facade),
) -> StreamingResponse:
    fmt, chunks = facade.describe(uri, format)
    body = await _primed(chunks)
    return StreamingResponse(body, media_type=fmt.media_type)


@router.get("/html", response_model=HtmlViewParameters)
async def describe_html(
    uri: str = Query(..., description=_URI_HELP),
    resource_prefix: Optional[str] = Query(None),
    facade: ExplorationFacade = Depends(get_facade),
) -> HtmlViewParameters:
    view = facade.html_view(uri, resource_prefix)
    return HtmlViewParameters(view=view.view, uri=view.uri, resource_prefix=view.resource_prefix)


@router.get("/resourceTypes", response_model=List[RelatedResourceView])
async def resource_types(
    uri: str = Query(..., description=_URI_HELP), facade: ExplorationFacade = Depends(get_facade)
) -> List[RelatedResourceView]:
    return [RelatedResourceView.from_model(item) for item in await facade.types(uri)]


@router.get("/resourceAllTypes", response_model=List[RelatedResourceView])
async def resource_all_types(
    uri: str = Query(..., description=_URI_HELP), facade: ExplorationFacade = Depends(get_facade)
) -> List[RelatedResourceView]:
    return [RelatedResourceView.from_model(item) for item in await facade.all_types(uri)]


@router.get("/relatedToObjects", response_model=List[RelatedResourceView])
async def related_to_objects(
    uri: str = Query(..., description=_URI_HELP), facade: ExplorationFacade = Depends(get_facade)
) -> List[RelatedResourceView]:
    return [RelatedResourceView.from_model(item) for item in await facade.related_to_objects(uri)]


@router.get("/resourceTopObjects", response_model=List[RelatedResourceView])
async def resource_top_objects(
    uri: str = Query(..., description=_URI_HELP), facade: ExplorationFacade = Depends(get_facade)
) -> List[RelatedResourceView]:
    return [RelatedResourceView.from_model(item) for item in await facade.top_objects(uri)]


@router.get("/relatedFromSubjects", response_model=List[RelatedResourceView])
async def related_from_subjects(
    uri: str = Query(..., description=_URI_HELP), facade: ExplorationFacade = Depends(get_facade)
) -> List[RelatedResourceView]:
    return [
        RelatedResourceView.from_model(item) for item in await facade.related_from_subjects(uri)
    ]


@router.get("/resourceShortDescription", response_model=ShortDescriptionView)
async def resource_short_description(
    uri: str = Query(..., description=_URI_HELP), facade: ExplorationFacade = Depends(get_facade)
) -> ShortDescriptionView:
    return ShortDescriptionView.from_model(await facade.short_description(uri))


@router.get("/resourceDepictions", response_model=List[str])
async def resource_depictions(
    uri: str = Query(..., description=_URI_HELP), facade: ExplorationFacade = Depends(get_facade)
) -> List[str]:
    return await facade.depictions(uri)


__all__ = ["router"]
