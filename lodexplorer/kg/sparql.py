from __future__ import annotations

"""Triple-store adapters behind the ``SparqlService`` capability.

Two implementations are provided: :class:`HttpSparqlService` speaks the
SPARQL 1.1 protocol to a remote endpoint such as Fuseki, and
:class:`GraphSparqlService` answers from an in-process ``rdflib`` graph.
Both translate failures into :mod:`lodexplorer.explore.errors` kinds so the
API layer never sees transport-specific exceptions.
"""

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Protocol

import httpx
from rdflib import Graph, URIRef
from rdflib.util import guess_format

from lodexplorer.explore.errors import UpstreamQueryError, UpstreamTimeoutError
from lodexplorer.explore.formats import RdfFormat
from lodexplorer.explore.models import Term, TermKind

logger = logging.getLogger(__name__)

SPARQL_RESULTS_JSON = "application/sparql-results+json"
_DESCRIBE_RE = re.compile(r"^\s*DESCRIBE\s+<([^>]*)>\s*$", re.IGNORECASE)


class SparqlService(Protocol):
    async def select(self, query: str) -> Mapping[str, Any]:
        ...

    def stream(self, query: str, fmt: RdfFormat) -> AsyncIterator[bytes]:
        ...


class HttpSparqlService:
    """Client for a remote SPARQL endpoint using a pooled ``httpx`` client."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def _headers(self, accept: str) -> Dict[str, str]:
        return {"Content-Type": "application/sparql-query", "Accept": accept}

    async def select(self, query: str) -> Mapping[str, Any]:
        try:
            response = await self._client.post(
                self.endpoint,
                content=query.encode("utf-8"),
                headers=self._headers(SPARQL_RESULTS_JSON),
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise _translate(exc) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamQueryError("Invalid JSON from SPARQL endpoint") from exc

    async def stream(self, query: str, fmt: RdfFormat) -> AsyncIterator[bytes]:
        try:
            async with self._client.stream(
                "POST",
                self.endpoint,
                content=query.encode("utf-8"),
                headers=self._headers(fmt.accept),
            ) as response:
                if response.status_code >= 400:
                    raise UpstreamQueryError(
                        f"SPARQL endpoint returned HTTP {response.status_code}"
                    )
                async for chunk in response.aiter_bytes():
                    if chunk:
                        yield chunk
        except httpx.HTTPError as exc:
            raise _translate(exc) from exc

    async def aclose(self) -> None:
        await self._client.aclose()


def _translate(exc: httpx.HTTPError) -> UpstreamQueryError:
    if isinstance(exc, httpx.TimeoutException):
        return UpstreamTimeoutError("The upstream SPARQL endpoint timed out")
    if isinstance(exc, httpx.HTTPStatusError):
        return UpstreamQueryError(
            f"SPARQL endpoint returned HTTP {exc.response.status_code}"
        )
    return UpstreamQueryError(f"SPARQL endpoint error: {exc.__class__.__name__}")


class GraphSparqlService:
    """Answer queries from an ``rdflib`` graph held in memory."""

    def __init__(self, graph: Optional[Graph] = None, *, chunk_size: int = 64 * 1024) -> None:
        self.graph = graph if graph is not None else Graph()
        self._chunk_size = max(1, chunk_size)

    @classmethod
    def from_files(cls, *paths: Path) -> "GraphSparqlService":
        graph = Graph()
        for path in paths:
            fmt = guess_format(str(path)) or "turtle"
            graph.parse(str(path), format=fmt)
            logger.info("Loaded %s into in-memory store (%d triples)", path, len(graph))
        return cls(graph)

    async def select(self, query: str) -> Mapping[str, Any]:
        await asyncio.sleep(0)
        try:
            result = self.graph.query(query)
            payload = result.serialize(format="json")
        except Exception as exc:
            raise UpstreamQueryError(f"SPARQL query failed: {exc}") from exc
        return json.loads(payload)

    async def stream(self, query: str, fmt: RdfFormat) -> AsyncIterator[bytes]:
        await asyncio.sleep(0)
        try:
            data = self._graph_for(query).serialize(format=fmt.rdflib_format, encoding="utf-8")
        except UpstreamQueryError:
            raise
        except Exception as exc:
            raise UpstreamQueryError(f"Serialization to {fmt.serialization} failed: {exc}") from exc
        for start in range(0, len(data), self._chunk_size):
            yield data[start : start + self._chunk_size]
            await asyncio.sleep(0)

    def _graph_for(self, query: str) -> Graph:
        match = _DESCRIBE_RE.match(query)
        if match:
            return self.graph.cbd(URIRef(match.group(1)))
        try:
            result = self.graph.query(query)
        except Exception as exc:
            raise UpstreamQueryError(f"SPARQL query failed: {exc}") from exc
        if result.graph is None:
            raise UpstreamQueryError("Query does not produce a graph")
        return result.graph


def coerce_bindings(data: Mapping[str, Any]) -> List[Dict[str, Term]]:
    """Convert SPARQL JSON results into rows of :class:`Term` values."""

    results = []
    bindings = data.get("results", {}).get("bindings", [])
    for binding in bindings:
        row = {key: _to_term(value) for key, value in binding.items()}
        results.append(row)
    return results


def _to_term(value: Mapping[str, Any]) -> Term:
    vtype = value.get("type")
    raw = str(value.get("value", ""))
    if vtype == "uri":
        return Term(TermKind.URI, raw)
    if vtype == "bnode":
        return Term(TermKind.BNODE, raw)
    lang = value.get("xml:lang") or None
    return Term(TermKind.LITERAL, raw, lang=lang, datatype=value.get("datatype"))


__all__ = [
    "SparqlService",
    "HttpSparqlService",
    "GraphSparqlService",
    "coerce_bindings",
    "SPARQL_RESULTS_JSON",
]
