from __future__ import annotations

"""Command line access to the exploration engine."""

import asyncio
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import click

from lodexplorer import __version__
from lodexplorer.explore.config import load_explorer_config
from lodexplorer.explore.errors import ExplorerError, TransportError
from lodexplorer.explore.facade import ExplorationFacade
from lodexplorer.kg.sparql import GraphSparqlService, HttpSparqlService, SparqlService


def _service(endpoint: Optional[str], data: tuple[Path, ...], timeout: float) -> SparqlService:
    if endpoint and data:
        raise click.UsageError("Use either --endpoint or --data, not both.")
    if endpoint:
        return HttpSparqlService(endpoint, timeout=timeout)
    if data:
        return GraphSparqlService.from_files(*data)
    raise click.UsageError("One of --endpoint or --data is required.")


def _facade(ctx: click.Context) -> ExplorationFacade:
    opts = ctx.obj
    config = load_explorer_config(opts["config"]).with_base_uri(opts["base_uri"])
    service = _service(opts["endpoint"], opts["data"], opts["timeout"])
    return ExplorationFacade(service, config)


async def _close(facade: ExplorationFacade) -> None:
    aclose = getattr(facade.service, "aclose", None)
    if aclose is not None:
        await aclose()


@click.group()
@click.version_option(__version__)
@click.option("--endpoint", default=None, help="SPARQL query endpoint URL.")
@click.option(
    "--data",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    multiple=True,
    help="RDF file(s) to load into an in-memory store.",
)
@click.option(
    "--config",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Explorer view configuration (YAML).",
)
@click.option("--base-uri", default=None, help="Base URI for relative resource references.")
@click.option("--timeout", type=float, default=30.0, show_default=True)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    endpoint: Optional[str],
    data: tuple[Path, ...],
    config: Optional[Path],
    base_uri: Optional[str],
    timeout: float,
    verbose: bool,
) -> None:
    """Explore Linked Data resources held in a triple store."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    ctx.obj = {
        "endpoint": endpoint,
        "data": data,
        "config": config,
        "base_uri": base_uri,
        "timeout": timeout,
    }


@cli.command()
@click.argument("uri")
@click.option("--format", "format_token", default=None, help="rdf, xml, n3, ttl, turtle, json, json-ld")
@click.pass_context
def describe(ctx: click.Context, uri: str, format_token: Optional[str]) -> None:
    """Write the DESCRIBE graph of URI to stdout."""
    facade = _facade(ctx)
    out = click.get_binary_stream("stdout")

    async def run() -> None:
        try:
            _, chunks = facade.describe(uri, format_token)
            async for chunk in chunks:
                try:
                    out.write(chunk)
                    out.flush()
                except OSError as exc:
                    raise TransportError(f"Writing output failed: {exc.strerror}") from exc
        finally:
            await _close(facade)

    try:
        asyncio.run(run())
    except ExplorerError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@click.argument("uri")
@click.pass_context
def summary(ctx: click.Context, uri: str) -> None:
    """Print the classified views of URI as JSON."""
    facade = _facade(ctx)

    async def run() -> dict:
        try:
            description = await facade.short_description(uri)
            return {
                "description": asdict(description),
                "types": [asdict(item) for item in await facade.types(uri)],
                "allTypes": [asdict(item) for item in await facade.all_types(uri)],
                "topObjects": [asdict(item) for item in await facade.top_objects(uri)],
                "relatedToObjects": [asdict(item) for item in await facade.related_to_objects(uri)],
                "relatedFromSubjects": [
                    asdict(item) for item in await facade.related_from_subjects(uri)
                ],
                "depictions": await facade.depictions(uri),
            }
        finally:
            await _close(facade)

    try:
        payload = asyncio.run(run())
    except ExplorerError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


@cli.command()
@click.option("--host", default=None, help="Override LODEXPLORER_API_HOST")
@click.option("--port", type=int, default=None, help="Override LODEXPLORER_API_PORT")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Start the explorer API."""
    import uvicorn

    from service.api_server import create_app
    from service.api_server.config import ApiSettings

    opts = ctx.obj
    settings = ApiSettings.from_env()
    if opts["endpoint"]:
        settings.sparql_url = opts["endpoint"]
    if opts["data"]:
        settings.data_file = opts["data"][0]
    if opts["config"]:
        settings.explorer_config = opts["config"]
    if opts["base_uri"]:
        settings.base_uri = opts["base_uri"]
    settings.host = host or settings.host
    settings.port = port or settings.port
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


def main() -> None:  # pragma: no cover - console entrypoint
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
