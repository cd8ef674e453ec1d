from __future__ import annotations

"""Application factory for the read-only Linked Data explorer API."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from lodexplorer import __version__ as package_version
from lodexplorer.explore.config import ExplorerViewConfiguration, load_explorer_config
from lodexplorer.explore.facade import ExplorationFacade
from lodexplorer.kg.sparql import GraphSparqlService, HttpSparqlService, SparqlService
from lodexplorer.kg.templates import TemplateRegistry
from lodexplorer.observability import load_observability_config
from lodexplorer.utils.log_json import JsonLogger

from .config import ApiSettings
from .errors import install_error_handlers
from .logging_integration import ObservabilityMiddleware
from .middleware import ConcurrencyLimitMiddleware, RequestContextMiddleware
from .routers import build_router

logger = logging.getLogger("lodexplorer.api")


def build_sparql_service(settings: ApiSettings) -> SparqlService:
    if settings.sparql_url:
        logger.info("Using SPARQL endpoint %s", settings.sparql_url)
        return HttpSparqlService(
            settings.sparql_url, timeout=settings.request_timeout_seconds
        )
    if settings.data_file:
        return GraphSparqlService.from_files(settings.data_file)
    logger.warning("No SPARQL endpoint or data file configured; serving an empty graph")
    return GraphSparqlService()


def create_app(
    settings: Optional[ApiSettings] = None,
    *,
    explorer_config: Optional[ExplorerViewConfiguration] = None,
    sparql_service: Optional[SparqlService] = None,
    registry: Optional[TemplateRegistry] = None,
) -> FastAPI:
    settings = settings or ApiSettings.from_env()
    if explorer_config is None:
        explorer_config = load_explorer_config(settings.explorer_config)
    explorer_config = explorer_config.with_base_uri(settings.base_uri)
    registry = registry or TemplateRegistry.load_default()
    if sparql_service is None:
        sparql_service = build_sparql_service(settings)
    facade = ExplorationFacade(sparql_service, explorer_config, registry=registry)

    app = FastAPI(
        title="Linked Data Explorer API",
        version=package_version,
        docs_url=None,
        redoc_url=None,
        openapi_url="/openapi.json",
        default_response_class=JSONResponse,
    )

    observability = load_observability_config()
    json_logger = JsonLogger(
        "api",
        max_details_bytes=observability.request_logging_max_details_bytes,
        max_value_chars=observability.request_logging_max_value_chars,
        sample_rate=observability.request_logging_sample_rate,
    )

    app.add_middleware(
        ObservabilityMiddleware, logger=json_logger, config=observability
    )
    app.add_middleware(ConcurrencyLimitMiddleware, limit=settings.concurrency_limit)
    app.add_middleware(
        RequestContextMiddleware,
        timeout_seconds=settings.request_timeout_seconds,
    )

    app.state.settings = settings
    app.state.registry = registry
    app.state.facade = facade
    app.state.observability = observability
    app.state.request_logger = json_logger

    install_error_handlers(app)
    app.include_router(build_router())

    # Ensure pooled async HTTP clients are closed on shutdown.
    close_hook = getattr(sparql_service, "aclose", None)
    if callable(close_hook):
        app.add_event_handler("shutdown", close_hook)

    return app


__all__ = ["create_app", "build_sparql_service"]
