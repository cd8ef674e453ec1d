from __future__ import annotations

"""Health endpoint implementation with readiness subchecks."""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

from lodexplorer.explore.facade import ExplorationFacade
from lodexplorer.kg.templates import TemplateRegistry
from lodexplorer.observability.config import HealthBudgets

router = APIRouter(tags=["health"])


@router.get("/health", summary="Service health check")
async def health(request: Request) -> Dict[str, Any]:
    obs = getattr(request.app.state, "observability", None)
    budgets: HealthBudgets = getattr(obs, "health", HealthBudgets())
    readiness_checks: Dict[str, Dict[str, Any]] = {}

    readiness_checks["sparql"] = await _check_sparql(request, budgets)
    readiness_checks["configuration"] = _check_configuration(request)

    readiness_status = "pass" if all(check["status"] == "pass" for check in readiness_checks.values()) else "fail"
    overall_status = "ok" if readiness_status == "pass" else "error"

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "liveness": {"status": "pass"},
        "readiness": {
            "status": readiness_status,
            "checks": readiness_checks,
        },
    }


async def _check_sparql(request: Request, budgets: HealthBudgets) -> Dict[str, Any]:
    facade: ExplorationFacade = request.app.state.facade
    registry: TemplateRegistry = request.app.state.registry
    start = time.perf_counter()
    status = "pass"
    detail: Dict[str, Any] = {"template": "store_probe"}
    try:
        await asyncio.wait_for(
            facade.service.select(registry.render("store_probe", {})),
            timeout=budgets.sparql_select_ms / 1000.0,
        )
        latency_ms = round((time.perf_counter() - start) * 1000, 3)
        if latency_ms > budgets.sparql_select_ms:
            status = "fail"
            detail["reason"] = f"latency {latency_ms}ms > {budgets.sparql_select_ms}ms budget"
    except Exception as exc:
        latency_ms = round((time.perf_counter() - start) * 1000, 3)
        status = "fail"
        detail["error"] = exc.__class__.__name__
    detail["latency_ms"] = latency_ms
    return {"status": status, "details": detail}


def _check_configuration(request: Request) -> Dict[str, Any]:
    facade: ExplorationFacade = request.app.state.facade
    config = facade.config
    detail = {
        "base_uri": config.base_uri,
        "label_relations": len(config.label_relations),
        "top_relationships": len(config.top_relationships),
        "ignore_blank_nodes": config.ignore_blank_nodes,
    }
    status = "pass" if config.label_relations else "fail"
    return {"status": status, "details": detail}


__all__ = ["router", "health"]
