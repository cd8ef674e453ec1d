from __future__ import annotations

"""Observability settings for the explorer API and its health probes."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

_DEFAULT_PATH = Path(__file__).resolve().parents[1] / "config" / "observability.yml"


@dataclass(slots=True)
class HealthBudgets:
    """Latency allowance for the triple-store readiness probe."""

    sparql_select_ms: int = 1500


@dataclass(slots=True)
class ObservabilityConfig:
    request_logging_enabled: bool = True
    request_logging_sample_rate: float = 1.0
    request_logging_max_details_bytes: int = 4096
    # Resource URIs are logged clipped; set to false to leave them out entirely.
    request_logging_include_resource: bool = True
    request_logging_max_value_chars: int = 512
    health: HealthBudgets = field(default_factory=HealthBudgets)


def _number(value: Any, default: float, cast: type = int) -> Any:
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        return default


def load_observability_config(path: Path | None = None) -> ObservabilityConfig:
    """Read ``observability.yml``; a missing file yields the defaults."""

    path = path or _DEFAULT_PATH
    if not path.exists():
        return ObservabilityConfig()
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Observability configuration must be a mapping: {path}")
    logging_cfg: Mapping[str, Any] = raw.get("request_logging") or {}
    health_cfg: Mapping[str, Any] = raw.get("health") or {}
    defaults = ObservabilityConfig()
    return ObservabilityConfig(
        request_logging_enabled=bool(logging_cfg.get("enabled", True)),
        request_logging_sample_rate=min(
            1.0, max(0.0, _number(logging_cfg.get("sample_rate"), 1.0, float))
        ),
        request_logging_max_details_bytes=max(
            0, _number(logging_cfg.get("max_details_bytes"), defaults.request_logging_max_details_bytes)
        ),
        request_logging_include_resource=bool(logging_cfg.get("include_resource", True)),
        request_logging_max_value_chars=max(
            0, _number(logging_cfg.get("max_value_chars"), defaults.request_logging_max_value_chars)
        ),
        health=HealthBudgets(
            sparql_select_ms=max(1, _number(health_cfg.get("sparql_select_ms"), 1500))
        ),
    )


__all__ = [
    "HealthBudgets",
    "ObservabilityConfig",
    "load_observability_config",
]
