from .config import (
    HealthBudgets,
    ObservabilityConfig,
    load_observability_config,
)

__all__ = ["HealthBudgets", "ObservabilityConfig", "load_observability_config"]
