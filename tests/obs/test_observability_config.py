from __future__ import annotations

from pathlib import Path

from lodexplorer.observability import ObservabilityConfig, load_observability_config


def test_bundled_defaults() -> None:
    config = load_observability_config()
    assert config.request_logging_enabled is True
    assert config.health.sparql_select_ms == 1500
    assert config.request_logging_include_resource is True


def test_missing_file(tmp_path: Path) -> None:
    assert load_observability_config(tmp_path / "none.yml") == ObservabilityConfig()


def test_values_are_clamped(tmp_path: Path) -> None:
    path = tmp_path / "observability.yml"
    path.write_text(
        "request_logging:\n"
        "  sample_rate: 5\n"
        "  max_details_bytes: -1\n"
        "  include_resource: false\n"
        "  max_value_chars: nope\n"
        "health:\n"
        "  sparql_select_ms: 250\n",
        encoding="utf-8",
    )
    config = load_observability_config(path)
    assert config.request_logging_sample_rate == 1.0
    assert config.request_logging_max_details_bytes == 0
    assert config.request_logging_include_resource is False
    assert config.request_logging_max_value_chars == 512
    assert config.health.sparql_select_ms == 250
