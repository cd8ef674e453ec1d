from __future__ import annotations

"""Configuration helpers for the explorer API."""

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional


@dataclass(slots=True)
class ApiSettings:
    """Settings loaded from environment variables with sane defaults."""

    sparql_url: Optional[str] = None
    data_file: Optional[Path] = None
    explorer_config: Optional[Path] = None
    base_uri: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 9002
    request_timeout_seconds: float = 30.0
    concurrency_limit: int = 16

    @classmethod
    def from_env(cls) -> "ApiSettings":
        sparql_url = os.getenv("LODEXPLORER_SPARQL_URL") or None
        data_file = os.getenv("LODEXPLORER_DATA_FILE")
        explorer_config = os.getenv("LODEXPLORER_EXPLORER_CONFIG")
        base_uri = os.getenv("LODEXPLORER_BASE_URI") or None
        host = os.getenv("LODEXPLORER_API_HOST", "127.0.0.1")
        port = int(os.getenv("LODEXPLORER_API_PORT", "9002"))
        request_timeout_seconds = float(os.getenv("LODEXPLORER_REQUEST_TIMEOUT", "30"))
        concurrency_limit = int(os.getenv("LODEXPLORER_CONCURRENCY_LIMIT", "16"))
        return cls(
            sparql_url=sparql_url,
            data_file=Path(data_file) if data_file else None,
            explorer_config=Path(explorer_config) if explorer_config else None,
            base_uri=base_uri,
            host=host,
            port=port,
            request_timeout_seconds=request_timeout_seconds,
            concurrency_limit=concurrency_limit,
        )
