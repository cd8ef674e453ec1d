from __future__ import annotations

"""CLI entrypoint exposing ``main`` for console_scripts."""

from .__main__ import cli, main

__all__ = ["cli", "main"]
