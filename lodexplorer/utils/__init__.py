"""Utility helpers for lodexplorer."""
