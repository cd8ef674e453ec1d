"""Resource exploration engine: URI resolution, formats and graph classification."""
