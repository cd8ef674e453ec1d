"""Triple-store access: SPARQL adapters, query templates and namespaces."""
