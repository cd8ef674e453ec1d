"""HTTP surface of the Linked Data explorer."""
