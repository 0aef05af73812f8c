"""Cross-cutting infrastructure: configuration, logging, errors and Flask extensions."""
