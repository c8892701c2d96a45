"""Infrastructure layer: persistence, cache, security and external services."""
