"""Core: configuration, app lifespan, exception handlers and rate limiting."""
