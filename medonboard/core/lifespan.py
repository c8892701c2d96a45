"""Application lifespan: startup and shutdown.

Wiring only: logging, Redis cache, telemetry and SQL engine dispose.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from medonboard.core.config import get_settings
from medonboard.infrastructure.cache import CacheService
from medonboard.infrastructure.persistence import database
from medonboard.shared.telemetry.logging import setup_logging
from medonboard.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)

logger = logging.getLogger(__name__)


def _start_telemetry(app: FastAPI) -> None:
    settings = get_settings()
    telemetry = TelemetryConfig.from_settings(settings)
    if not telemetry.setup(settings.telemetry_exporter, settings.telemetry_otlp_endpoint):
        return
    set_telemetry(telemetry)
    telemetry.instrument(
        app, engine=database.get_engine(), redis_enabled=settings.redis_enabled
    )


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, Redis cache (if enabled), telemetry (if enabled).
    Shutdown order: cache disconnect, telemetry shutdown, SQL engine dispose.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    if settings.redis_enabled:
        cache = CacheService(settings=settings)
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None

    if settings.telemetry_enabled:
        _start_telemetry(app)

    yield

    # ---- Shutdown ----
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
        logger.info("Cache disconnected")

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry shutdown complete")

    await database.dispose_engine()
    logger.info("Database engine disposed")
