"""Application lifespan: startup and shutdown.

Wires infrastructure only: logging, Redis cache, telemetry, DB engine dispose.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from portal.core.config import get_settings
from portal.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, Redis cache (if enabled), telemetry (if enabled).
    Shutdown order: cache disconnect, telemetry shutdown, SQL engine dispose.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    app.state.cache = None
    if settings.redis_enabled:
        from portal.infrastructure.cache.redis_cache import CacheService

        cache = CacheService(settings=settings)
        await cache.connect()
        app.state.cache = cache

    if settings.telemetry_enabled:
        from portal.shared.telemetry.telemetry import PortalTracing, set_telemetry

        tracing = PortalTracing.from_settings(settings)
        if tracing.start():
            tracing.attach(app, redis=settings.redis_enabled)
            set_telemetry(tracing)

    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    if app.state.cache is not None:
        await app.state.cache.disconnect()
        app.state.cache = None

    from portal.shared.telemetry.telemetry import get_telemetry, set_telemetry

    tracing = get_telemetry()
    if tracing is not None:
        tracing.stop()
        set_telemetry(None)

    from portal.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
