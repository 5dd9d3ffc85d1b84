"""Application lifespan: startup and shutdown.

Wiring only: logging, the tagged cache backend and the SQL engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.infrastructure.cache import build_cache
from app.shared.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and the cache on startup; release them on shutdown.

    An unreachable Redis does not block startup: the backend reports itself
    unavailable and reads fall back to the database until it recovers.
    """
    setup_logging()

    # ---- Startup ----
    if getattr(app.state, "cache", None) is None:
        app.state.cache = await build_cache()
    logger.info(
        "Cache backend %s (available=%s)",
        type(app.state.cache).__name__,
        app.state.cache.is_available(),
    )

    yield

    # ---- Shutdown ----
    cache = getattr(app.state, "cache", None)
    if cache is not None and hasattr(cache, "disconnect"):
        await cache.disconnect()
        logger.info("Cache disconnected")
    app.state.cache = None

    from app.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
