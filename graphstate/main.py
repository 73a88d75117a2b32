"""
=============================================================================
graphstate - Cache Admin Application
=============================================================================

FastAPI application exposing the shared NodeResultCache for inspection.

Startup sequence:
1. Configure logging from settings
2. Create the shared NodeResultCache (or use the one passed to create_app)
3. Start REST API

Run with:
    uvicorn graphstate.main:app --port 8000
=============================================================================
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from graphstate.api.routes import router as api_router
from graphstate.cache.node_cache import NodeResultCache
from graphstate.config.settings import get_settings

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def create_app(cache: NodeResultCache | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("[STARTUP] Initializing node result cache...")
        # A cache handed in by the executor is shared; only an owned one is cleared
        owns_cache = not hasattr(app.state, "cache")
        if owns_cache:
            app.state.cache = NodeResultCache()
        logger.info("[STARTUP] Application ready!")

        yield

        logger.info("[SHUTDOWN] Shutting down...")
        if owns_cache:
            app.state.cache.clear()

    app = FastAPI(
        title="graphstate",
        description="State channel merging and node result caching",
        version="0.1.0",
        lifespan=lifespan,
    )
    if cache is not None:
        app.state.cache = cache

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "graphstate.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
