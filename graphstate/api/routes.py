"""
=============================================================================
API Routes
=============================================================================

Admin routes for the shared node result cache.

ENDPOINTS:
----------
- GET /health                  - Health check
- GET /metrics                 - Prometheus metrics
- GET /cache/stats             - Hit/miss report
- DELETE /cache/entries/{key}  - Invalidate one entry
- POST /cache/purge            - Drop expired entries
=============================================================================
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from graphstate.api.prometheus import prometheus_metrics_endpoint
from graphstate.api.schemas import (
    CacheStatsResponse,
    HealthResponse,
    InvalidateResponse,
    PurgeResponse,
)
from graphstate.cache.node_cache import NodeResultCache

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_cache(request: Request) -> NodeResultCache:
    """Get the shared cache from app state."""
    return request.app.state.cache


CacheDep = Annotated[NodeResultCache, Depends(get_cache)]


@router.get("/health", response_model=HealthResponse)
async def health(cache: CacheDep) -> HealthResponse:
    return HealthResponse(status="healthy", cache_entries=len(cache))


@router.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Scrape with: curl http://localhost:8000/metrics
    """
    return await prometheus_metrics_endpoint()


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(cache: CacheDep) -> CacheStatsResponse:
    return CacheStatsResponse(**cache.get_cache_report())


@router.delete("/cache/entries/{key:path}", response_model=InvalidateResponse)
async def invalidate_entry(key: str, cache: CacheDep) -> InvalidateResponse:
    logger.info(f"[API] Invalidate requested: key={key[:32]}")
    return InvalidateResponse(key=key, removed=cache.invalidate(key))


@router.post("/cache/purge", response_model=PurgeResponse)
async def purge_expired(cache: CacheDep) -> PurgeResponse:
    removed = cache.purge_expired()
    return PurgeResponse(removed=removed, remaining=len(cache))
