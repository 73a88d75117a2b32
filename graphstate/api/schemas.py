"""
=============================================================================
API Schemas
=============================================================================

Pydantic models for the cache admin endpoints.
=============================================================================
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response body for /health endpoint."""

    status: str
    version: str = "0.1.0"
    cache_entries: int


class CacheStatsResponse(BaseModel):
    """Response body for /cache/stats endpoint."""

    entries: int
    lookups: int
    hits: int
    misses: int
    expired: int
    failures: int
    invalidations: int
    hit_rate: float
    computations: int
    avg_compute_seconds: float


class InvalidateResponse(BaseModel):
    """Response body for DELETE /cache/entries/{key}."""

    key: str
    removed: bool


class PurgeResponse(BaseModel):
    """Response body for POST /cache/purge."""

    removed: int
    remaining: int
