"""
=============================================================================
Prometheus Metrics Endpoint
=============================================================================

Serves every registered collector, including the node cache metrics
defined in graphstate.cache.metrics:

- graphstate_cache_hits_total / graphstate_cache_misses_total
- graphstate_cache_expired_total
- graphstate_compute_failures_total
- graphstate_cache_invalidations_total
- graphstate_compute_seconds
- graphstate_cache_entries
=============================================================================
"""

from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response


async def prometheus_metrics_endpoint() -> Response:
    """
    Generate Prometheus metrics in text format.

    Returns metrics in Prometheus exposition format for scraping.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
