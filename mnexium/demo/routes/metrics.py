"""Prometheus metrics endpoint."""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from mnexium.observability.logging import get_logger

logger = get_logger(__name__)


async def get_metrics() -> Response:
    """Get Prometheus metrics.

    Returns metrics in Prometheus text format for scraping.
    """
    logger.debug("metrics_request")

    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
