"""Handler for REST API call to provide metrics."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    generate_latest,
)

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_class=PlainTextResponse)
async def metrics_endpoint_handler(request: Request) -> PlainTextResponse:
    """
    Handle request to the /metrics endpoint.

    Returns REST API call counters, model token counters and quota
    rejection counters in the Prometheus text exposition format.
    """
    # Nothing interesting in the request
    _ = request

    logger.debug("Response to /metrics endpoint")
    return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)
