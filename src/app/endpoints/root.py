"""Handler for the / endpoint."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

import constants

logger = logging.getLogger(__name__)
router = APIRouter(tags=["root"])

index_page = f"""
<html>
    <head>
        <title>{constants.SERVICE_NAME}</title>
    </head>
    <body style='font-family: sans-serif;text-align:center;'>
        <h1>{constants.SERVICE_NAME}</h1>
        <div>Per-user token quota accounting</div>
        <div><a href="docs">Swagger UI</a></div>
        <div><a href="redoc">ReDoc</a></div>
    </body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
def root_endpoint_handler(request: Request) -> HTMLResponse:
    """Handle request to the / endpoint."""
    logger.info("Response to / endpoint")
    # Nothing interesting in the request
    _ = request
    return HTMLResponse(index_page)
