"""Handlers for health REST API endpoints.

These endpoints are used to check if service is live and prepared to accept
requests. Note that these endpoints can be accessed using GET or HEAD HTTP
methods. For HEAD HTTP method, just the HTTP response code is used.
"""

import asyncio
import logging
import re
from typing import Any

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.database import get_engine
from app.state import app_state
from client import AsyncLlamaStackClientHolder
from configuration import configuration
from models.responses import LivenessResponse, ReadinessResponse

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["health"])

# Patterns that indicate unresolved template placeholders
TEMPLATE_PATTERNS = (
    r"\$\{env\.[^}]+\}",  # llama-stack env: ${env.VARIABLE}
    r"\$\{[^}]+\}",  # Basic: ${VARIABLE} (check last)
)


def find_unresolved_template_placeholders(
    obj: Any, path: str = ""
) -> list[tuple[str, str]]:
    """
    Recursively search for unresolved template placeholders in configuration.

    Returns list of (path, value) tuples for any unresolved placeholders.
    """
    unresolved: list[tuple[str, str]] = []

    if isinstance(obj, dict):
        for key, value in obj.items():
            new_path = f"{path}.{key}" if path else str(key)
            unresolved.extend(find_unresolved_template_placeholders(value, new_path))
    elif isinstance(obj, list):
        for i, item in enumerate(obj):
            unresolved.extend(find_unresolved_template_placeholders(item, f"{path}[{i}]"))
    elif isinstance(obj, str):
        for pattern in TEMPLATE_PATTERNS:
            matches = re.findall(pattern, obj)
            if matches:
                unresolved.append((path, matches[0]))
                break  # Stop after first match to avoid duplicates
    return unresolved


def check_database_connection() -> None:
    """Run trivial statement to check that the account database responds."""
    with get_engine().connect() as connection:
        connection.execute(text("SELECT 1"))


def check_comprehensive_readiness() -> tuple[bool, str]:
    """
    Readiness check that validates configuration and initialization.

    Checks in order of importance:
    1. Configuration loading
    2. Template placeholder resolution
    3. Application initialization state

    Returns:
        tuple[bool, str]: (is_ready, detailed_reason)
    """
    if not configuration.is_loaded():
        for error in app_state.initialization_status["errors"]:
            if error.startswith("configuration_loaded"):
                return False, f"Configuration loading failed: {error.split(':', 1)[1].strip()}"
        return False, "Configuration not loaded"

    unresolved_placeholders = find_unresolved_template_placeholders(
        configuration.configuration.model_dump(mode="json")
    )
    if unresolved_placeholders:
        example_path, example_value = unresolved_placeholders[0]
        count = len(unresolved_placeholders)
        if count == 1:
            return False, f"Unresolved template placeholder in {example_path}: {example_value}"
        return (
            False,
            f"Found {count} unresolved template placeholders "
            f"(e.g., {example_path}: {example_value})",
        )

    if not app_state.is_fully_initialized:
        init_status = app_state.initialization_status
        if init_status["errors"]:
            error = init_status["errors"][0]
            error_detail = error.split(":", 1)[1].strip() if ":" in error else error
            return False, f"Initialization failed: {error_detail}"

        failed_checks = [k for k, v in init_status["checks"].items() if not v]
        if failed_checks:
            failed_names = [check.replace("_", " ").title() for check in failed_checks]
            return False, f"Incomplete initialization: {', '.join(failed_names)}"

        return False, "Application initialization not complete"

    if not AsyncLlamaStackClientHolder().is_loaded():
        return False, "Llama Stack client is not initialized"

    return True, "Service ready"


get_readiness_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Service is ready",
        "model": ReadinessResponse,
    },
    503: {
        "description": "Service is not ready",
        "model": ReadinessResponse,
    },
}


@router.get("/readiness", responses=get_readiness_responses)
async def readiness_probe_get_method(
    response: Response,
) -> ReadinessResponse:
    """
    Readiness probe that validates complete application readiness.

    This probe checks configuration, startup sequence completion and the
    connection to the account database.

    Returns 200 when fully ready, 503 when any issues are detected.
    """
    logger.info("Response to /readiness endpoint")

    ready, reason = check_comprehensive_readiness()
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(ready=False, reason=reason)

    try:
        await asyncio.to_thread(check_database_connection)
    except (RuntimeError, SQLAlchemyError) as e:
        logger.error("Account database is not reachable: %s", e)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(
            ready=False, reason=f"Account database is not reachable: {e}"
        )

    return ReadinessResponse(ready=True, reason="Service is ready")


get_liveness_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Service is alive",
        "model": LivenessResponse,
    },
    # HTTP_503_SERVICE_UNAVAILABLE will never be returned when unreachable
}


@router.get("/liveness", responses=get_liveness_responses)
async def liveness_probe_get_method() -> LivenessResponse:
    """
    Return the liveness status of the service.

    Returns:
        LivenessResponse: Indicates that the service is alive.
    """
    logger.info("Response to /liveness endpoint")

    return LivenessResponse(alive=True)
