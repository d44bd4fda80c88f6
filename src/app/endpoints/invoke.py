"""Handler for REST API call invoking the model on behalf of a user."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from metering.invocation import MeteredInvocationAdapter
from models.requests import InvokeModelRequest
from models.responses import (
    InvalidInputResponse,
    InvokeModelResponse,
    NotFoundResponse,
    QuotaExceededResponse,
    ServiceUnavailableResponse,
    StorageFailureResponse,
)
from quota.errors import AccountError
from utils.endpoints import get_invocation_adapter
from utils.quota import to_http_exception

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["invoke"])


invoke_responses: dict[int | str, dict[str, Any]] = {
    200: {"description": "Model response with consumed tokens", "model": InvokeModelResponse},
    400: {"description": "Invalid request", "model": InvalidInputResponse},
    404: {"description": "Account not found", "model": NotFoundResponse},
    429: {"description": "No tokens left to spend", "model": QuotaExceededResponse},
    500: {"description": "Account database failure", "model": StorageFailureResponse},
    503: {"description": "Model is unavailable", "model": ServiceUnavailableResponse},
}


@router.post("/accounts/{user_id}/invoke", responses=invoke_responses)
async def invoke_endpoint_handler(
    user_id: str,
    invoke_request: InvokeModelRequest,
    adapter: Annotated[MeteredInvocationAdapter, Depends(get_invocation_adapter)],
) -> InvokeModelResponse:
    """
    Handle request to invoke the model on behalf of a user.

    The model is called only when the user has some tokens left. Tokens the
    model actually consumed are then debited from the account, even when they
    overrun the limit.

    Returns:
        InvokeModelResponse: Model response, consumed tokens and their cost.
    """
    logger.info("Invoking model for user %s", user_id)
    try:
        result = await adapter.invoke(user_id, invoke_request.prompt)
    except AccountError as e:
        raise to_http_exception(e) from e

    return InvokeModelResponse.from_result(user_id, result)
