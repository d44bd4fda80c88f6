"""Translation of accounting errors to HTTP responses."""

from fastapi import HTTPException, status

from log import get_logger
from models.responses import (
    AbstractErrorResponse,
    AlreadyExistsResponse,
    InvalidInputResponse,
    NotFoundResponse,
    QuotaExceededResponse,
    ServiceUnavailableResponse,
    StorageFailureResponse,
)
from quota.errors import AccountError, OutcomeKind

logger = get_logger(__name__)

# status code and body of every outcome kind
ERROR_RESPONSES: dict[OutcomeKind, tuple[int, type[AbstractErrorResponse]]] = {
    OutcomeKind.INVALID_INPUT: (status.HTTP_400_BAD_REQUEST, InvalidInputResponse),
    OutcomeKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, NotFoundResponse),
    OutcomeKind.ALREADY_EXISTS: (status.HTTP_409_CONFLICT, AlreadyExistsResponse),
    OutcomeKind.QUOTA_EXCEEDED: (
        status.HTTP_429_TOO_MANY_REQUESTS,
        QuotaExceededResponse,
    ),
    OutcomeKind.STORAGE_FAILURE: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        StorageFailureResponse,
    ),
    OutcomeKind.SERVICE_UNAVAILABLE: (
        status.HTTP_503_SERVICE_UNAVAILABLE,
        ServiceUnavailableResponse,
    ),
}


def error_response(error: AccountError) -> tuple[int, AbstractErrorResponse]:
    """Return status code and response body describing the error."""
    status_code, response_class = ERROR_RESPONSES[error.kind]
    return status_code, response_class(cause=error.message)  # type: ignore[call-arg]


def to_http_exception(error: AccountError) -> HTTPException:
    """Construct HTTPException with detail `{"kind", "response", "cause"}`.

    Args:
        error: Error raised by the accounting core.

    Returns:
        HTTPException to be raised from the endpoint handler.
    """
    status_code, response = error_response(error)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s: %s", error.kind.value, error.message)
    else:
        logger.info("%s: %s", error.kind.value, error.message)
    return HTTPException(status_code=status_code, detail=response.dump_detail())
