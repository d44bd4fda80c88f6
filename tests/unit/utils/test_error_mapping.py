"""Unit tests for translation of accounting errors to HTTP responses."""

import pytest
from fastapi import status

from quota.errors import (
    AccountAlreadyExistsError,
    AccountError,
    AccountNotFoundError,
    InvalidInputError,
    OutcomeKind,
    QuotaExceedError,
    ServiceUnavailableError,
    StorageFailureError,
)
from utils.quota import ERROR_RESPONSES, error_response, to_http_exception


def test_every_outcome_kind_is_mapped() -> None:
    """Test that no error kind is left without HTTP response."""
    assert set(ERROR_RESPONSES) == set(OutcomeKind)


@pytest.mark.parametrize(
    "error,status_code,kind",
    [
        (InvalidInputError("token_limit must be positive"), 400, "InvalidInput"),
        (AccountNotFoundError("u1"), 404, "NotFound"),
        (AccountAlreadyExistsError("u1"), 409, "AlreadyExists"),
        (QuotaExceedError("u1", 0), 429, "QuotaExceeded"),
        (StorageFailureError("create account", "u1", "locked"), 500, "StorageFailure"),
        (ServiceUnavailableError("Connection refused"), 503, "ServiceUnavailable"),
    ],
)
def test_to_http_exception(error: AccountError, status_code: int, kind: str) -> None:
    """Test status code and detail of every error kind."""
    exception = to_http_exception(error)

    assert exception.status_code == status_code
    assert exception.detail["kind"] == kind
    assert exception.detail["cause"] == error.message


def test_error_response_quota_exceeded_over_limit() -> None:
    """Test that overrun budget is explained in the cause."""
    status_code, response = error_response(QuotaExceedError("u1", -40))

    assert status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert response.dump_detail() == {
        "kind": "QuotaExceeded",
        "response": "The quota has been exceeded",
        "cause": "User u1 has 40 tokens over the limit",
    }
