"""Handlers for REST API calls managing accounts and their usage."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from models.requests import (
    CreateAccountRequest,
    RecordUsageRequest,
    UpdateLimitRequest,
)
from models.responses import (
    AccountCreatedResponse,
    AccountDeleteResponse,
    AccountListResponse,
    AccountResponse,
    AccountUpdatedResponse,
    AlreadyExistsResponse,
    InvalidInputResponse,
    NotFoundResponse,
    StorageFailureResponse,
    UsageRecordedResponse,
)
from quota.account_store import AccountStore
from quota.errors import AccountError, AccountNotFoundError
from quota.usage_ledger import UsageLedger
from utils.endpoints import get_account_store, get_usage_ledger
from utils.quota import to_http_exception

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["accounts"])


storage_failure_response: dict[str, Any] = {
    "description": "Account database failure",
    "model": StorageFailureResponse,
}

create_account_responses: dict[int | str, dict[str, Any]] = {
    201: {"description": "Account created", "model": AccountCreatedResponse},
    400: {"description": "Invalid request", "model": InvalidInputResponse},
    409: {"description": "Account already exists", "model": AlreadyExistsResponse},
    500: storage_failure_response,
}

list_accounts_responses: dict[int | str, dict[str, Any]] = {
    200: {"description": "All accounts", "model": AccountListResponse},
    500: storage_failure_response,
}

get_account_responses: dict[int | str, dict[str, Any]] = {
    200: {"description": "Account found", "model": AccountResponse},
    404: {"description": "Account not found", "model": NotFoundResponse},
    500: storage_failure_response,
}

update_limit_responses: dict[int | str, dict[str, Any]] = {
    200: {"description": "Token limit updated", "model": AccountUpdatedResponse},
    400: {"description": "Invalid request", "model": InvalidInputResponse},
    404: {"description": "Account not found", "model": NotFoundResponse},
    500: storage_failure_response,
}

record_usage_responses: dict[int | str, dict[str, Any]] = {
    200: {"description": "Usage recorded", "model": UsageRecordedResponse},
    400: {"description": "Invalid request", "model": InvalidInputResponse},
    404: {"description": "Account not found", "model": NotFoundResponse},
    500: storage_failure_response,
}

delete_account_responses: dict[int | str, dict[str, Any]] = {
    200: {"description": "Account deleted", "model": AccountDeleteResponse},
    500: storage_failure_response,
}


@router.post(
    "/accounts",
    status_code=status.HTTP_201_CREATED,
    responses=create_account_responses,
)
def create_account_endpoint_handler(
    create_request: CreateAccountRequest,
    store: Annotated[AccountStore, Depends(get_account_store)],
) -> AccountCreatedResponse:
    """
    Handle request to create new account.

    The account starts with zero usage. Creating an account with an identifier
    that is already used fails, the existing account stays untouched.

    Returns:
        AccountCreatedResponse: The created account.
    """
    logger.debug("Create account request: %s", create_request)
    try:
        account = store.create(create_request.user_id, create_request.token_limit)
    except AccountError as e:
        raise to_http_exception(e) from e

    return AccountCreatedResponse(
        response=f"Account {account.user_id} created",
        account=AccountResponse.from_account(account),
    )


@router.get("/accounts", responses=list_accounts_responses)
def list_accounts_endpoint_handler(
    store: Annotated[AccountStore, Depends(get_account_store)],
) -> AccountListResponse:
    """
    Handle request to list all accounts.

    Returns:
        AccountListResponse: Every account, each with percentage of used limit.
    """
    try:
        accounts = store.list_all()
    except AccountError as e:
        raise to_http_exception(e) from e

    logger.debug("Listing %d accounts", len(accounts))
    return AccountListResponse(
        accounts=[AccountResponse.from_account(account) for account in accounts]
    )


@router.get("/accounts/{user_id}", responses=get_account_responses)
def get_account_endpoint_handler(
    user_id: str,
    store: Annotated[AccountStore, Depends(get_account_store)],
) -> AccountResponse:
    """
    Handle request to retrieve one account.

    Returns:
        AccountResponse: The account with percentage of used limit.
    """
    try:
        account = store.get(user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
    except AccountError as e:
        raise to_http_exception(e) from e

    return AccountResponse.from_account(account)


@router.put("/accounts/{user_id}/limit", responses=update_limit_responses)
def update_limit_endpoint_handler(
    user_id: str,
    update_request: UpdateLimitRequest,
    store: Annotated[AccountStore, Depends(get_account_store)],
) -> AccountUpdatedResponse:
    """
    Handle request to change token limit of existing account.

    Usage and cost are left as they are, so lowering the limit below the
    current usage makes the account exhausted immediately.

    Returns:
        AccountUpdatedResponse: The updated account.
    """
    try:
        account = store.update_limit(user_id, update_request.new_limit)
    except AccountError as e:
        raise to_http_exception(e) from e

    return AccountUpdatedResponse(
        response=f"Token limit of account {user_id} updated",
        account=AccountResponse.from_account(account),
    )


@router.post("/accounts/{user_id}/usage", responses=record_usage_responses)
def record_usage_endpoint_handler(
    user_id: str,
    usage_request: RecordUsageRequest,
    ledger: Annotated[UsageLedger, Depends(get_usage_ledger)],
) -> UsageRecordedResponse:
    """
    Handle request to record consumption reported by the client.

    The quota is not checked; consumption that already happened is always
    recorded, even when it overruns the limit.

    Returns:
        UsageRecordedResponse: Usage after the consumption was recorded.
    """
    try:
        account = ledger.increment_usage(
            user_id, usage_request.tokens_consumed, usage_request.cost
        )
    except AccountError as e:
        raise to_http_exception(e) from e

    return UsageRecordedResponse(
        user_id=account.user_id,
        token_usage=account.token_usage,
        remaining_tokens=account.displayed_remaining_tokens,
        total_cost=account.total_cost,
    )


@router.delete("/accounts/{user_id}", responses=delete_account_responses)
def delete_account_endpoint_handler(
    user_id: str,
    store: Annotated[AccountStore, Depends(get_account_store)],
) -> AccountDeleteResponse:
    """
    Handle request to delete account.

    Deletion is unconditional: deleting an account that does not exist is
    not an error.

    Returns:
        AccountDeleteResponse: Confirmation of the deletion.
    """
    try:
        store.delete(user_id)
    except AccountError as e:
        raise to_http_exception(e) from e

    return AccountDeleteResponse(user_id=user_id, response=f"Account {user_id} deleted")
