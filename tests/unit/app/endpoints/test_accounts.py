"""Unit tests for the /accounts REST API endpoints."""

import pytest
from fastapi import HTTPException, status
from pytest_mock import MockerFixture

from app.endpoints.accounts import (
    create_account_endpoint_handler,
    delete_account_endpoint_handler,
    get_account_endpoint_handler,
    list_accounts_endpoint_handler,
    record_usage_endpoint_handler,
    update_limit_endpoint_handler,
)
from models.requests import (
    CreateAccountRequest,
    RecordUsageRequest,
    UpdateLimitRequest,
)
from quota.account_store import AccountStore
from quota.errors import StorageFailureError
from quota.usage_ledger import UsageLedger


def create(store: AccountStore, user_id: str = "u1", token_limit: int = 1000) -> None:
    """Create account through the endpoint handler."""
    create_account_endpoint_handler(
        create_request=CreateAccountRequest(user_id=user_id, token_limit=token_limit),
        store=store,
    )


def test_create_account(account_store: AccountStore) -> None:
    """Test that new account starts with zero usage."""
    response = create_account_endpoint_handler(
        create_request=CreateAccountRequest(user_id="u1", token_limit=1000),
        store=account_store,
    )

    assert response.response == "Account u1 created"
    assert response.account.user_id == "u1"
    assert response.account.token_limit == 1000
    assert response.account.token_usage == 0
    assert response.account.remaining_tokens == 1000
    assert response.account.percentage_used == 0.0


def test_create_account_twice(account_store: AccountStore) -> None:
    """Test that existing account is not overwritten."""
    create(account_store)

    with pytest.raises(HTTPException) as e:
        create(account_store, token_limit=5)

    assert e.value.status_code == status.HTTP_409_CONFLICT
    assert e.value.detail["kind"] == "AlreadyExists"
    assert e.value.detail["cause"] == "Account u1 already exists"
    assert account_store.get("u1").token_limit == 1000


def test_get_account(account_store: AccountStore, usage_ledger: UsageLedger) -> None:
    """Test that account is returned with derived figures."""
    create(account_store)
    usage_ledger.increment_usage("u1", 70)

    response = get_account_endpoint_handler(user_id="u1", store=account_store)

    assert response.token_usage == 70
    assert response.remaining_tokens == 930
    assert response.percentage_used == 7.0


def test_get_missing_account(account_store: AccountStore) -> None:
    """Test that missing account is reported."""
    with pytest.raises(HTTPException) as e:
        get_account_endpoint_handler(user_id="nobody", store=account_store)

    assert e.value.status_code == status.HTTP_404_NOT_FOUND
    assert e.value.detail == {
        "kind": "NotFound",
        "response": "Account not found",
        "cause": "Account nobody not found",
    }


def test_list_accounts(account_store: AccountStore) -> None:
    """Test listing of all accounts."""
    assert list_accounts_endpoint_handler(store=account_store).accounts == []

    create(account_store, "u1")
    create(account_store, "u2", 500)

    response = list_accounts_endpoint_handler(store=account_store)
    assert sorted(a.user_id for a in response.accounts) == ["u1", "u2"]


def test_update_limit(account_store: AccountStore, usage_ledger: UsageLedger) -> None:
    """Test that limit is changed while usage is kept."""
    create(account_store)
    usage_ledger.increment_usage("u1", 300)

    response = update_limit_endpoint_handler(
        user_id="u1",
        update_request=UpdateLimitRequest(new_limit=200),
        store=account_store,
    )

    assert response.account.token_limit == 200
    assert response.account.token_usage == 300
    assert response.account.remaining_tokens == 0


def test_update_limit_missing_account(account_store: AccountStore) -> None:
    """Test that limit of missing account can not be changed."""
    with pytest.raises(HTTPException) as e:
        update_limit_endpoint_handler(
            user_id="u1",
            update_request=UpdateLimitRequest(new_limit=200),
            store=account_store,
        )

    assert e.value.status_code == status.HTTP_404_NOT_FOUND
    assert account_store.get("u1") is None


def test_record_usage(account_store: AccountStore, usage_ledger: UsageLedger) -> None:
    """Test that reported consumption is added to usage."""
    create(account_store)

    response = record_usage_endpoint_handler(
        user_id="u1",
        usage_request=RecordUsageRequest(tokens_consumed=70, cost=0.5),
        ledger=usage_ledger,
    )

    assert response.user_id == "u1"
    assert response.token_usage == 70
    assert response.remaining_tokens == 930
    assert response.total_cost == 0.5


def test_record_usage_over_limit(
    account_store: AccountStore, usage_ledger: UsageLedger
) -> None:
    """Test that consumption over the limit is recorded in full."""
    create(account_store, token_limit=100)

    response = record_usage_endpoint_handler(
        user_id="u1",
        usage_request=RecordUsageRequest(tokens_consumed=140),
        ledger=usage_ledger,
    )

    assert response.token_usage == 140
    assert response.remaining_tokens == 0


def test_record_usage_missing_account(
    account_store: AccountStore, usage_ledger: UsageLedger
) -> None:
    """Test that usage of missing account does not create it."""
    with pytest.raises(HTTPException) as e:
        record_usage_endpoint_handler(
            user_id="ghost",
            usage_request=RecordUsageRequest(tokens_consumed=10),
            ledger=usage_ledger,
        )

    assert e.value.status_code == status.HTTP_404_NOT_FOUND
    assert account_store.get("ghost") is None


def test_delete_account(account_store: AccountStore) -> None:
    """Test that account is removed."""
    create(account_store)

    response = delete_account_endpoint_handler(user_id="u1", store=account_store)

    assert response.user_id == "u1"
    assert response.response == "Account u1 deleted"
    assert account_store.get("u1") is None


def test_delete_missing_account(account_store: AccountStore) -> None:
    """Test that deleting missing account is not an error."""
    response = delete_account_endpoint_handler(user_id="nobody", store=account_store)
    assert response.user_id == "nobody"


def test_storage_failure(mocker: MockerFixture) -> None:
    """Test that storage failure is reported as internal server error."""
    store = mocker.Mock(spec=AccountStore)
    store.list_all.side_effect = StorageFailureError("list accounts", cause="boom")

    with pytest.raises(HTTPException) as e:
        list_accounts_endpoint_handler(store=store)

    assert e.value.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert e.value.detail["kind"] == "StorageFailure"
    assert e.value.detail["cause"] == "Failed to list accounts: boom"
