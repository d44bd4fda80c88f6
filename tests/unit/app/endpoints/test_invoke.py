"""Unit tests for the /accounts/{user_id}/invoke REST API endpoint."""

import pytest
from fastapi import HTTPException, status

from app.endpoints.invoke import invoke_endpoint_handler
from metering.invocation import MeteredInvocationAdapter
from metering.pricing import Pricing
from models.requests import InvokeModelRequest
from quota.account_store import AccountStore
from quota.errors import ServiceUnavailableError
from quota.quota_gate import QuotaGate
from quota.usage_ledger import UsageLedger
from tests.unit.utils.model_backends import FakeModelBackend


def make_adapter(
    quota_gate: QuotaGate, usage_ledger: UsageLedger, backend: FakeModelBackend
) -> MeteredInvocationAdapter:
    """Construct adapter with pricing of one unit per token and direction."""
    return MeteredInvocationAdapter(
        quota_gate, usage_ledger, backend, Pricing(input_rate=1.0, output_rate=2.0)
    )


@pytest.mark.asyncio
async def test_invoke(
    account_store: AccountStore, quota_gate: QuotaGate, usage_ledger: UsageLedger
) -> None:
    """Test that consumed tokens are debited and reported."""
    account_store.create("u1", 1000)
    backend = FakeModelBackend()

    response = await invoke_endpoint_handler(
        user_id="u1",
        invoke_request=InvokeModelRequest(prompt="Hello"),
        adapter=make_adapter(quota_gate, usage_ledger, backend),
    )

    assert backend.prompts == ["Hello"]
    assert response.user_id == "u1"
    assert response.response == "Hello from fake model"
    assert response.input_tokens == 50
    assert response.output_tokens == 20
    assert response.tokens_consumed == 70
    assert response.remaining_tokens == 930
    assert response.cost.input_cost == 50.0
    assert response.cost.output_cost == 40.0
    assert response.cost.total_cost == 90.0
    assert account_store.get("u1").token_usage == 70


@pytest.mark.asyncio
async def test_invoke_quota_exceeded(
    account_store: AccountStore, quota_gate: QuotaGate, usage_ledger: UsageLedger
) -> None:
    """Test that model is not called when no tokens are left."""
    account_store.create("u1", 100)
    usage_ledger.increment_usage("u1", 100)
    backend = FakeModelBackend()

    with pytest.raises(HTTPException) as e:
        await invoke_endpoint_handler(
            user_id="u1",
            invoke_request=InvokeModelRequest(prompt="Hello"),
            adapter=make_adapter(quota_gate, usage_ledger, backend),
        )

    assert e.value.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert e.value.detail["kind"] == "QuotaExceeded"
    assert backend.prompts == []


@pytest.mark.asyncio
async def test_invoke_missing_account(
    quota_gate: QuotaGate, usage_ledger: UsageLedger
) -> None:
    """Test that invocation for missing account is refused."""
    backend = FakeModelBackend()

    with pytest.raises(HTTPException) as e:
        await invoke_endpoint_handler(
            user_id="ghost",
            invoke_request=InvokeModelRequest(prompt="Hello"),
            adapter=make_adapter(quota_gate, usage_ledger, backend),
        )

    assert e.value.status_code == status.HTTP_404_NOT_FOUND
    assert backend.prompts == []


@pytest.mark.asyncio
async def test_invoke_model_unavailable(
    account_store: AccountStore, quota_gate: QuotaGate, usage_ledger: UsageLedger
) -> None:
    """Test that failed model call is reported and nothing is debited."""
    account_store.create("u1", 1000)
    backend = FakeModelBackend(error=ServiceUnavailableError("Connection refused"))

    with pytest.raises(HTTPException) as e:
        await invoke_endpoint_handler(
            user_id="u1",
            invoke_request=InvokeModelRequest(prompt="Hello"),
            adapter=make_adapter(quota_gate, usage_ledger, backend),
        )

    assert e.value.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert e.value.detail["cause"] == "Connection refused"
    assert account_store.get("u1").token_usage == 0
