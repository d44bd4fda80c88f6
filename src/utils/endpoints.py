"""Utility functions for endpoint handlers.

Collaborators of the accounting core are process-wide resources (database
engine, Llama Stack client, configuration). The functions below hand them to
request handlers through FastAPI dependency injection.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from app.database import get_engine
from client import AsyncLlamaStackClientHolder
from configuration import AppConfig, configuration
from log import get_logger
from metering.invocation import MeteredInvocationAdapter
from metering.llama_stack_backend import LlamaStackModelBackend
from metering.model_backend import ModelBackend
from metering.pricing import Pricing
from quota.account_store import AccountStore
from quota.errors import ServiceUnavailableError, StorageFailureError
from quota.quota_gate import QuotaGate
from quota.usage_ledger import UsageLedger
from utils.quota import to_http_exception

logger = get_logger(__name__)


def check_configuration_loaded(config: AppConfig) -> None:
    """
    Ensure the application configuration is loaded.

    Raises:
        HTTPException: HTTP 500 Internal Server Error with detail `{"response":
        "Configuration is not loaded"}` when configuration was not loaded yet.
    """
    if config is None or not config.is_loaded():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "response": "Configuration is not loaded",
                "cause": "Service was started without configuration",
            },
        )


def get_account_store() -> AccountStore:
    """Provide account store bound to the shared database engine."""
    try:
        return AccountStore(get_engine())
    except RuntimeError as e:
        logger.error("Account store requested before database initialization")
        raise to_http_exception(
            StorageFailureError("open account database", cause=str(e))
        ) from e


def get_usage_ledger() -> UsageLedger:
    """Provide usage ledger bound to the shared database engine."""
    try:
        return UsageLedger(get_engine())
    except RuntimeError as e:
        logger.error("Usage ledger requested before database initialization")
        raise to_http_exception(
            StorageFailureError("open account database", cause=str(e))
        ) from e


def get_quota_gate(
    store: Annotated[AccountStore, Depends(get_account_store)],
) -> QuotaGate:
    """Provide quota gate reading from the account store."""
    return QuotaGate(store)


def get_model_backend() -> ModelBackend:
    """Provide model backend configured in the inference section."""
    check_configuration_loaded(configuration)
    inference = configuration.inference
    model_id = inference.model_id
    if model_id is None:
        raise to_http_exception(
            ServiceUnavailableError("No default model is configured")
        )
    try:
        client = AsyncLlamaStackClientHolder().get_client()
    except RuntimeError as e:
        raise to_http_exception(ServiceUnavailableError(str(e))) from e
    return LlamaStackModelBackend(client, model_id, inference.max_tokens)


def get_pricing() -> Pricing:
    """Provide price list from configuration."""
    check_configuration_loaded(configuration)
    return Pricing.from_configuration(configuration.pricing)


def get_invocation_adapter(
    gate: Annotated[QuotaGate, Depends(get_quota_gate)],
    ledger: Annotated[UsageLedger, Depends(get_usage_ledger)],
    backend: Annotated[ModelBackend, Depends(get_model_backend)],
    pricing: Annotated[Pricing, Depends(get_pricing)],
) -> MeteredInvocationAdapter:
    """Provide metered invocation adapter wired to its collaborators."""
    return MeteredInvocationAdapter(gate, ledger, backend, pricing)
