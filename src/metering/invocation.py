"""Metered invocation adapter."""

import asyncio
from dataclasses import dataclass

import metrics
from log import get_logger
from metering.model_backend import ModelBackend
from metering.pricing import CostBreakdown, Pricing
from metrics.utils import record_lost_debit, update_llm_token_count
from quota.account import Account
from quota.errors import (
    AccountNotFoundError,
    InvalidInputError,
    ServiceUnavailableError,
)
from quota.quota_gate import QuotaGate
from quota.usage_ledger import UsageLedger

logger = get_logger(__name__)


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of a successful metered invocation.

    Attributes:
        response: text generated by the model
        input_tokens: tokens sent to the model
        output_tokens: tokens generated by the model
        tokens_consumed: all tokens debited from the account
        remaining_tokens: remaining budget after the debit, clamped at zero
        cost: cost of this invocation
        account: account snapshot right after the debit
    """

    response: str
    input_tokens: int
    output_tokens: int
    tokens_consumed: int
    remaining_tokens: int
    cost: CostBreakdown
    account: Account


class MeteredInvocationAdapter:
    """Calls the model on behalf of a user and debits the actual consumption.

    The gate check and the debit are two separate steps because the amount to
    debit is unknown until the model call finishes. Nothing is reserved in
    between, so concurrent invocations admitted against the same remaining
    budget are all debited in full.
    """

    def __init__(
        self,
        gate: QuotaGate,
        ledger: UsageLedger,
        backend: ModelBackend,
        pricing: Pricing,
    ) -> None:
        """Initialize the adapter with its collaborators."""
        self.gate = gate
        self.ledger = ledger
        self.backend = backend
        self.pricing = pricing

    async def invoke(self, user_id: str, prompt: str) -> InvocationResult:
        """Invoke the model for a user and record what it consumed.

        Raises:
            InvalidInputError: when the prompt is empty.
            AccountNotFoundError: when the account does not exist, or was
                deleted before the consumption could be recorded.
            QuotaExceedError: when no budget remains; the model is not called.
            ServiceUnavailableError: when the model call fails; nothing is debited.
        """
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidInputError("Prompt must be a non-empty string", user_id)

        await asyncio.to_thread(self.gate.ensure_available_quota, user_id)

        try:
            reply = await self.backend.generate(prompt)
        except ServiceUnavailableError:
            metrics.llm_calls_failures_total.inc()
            raise

        update_llm_token_count(
            self.backend.model_id, reply.input_tokens, reply.output_tokens
        )
        cost = self.pricing.cost_of(reply.input_tokens, reply.output_tokens)
        tokens_consumed = reply.total_tokens

        try:
            account = await asyncio.to_thread(
                self.ledger.increment_usage, user_id, tokens_consumed, cost.total_cost
            )
        except AccountNotFoundError as e:
            # the model was already called, the consumption is lost
            record_lost_debit(tokens_consumed)
            logger.error(
                "Account %s was deleted during invocation, %d consumed tokens "
                "(cost %f) were not recorded",
                user_id,
                tokens_consumed,
                cost.total_cost,
            )
            raise AccountNotFoundError(
                user_id,
                f"Account {user_id} not found, "
                f"{tokens_consumed} consumed tokens could not be recorded",
            ) from e

        return InvocationResult(
            response=reply.text,
            input_tokens=reply.input_tokens,
            output_tokens=reply.output_tokens,
            tokens_consumed=tokens_consumed,
            remaining_tokens=account.displayed_remaining_tokens,
            cost=cost,
            account=account,
        )
