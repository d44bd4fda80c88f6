"""Pre-flight check admitting or rejecting a spend attempt."""

from dataclasses import dataclass
from enum import Enum

import metrics
from log import get_logger
from quota.account import Account
from quota.account_store import AccountStore
from quota.errors import AccountNotFoundError, QuotaExceedError

logger = get_logger(__name__)


class GateOutcome(str, Enum):
    """Decision of the quota gate."""

    ALLOWED = "Allowed"
    QUOTA_EXCEEDED = "QuotaExceeded"


@dataclass(frozen=True)
class GateResult:
    """Decision together with the snapshot it was made from."""

    outcome: GateOutcome
    remaining: int
    account: Account

    @property
    def allowed(self) -> bool:
        """Return True when the caller may proceed."""
        return self.outcome == GateOutcome.ALLOWED


class QuotaGate:
    """Quota gate reading the last committed usage from the account store.

    The gate only reads; it neither reserves nor debits anything. The real
    debit is made by the usage ledger once the consumption is known.
    """

    def __init__(self, store: AccountStore) -> None:
        """Initialize the gate on top of account store."""
        self.store = store

    def check(self, user_id: str, requested_tokens: int = 0) -> GateResult:
        """Decide whether the user may start another metered operation.

        The decision depends only on the remaining budget; `requested_tokens`
        is an estimate used for logging as the real consumption is not known
        before the operation finishes.

        Raises:
            AccountNotFoundError: when the account does not exist.
        """
        account = self.store.get(user_id)
        if account is None:
            raise AccountNotFoundError(user_id)

        remaining = account.remaining_tokens
        if remaining <= 0:
            logger.warning(
                "Quota exceeded for %s: usage %d, limit %d",
                user_id,
                account.token_usage,
                account.token_limit,
            )
            metrics.quota_rejections_total.inc()
            return GateResult(GateOutcome.QUOTA_EXCEEDED, remaining, account)

        logger.debug(
            "Admitting %s (estimated %d tokens), %d tokens remaining",
            user_id,
            requested_tokens,
            remaining,
        )
        return GateResult(GateOutcome.ALLOWED, remaining, account)

    def ensure_available_quota(self, user_id: str, requested_tokens: int = 0) -> int:
        """Ensure that there's available quota left.

        Returns:
            Remaining tokens as seen in the snapshot.

        Raises:
            QuotaExceedError: when no tokens are left.
        """
        result = self.check(user_id, requested_tokens)
        if not result.allowed:
            raise QuotaExceedError(user_id, result.remaining)
        return result.remaining
