"""Snapshot of one account as read from or written to the store."""

from dataclasses import dataclass
from datetime import UTC, datetime

import constants


@dataclass(frozen=True)
class Account:
    """Quota and cumulative usage of one user.

    Attributes:
        user_id: caller-assigned identifier, immutable for the account lifetime
        token_limit: maximum cumulative usage permitted
        token_usage: cumulative consumed tokens since account creation
        total_cost: cumulative cost of the consumed tokens
        last_updated: time of the most recent mutation
    """

    user_id: str
    token_limit: int
    token_usage: int
    total_cost: float
    last_updated: datetime

    def __post_init__(self) -> None:
        """Normalize timestamps read back from stores without time zone support."""
        if self.last_updated.tzinfo is None:
            object.__setattr__(
                self, "last_updated", self.last_updated.replace(tzinfo=UTC)
            )

    @property
    def remaining_tokens(self) -> int:
        """Return remaining budget, negative after an over-admission."""
        return self.token_limit - self.token_usage

    @property
    def displayed_remaining_tokens(self) -> int:
        """Return remaining budget clamped at zero."""
        return max(0, self.remaining_tokens)

    @property
    def percentage_used(self) -> float:
        """Return share of the limit already consumed, in percents."""
        if self.token_limit <= 0:
            return 0.0
        return round(
            self.token_usage / self.token_limit * 100, constants.PERCENTAGE_PRECISION
        )


def utc_now() -> datetime:
    """Return current wall-clock time used to stamp account mutations."""
    return datetime.now(UTC)
