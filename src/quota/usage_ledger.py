"""Atomic accumulator of consumed tokens and their cost."""

import math

from sqlalchemy import update
from sqlalchemy.engine.base import Engine
from sqlalchemy.exc import SQLAlchemyError

from log import get_logger
from quota.account import Account, utc_now
from quota.account_store import ACCOUNT_COLUMNS, account_from_row, accounts_table
from quota.errors import AccountNotFoundError, InvalidInputError, StorageFailureError

logger = get_logger(__name__)


def check_delta(name: str, value: float, user_id: str) -> None:
    """Check that the delta is a finite non-negative number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number", user_id)
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be a finite number", user_id)
    if value < 0:
        raise InvalidInputError(f"{name} must be a non-negative number", user_id)


class UsageLedger:
    """The only writer of account usage and cost.

    Each increment is sent to the database as a request to add a delta to the
    stored value (`SET token_usage = token_usage + :delta`), never as a write of
    a value computed by the caller. The database serializes concurrent
    increments of one row, so every delta lands exactly once.
    """

    def __init__(self, engine: Engine) -> None:
        """Initialize the ledger with shared database engine."""
        self.engine = engine

    def increment_usage(
        self, user_id: str, tokens_delta: int, cost_delta: float = 0.0
    ) -> Account:
        """Atomically add consumed tokens and cost to existing account.

        Both values and the timestamp change in one statement. The statement is
        conditional on the account existence, so it never creates an account.

        Returns:
            Account snapshot right after this increment committed.

        Raises:
            InvalidInputError: when any delta is negative.
            AccountNotFoundError: when the account does not exist.
            StorageFailureError: when the database can not apply the delta.
        """
        check_delta("tokens_delta", tokens_delta, user_id)
        if not isinstance(tokens_delta, int):
            raise InvalidInputError("tokens_delta must be an integer", user_id)
        check_delta("cost_delta", cost_delta, user_id)

        statement = (
            update(accounts_table)
            .where(accounts_table.c.user_id == user_id)
            .values(
                token_usage=accounts_table.c.token_usage + tokens_delta,
                total_cost=accounts_table.c.total_cost + cost_delta,
                last_updated=utc_now(),
            )
            .returning(*ACCOUNT_COLUMNS)
        )
        try:
            with self.engine.begin() as connection:
                row = connection.execute(statement).first()
        except SQLAlchemyError as e:
            logger.error(
                "Unable to add %d tokens to account %s: %s", tokens_delta, user_id, e
            )
            raise StorageFailureError("increment token usage", user_id, str(e)) from e

        if row is None:
            raise AccountNotFoundError(user_id)

        account = account_from_row(row)
        logger.info(
            "Account %s consumed %d tokens (cost %f), usage is %d of %d",
            user_id,
            tokens_delta,
            cost_delta,
            account.token_usage,
            account.token_limit,
        )
        return account
