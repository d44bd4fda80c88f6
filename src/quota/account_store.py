"""Durable mapping from user identifier to account record."""

from typing import Any, Optional, cast

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.engine.base import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from log import get_logger
from models.database.accounts import AccountRecord
from quota.account import Account, utc_now
from quota.errors import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    InvalidInputError,
    StorageFailureError,
)

logger = get_logger(__name__)

accounts_table = cast(Table, AccountRecord.__table__)

# columns returned by every statement that produces an account snapshot
ACCOUNT_COLUMNS = (
    accounts_table.c.user_id,
    accounts_table.c.token_limit,
    accounts_table.c.token_usage,
    accounts_table.c.total_cost,
    accounts_table.c.last_updated,
)


def account_from_row(row: Row[Any]) -> Account:
    """Construct account snapshot from a row selected with ACCOUNT_COLUMNS."""
    return Account(
        user_id=row.user_id,
        token_limit=row.token_limit,
        token_usage=row.token_usage,
        total_cost=row.total_cost,
        last_updated=row.last_updated,
    )


def check_user_id(user_id: str) -> None:
    """Check that the account identifier is a non-empty string."""
    if not isinstance(user_id, str) or not user_id:
        raise InvalidInputError("user_id must be a non-empty string")


def check_token_limit(token_limit: int, user_id: str) -> None:
    """Check that the token limit is a positive integer."""
    # bool is subclass of int, but is not a meaningful limit
    if (
        not isinstance(token_limit, int)
        or isinstance(token_limit, bool)
        or token_limit <= 0
    ):
        raise InvalidInputError("Token limit must be a positive integer", user_id)


class AccountStore:
    """Account store backed by a relational database.

    The store is a thin wrapper around a SQLAlchemy engine. The engine (and its
    connection pool) is the process-wide resource; store instances are cheap
    and can be created per request.

    Usage and cost are never written here, see `quota.usage_ledger`.
    """

    def __init__(self, engine: Engine) -> None:
        """Initialize the store with shared database engine."""
        self.engine = engine

    def create(self, user_id: str, token_limit: int) -> Account:
        """Create new account with zero usage.

        Raises:
            AccountAlreadyExistsError: when the identifier is already used.
        """
        check_user_id(user_id)
        check_token_limit(token_limit, user_id)

        account = Account(
            user_id=user_id,
            token_limit=token_limit,
            token_usage=0,
            total_cost=0.0,
            last_updated=utc_now(),
        )
        statement = insert(accounts_table).values(
            user_id=account.user_id,
            token_limit=account.token_limit,
            token_usage=account.token_usage,
            total_cost=account.total_cost,
            last_updated=account.last_updated,
        )
        try:
            with self.engine.begin() as connection:
                connection.execute(statement)
        except IntegrityError as e:
            logger.warning("Account %s already exists", user_id)
            raise AccountAlreadyExistsError(user_id) from e
        except SQLAlchemyError as e:
            logger.error("Unable to create account %s: %s", user_id, e)
            raise StorageFailureError("create account", user_id, str(e)) from e

        logger.info("Created account %s with token limit %d", user_id, token_limit)
        return account

    def get(self, user_id: str) -> Optional[Account]:
        """Retrieve account, or None when it does not exist."""
        statement = select(*ACCOUNT_COLUMNS).where(accounts_table.c.user_id == user_id)
        try:
            with self.engine.connect() as connection:
                row = connection.execute(statement).first()
        except SQLAlchemyError as e:
            logger.error("Unable to read account %s: %s", user_id, e)
            raise StorageFailureError("read account", user_id, str(e)) from e
        if row is None:
            return None
        return account_from_row(row)

    def update_limit(self, user_id: str, new_limit: int) -> Account:
        """Overwrite token limit of existing account.

        Usage and cost stay untouched.

        Raises:
            AccountNotFoundError: when the account does not exist.
        """
        check_token_limit(new_limit, user_id)

        # the WHERE clause doubles as the existence condition, so a missing
        # account is never created here
        statement = (
            update(accounts_table)
            .where(accounts_table.c.user_id == user_id)
            .values(token_limit=new_limit, last_updated=utc_now())
            .returning(*ACCOUNT_COLUMNS)
        )
        try:
            with self.engine.begin() as connection:
                row = connection.execute(statement).first()
        except SQLAlchemyError as e:
            logger.error("Unable to update token limit of account %s: %s", user_id, e)
            raise StorageFailureError("update token limit", user_id, str(e)) from e

        if row is None:
            raise AccountNotFoundError(user_id)
        logger.info("Token limit of account %s set to %d", user_id, new_limit)
        return account_from_row(row)

    def delete(self, user_id: str) -> None:
        """Delete account; deleting a missing account is not an error."""
        statement = delete(accounts_table).where(accounts_table.c.user_id == user_id)
        try:
            with self.engine.begin() as connection:
                result = connection.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Unable to delete account %s: %s", user_id, e)
            raise StorageFailureError("delete account", user_id, str(e)) from e
        logger.info("Deleted account %s (%d rows)", user_id, result.rowcount)

    def list_all(self) -> list[Account]:
        """Retrieve snapshot of all accounts, in no particular order."""
        statement = select(*ACCOUNT_COLUMNS)
        try:
            with self.engine.connect() as connection:
                rows = connection.execute(statement).all()
        except SQLAlchemyError as e:
            logger.error("Unable to list accounts: %s", e)
            raise StorageFailureError("list accounts", cause=str(e)) from e
        return [account_from_row(row) for row in rows]
