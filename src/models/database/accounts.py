"""Account table."""

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Float
from sqlalchemy.orm import Mapped, mapped_column

from models.database.base import Base


class AccountRecord(Base):  # pylint: disable=too-few-public-methods
    """Stored quota and usage of one user.

    ```
         Column   |           Type           | Nullable |
    --------------+--------------------------+----------+
     user_id      | varchar                  | not null |
     token_limit  | bigint                   | not null |
     token_usage  | bigint                   | not null |
     total_cost   | double precision         | not null |
     last_updated | timestamp with time zone | not null |
    Indexes:
        "account_pkey" PRIMARY KEY, btree (user_id)
    ```
    """

    __tablename__ = "account"
    __table_args__ = (
        CheckConstraint("token_limit > 0", name="account_token_limit_positive"),
        CheckConstraint("token_usage >= 0", name="account_token_usage_non_negative"),
        CheckConstraint("total_cost >= 0", name="account_total_cost_non_negative"),
    )

    # assigned by the caller, never generated
    user_id: Mapped[str] = mapped_column(primary_key=True)

    token_limit: Mapped[int] = mapped_column(BigInteger)

    # written only by the usage ledger
    token_usage: Mapped[int] = mapped_column(BigInteger, default=0)
    total_cost: Mapped[float] = mapped_column(Float, default=0.0)

    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True))
