"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.engine.base import Engine

from app.database import _create_sqlite_engine
from models.config import SQLiteDatabaseConfiguration
from models.database.base import Base
from quota.account_store import AccountStore
from quota.quota_gate import QuotaGate
from quota.usage_ledger import UsageLedger


@pytest.fixture(name="db_engine", scope="function")
def db_engine_fixture(tmp_path: Path) -> Generator[Engine, None, None]:
    """Create engine connected to fresh SQLite database file.

    A file is used instead of in-memory database, because in-memory
    databases are not shared between threads.
    """
    config = SQLiteDatabaseConfiguration(db_path=str(tmp_path / "accounts.db"))
    engine = _create_sqlite_engine(config)
    Base.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture(name="account_store")
def account_store_fixture(db_engine: Engine) -> AccountStore:
    """Account store on top of fresh database."""
    return AccountStore(db_engine)


@pytest.fixture(name="usage_ledger")
def usage_ledger_fixture(db_engine: Engine) -> UsageLedger:
    """Usage ledger sharing the database with account store."""
    return UsageLedger(db_engine)


@pytest.fixture(name="quota_gate")
def quota_gate_fixture(account_store: AccountStore) -> QuotaGate:
    """Quota gate reading from account store."""
    return QuotaGate(account_store)
