"""Unit tests for QuotaGate class."""

import pytest

import metrics
from quota.account_store import AccountStore
from quota.errors import AccountNotFoundError, QuotaExceedError
from quota.quota_gate import GateOutcome, QuotaGate
from quota.usage_ledger import UsageLedger


def test_check_fresh_account(account_store: AccountStore, quota_gate: QuotaGate) -> None:
    """Test that account with untouched budget is admitted."""
    account_store.create("u1", 100)

    result = quota_gate.check("u1")
    assert result.outcome == GateOutcome.ALLOWED
    assert result.allowed
    assert result.remaining == 100
    assert result.account.user_id == "u1"


def test_check_boundary(
    account_store: AccountStore, usage_ledger: UsageLedger, quota_gate: QuotaGate
) -> None:
    """Test gate decision at usage one below and exactly at the limit."""
    account_store.create("u1", 100)

    usage_ledger.increment_usage("u1", 99)
    result = quota_gate.check("u1")
    assert result.outcome == GateOutcome.ALLOWED
    assert result.remaining == 1

    usage_ledger.increment_usage("u1", 1)
    result = quota_gate.check("u1")
    assert result.outcome == GateOutcome.QUOTA_EXCEEDED
    assert not result.allowed
    assert result.remaining == 0


def test_check_over_limit(
    account_store: AccountStore, usage_ledger: UsageLedger, quota_gate: QuotaGate
) -> None:
    """Test that overrun budget is rejected and the real remaining budget reported."""
    account_store.create("u1", 100)
    usage_ledger.increment_usage("u1", 140)

    result = quota_gate.check("u1")
    assert result.outcome == GateOutcome.QUOTA_EXCEEDED
    assert result.remaining == -40
    assert result.account.displayed_remaining_tokens == 0


def test_check_ignores_requested_tokens(
    account_store: AccountStore, usage_ledger: UsageLedger, quota_gate: QuotaGate
) -> None:
    """Test that estimate larger than remaining budget does not block admission."""
    account_store.create("u1", 100)
    usage_ledger.increment_usage("u1", 90)

    result = quota_gate.check("u1", requested_tokens=500)
    assert result.outcome == GateOutcome.ALLOWED


def test_check_after_limit_raised(
    account_store: AccountStore, usage_ledger: UsageLedger, quota_gate: QuotaGate
) -> None:
    """Test that raising the limit re-opens exhausted account."""
    account_store.create("u1", 100)
    usage_ledger.increment_usage("u1", 100)
    assert not quota_gate.check("u1").allowed

    account_store.update_limit("u1", 150)
    result = quota_gate.check("u1")
    assert result.allowed
    assert result.remaining == 50


def test_check_missing_account(quota_gate: QuotaGate) -> None:
    """Test that the gate does not admit unknown users."""
    with pytest.raises(AccountNotFoundError):
        quota_gate.check("nobody")


def test_gate_does_not_change_usage(
    account_store: AccountStore, quota_gate: QuotaGate
) -> None:
    """Test that the gate only reads the account."""
    account_store.create("u1", 100)
    before = account_store.get("u1")
    for _ in range(5):
        quota_gate.check("u1", requested_tokens=10)
    after = account_store.get("u1")
    assert before == after


def test_rejection_is_counted(
    account_store: AccountStore, usage_ledger: UsageLedger, quota_gate: QuotaGate
) -> None:
    """Test that rejections are visible in metrics."""
    account_store.create("u1", 10)
    usage_ledger.increment_usage("u1", 10)

    before = metrics.quota_rejections_total._value.get()  # pylint: disable=protected-access
    quota_gate.check("u1")
    after = metrics.quota_rejections_total._value.get()  # pylint: disable=protected-access
    assert after == before + 1


def test_ensure_available_quota(
    account_store: AccountStore, usage_ledger: UsageLedger, quota_gate: QuotaGate
) -> None:
    """Test the raising variant of the gate check."""
    account_store.create("u1", 100)
    assert quota_gate.ensure_available_quota("u1") == 100

    usage_ledger.increment_usage("u1", 100)
    with pytest.raises(QuotaExceedError, match="User u1 has no available tokens"):
        quota_gate.ensure_available_quota("u1")
