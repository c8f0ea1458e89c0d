"""Tests for domain entities."""

from dataclasses import FrozenInstanceError
from datetime import date, datetime, UTC

import pytest

from vaultledger.domain.entities import (
    Account,
    AccountType,
    Debt,
    Expense,
    LedgerSnapshot,
    SavingsGoal,
    TransactionKind,
)

CREATED = datetime(2024, 1, 1, tzinfo=UTC)


def test_entities_are_frozen():
    account = Account(id=1, name="Cash", type=AccountType.CASH, balance_cents=0, created_at=CREATED)
    with pytest.raises(FrozenInstanceError):
        account.balance_cents = 100


def test_expense_kind():
    expense = Expense(
        id=1, date=date(2024, 1, 1), amount_cents=100, category_id=1,
        account_id=1, notes="", created_at=CREATED,
    )
    assert expense.kind is TransactionKind.EXPENSE
    assert expense.is_recurring is False


def test_goal_progress():
    assert SavingsGoal(id=1, name="Trip", goal_cents=1000, current_cents=250).progress == 0.25
    assert SavingsGoal(id=2, name="Over", goal_cents=1000, current_cents=1500).progress == 1.5


def test_empty_snapshot_defaults():
    snapshot = LedgerSnapshot.empty("alex")

    assert snapshot.profile.name == "alex"
    assert snapshot.profile.currency == "USD"
    assert snapshot.stats.level == 1
    assert snapshot.stats.next_level_xp == 100
    assert snapshot.last_id == 0


def test_allocate_id_is_monotonic():
    snapshot = LedgerSnapshot()
    assert [snapshot.allocate_id() for _ in range(3)] == [1, 2, 3]


def test_copy_is_independent():
    """Test that a copy does not see list changes made to the original."""
    snapshot = LedgerSnapshot(debts=[Debt(id=1, name="Loan", total_amount_cents=10, remaining_balance_cents=10)])
    copy = snapshot.copy()
    snapshot.debts = []
    snapshot.last_id = 9

    assert len(copy.debts) == 1
    assert copy.last_id == 0


def test_highest_id():
    snapshot = LedgerSnapshot(
        accounts=[Account(id=4, name="A", type=AccountType.BANK, balance_cents=0, created_at=CREATED)],
        debts=[Debt(id=7, name="Loan", total_amount_cents=10, remaining_balance_cents=10)],
    )
    assert snapshot.highest_id() == 7
    assert LedgerSnapshot().highest_id() == 0
