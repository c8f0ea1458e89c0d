"""Tests for the ledger engine."""

from datetime import date

import pytest

from vaultledger.domain.constants import DEBT_PAYMENT_CATEGORY_ID, SAVINGS_CATEGORY_ID
from vaultledger.domain.entities import (
    AccountType,
    Expense,
    Frequency,
    Income,
    MetaOrigin,
    PaymentTarget,
    TransactionKind,
)
from vaultledger.domain.errors import (
    DependencyError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from vaultledger.domain.ledger import BatchItem, Recurrence


def balance(engine, account_id):
    return engine.snapshot.find_account(account_id).balance_cents


def test_create_account(engine):
    """Test creating an account with an opening balance."""
    account = engine.create_account("Visa", type="CREDIT", starting_balance_cents=-25_000)

    assert account.type is AccountType.CREDIT
    assert account.balance_cents == -25_000
    assert engine.snapshot.accounts == [account]


def test_create_account_empty_name(engine):
    """Test that an empty account name is rejected."""
    with pytest.raises(ValidationError, match="name must not be empty"):
        engine.create_account("   ")
    assert engine.snapshot.accounts == []


def test_create_account_unknown_type(engine):
    """Test that an unknown account type is rejected."""
    with pytest.raises(ValidationError, match="Invalid account type"):
        engine.create_account("Piggy", type="PIGGYBANK")


def test_expense_decrements_balance(engine, checking):
    """Test that an expense debits its account."""
    expense = engine.create_transaction(TransactionKind.EXPENSE, 2550, checking.id, category_or_source=2)

    assert isinstance(expense, Expense)
    assert expense.category_id == 2
    assert expense.date == date(2024, 3, 15)
    assert balance(engine, checking.id) == 97_450


def test_income_increments_balance(engine, checking):
    """Test that income credits its account with the default source."""
    income = engine.create_transaction("INCOME", 5000, checking.id)

    assert isinstance(income, Income)
    assert income.source == "Manual Entry"
    assert balance(engine, checking.id) == 105_000


def test_create_then_delete_restores_balance(engine, checking):
    """Test that deleting a transaction reverses its balance effect."""
    for kind in (TransactionKind.EXPENSE, TransactionKind.INCOME):
        before = balance(engine, checking.id)
        txn = engine.create_transaction(kind, 1234, checking.id)
        engine.delete_transaction(txn.id)
        assert balance(engine, checking.id) == before

    assert engine.snapshot.expenses == []
    assert engine.snapshot.income == []


@pytest.mark.parametrize("amount", [0, -100])
def test_non_positive_amount_rejected(engine, checking, amount):
    """Test that transactions need a positive amount."""
    with pytest.raises(ValidationError, match="greater than zero"):
        engine.create_transaction(TransactionKind.EXPENSE, amount, checking.id)
    assert balance(engine, checking.id) == 100_000
    assert engine.snapshot.expenses == []


def test_transaction_on_missing_account(engine):
    """Test that a transaction needs an existing account."""
    with pytest.raises(NotFoundError, match="Account not found."):
        engine.create_transaction(TransactionKind.EXPENSE, 100, 999)


def test_ids_shared_across_entity_kinds(engine, checking):
    """Test that expense and income IDs never collide."""
    expense = engine.create_transaction(TransactionKind.EXPENSE, 100, checking.id)
    income = engine.create_transaction(TransactionKind.INCOME, 100, checking.id)
    debt = engine.create_debt("Loan", 1000)

    ids = [checking.id, expense.id, income.id, debt.id]
    assert len(set(ids)) == len(ids)
    assert engine.snapshot.last_id == max(ids)


def test_recurring_transaction_gets_next_due_date(engine, checking):
    """Test that a recurring transaction schedules its next occurrence."""
    expense = engine.create_transaction(
        TransactionKind.EXPENSE,
        1500,
        checking.id,
        txn_date=date(2024, 1, 31),
        recurrence=Recurrence(Frequency.MONTHLY),
    )

    assert expense.is_recurring
    assert expense.frequency is Frequency.MONTHLY
    assert expense.next_due_date == date(2024, 2, 29)


def test_edit_transaction_applies_delta(engine, checking):
    """Test that editing an amount moves the balance by the difference."""
    expense = engine.create_transaction(TransactionKind.EXPENSE, 1000, checking.id)
    updated = engine.edit_transaction(expense.id, amount_cents=1500, notes="Dinner")

    assert updated.amount_cents == 1500
    assert updated.notes == "Dinner"
    assert balance(engine, checking.id) == 100_000 - 1500
    assert engine.snapshot.expenses == [updated]


def test_edit_income_applies_delta(engine, checking):
    """Test that lowering an income amount lowers the balance."""
    income = engine.create_transaction(TransactionKind.INCOME, 3000, checking.id)
    engine.edit_transaction(income.id, amount_cents=1000)

    assert balance(engine, checking.id) == 101_000


def test_edit_transaction_rejects_category_on_income(engine, checking):
    """Test that income records cannot be given a category."""
    income = engine.create_transaction(TransactionKind.INCOME, 3000, checking.id)
    with pytest.raises(ValidationError, match="no category"):
        engine.edit_transaction(income.id, category_id=2)


def test_delete_missing_transaction(engine):
    """Test deleting a transaction that does not exist."""
    with pytest.raises(NotFoundError, match="Transaction not found."):
        engine.delete_transaction(42)


def test_batch_is_all_or_nothing(engine, checking):
    """Test that one invalid batch item rejects the whole batch."""
    items = [
        BatchItem(TransactionKind.EXPENSE, 500, "Coffee"),
        BatchItem(TransactionKind.EXPENSE, 0, "Broken"),
    ]
    with pytest.raises(ValidationError):
        engine.create_transactions(checking.id, items)

    assert engine.snapshot.expenses == []
    assert balance(engine, checking.id) == 100_000


def test_batch_adds_all_items(engine, checking):
    """Test a valid batch import."""
    items = [
        BatchItem(TransactionKind.EXPENSE, 500, "Coffee", category_or_source=1),
        BatchItem("INCOME", 2000, "Refund", category_or_source="Store"),
    ]
    created = engine.create_transactions(checking.id, items)

    assert len(created) == 2
    assert created[0].meta_origin is MetaOrigin.AI_GENERATED
    assert created[1].source == "Store"
    assert balance(engine, checking.id) == 100_000 - 500 + 2000


def test_empty_batch_rejected(engine, checking):
    with pytest.raises(ValidationError, match="No transactions"):
        engine.create_transactions(checking.id, [])


def test_edit_account_keeps_balance(engine, checking):
    """Test that descriptive edits never touch the balance."""
    updated = engine.edit_account(checking.id, name="Main Checking", type="CASH", notes="Everyday")

    assert updated.name == "Main Checking"
    assert updated.type is AccountType.CASH
    assert updated.notes == "Everyday"
    assert updated.balance_cents == 100_000


def test_correct_account_balance(engine, checking):
    """Test the explicit balance correction."""
    engine.create_transaction(TransactionKind.EXPENSE, 1000, checking.id)
    corrected = engine.correct_account_balance(checking.id, 50_000)

    assert corrected.balance_cents == 50_000
    assert balance(engine, checking.id) == 50_000


def test_delete_account_without_transactions(engine, checking, savings_account):
    """Test deleting an unreferenced account."""
    engine.delete_account(savings_account.id)

    assert engine.snapshot.accounts == [engine.snapshot.find_account(checking.id)]


def test_delete_account_blocked_by_transactions(engine, checking):
    """Test that an account referenced by transactions cannot be deleted."""
    engine.create_transaction(TransactionKind.EXPENSE, 1000, checking.id)

    with pytest.raises(DependencyError, match="it has 1 transaction") as excinfo:
        engine.delete_account(checking.id)
    assert excinfo.value.kind == "EntityInUse"
    assert engine.snapshot.find_account(checking.id) is not None


def test_pay_debt_clamps_at_zero(engine, checking):
    """Test that overpaying a debt leaves nothing remaining, not a negative balance."""
    debt = engine.create_debt("Card", 20_000)
    expense = engine.apply_payment(PaymentTarget.DEBT, debt.id, 30_000, checking.id)

    assert engine.snapshot.find_debt(debt.id).remaining_balance_cents == 0
    assert expense.amount_cents == 30_000
    assert expense.category_id == DEBT_PAYMENT_CATEGORY_ID
    assert expense.notes == "Payment to Card"
    assert balance(engine, checking.id) == 70_000


def test_contribution_may_overshoot_goal(engine, checking):
    """Test that savings contributions are not capped at the goal."""
    goal = engine.create_savings_goal("Trip", 10_000)
    engine.apply_payment("SAVINGS", goal.id, 8_000, checking.id)
    expense = engine.apply_payment("SAVINGS", goal.id, 8_000, checking.id)

    assert engine.snapshot.find_goal(goal.id).current_cents == 16_000
    assert expense.category_id == SAVINGS_CATEGORY_ID
    assert expense.notes == "Contribution to Trip"


def test_payment_does_not_check_overdraft(engine, savings_account):
    """Test that payments may drive an account negative."""
    debt = engine.create_debt("Loan", 10_000)
    engine.apply_payment(PaymentTarget.DEBT, debt.id, 5_000, savings_account.id)

    assert balance(engine, savings_account.id) == -5_000


def test_payment_to_missing_debt(engine, checking):
    with pytest.raises(NotFoundError, match="Debt not found."):
        engine.apply_payment(PaymentTarget.DEBT, 999, 100, checking.id)
    assert engine.snapshot.expenses == []


def test_transfer_conserves_money(engine, checking, savings_account):
    """Test that a transfer moves money without creating or destroying any."""
    expense, income = engine.transfer_funds(checking.id, savings_account.id, 5_000)

    assert balance(engine, checking.id) == 95_000
    assert balance(engine, savings_account.id) == 5_000
    assert expense.meta_origin is MetaOrigin.TRANSFER
    assert expense.notes == "Transfer from Checking to Savings"
    assert income.source == "Transfer from Checking"
    assert income.account_id == savings_account.id


def test_transfer_insufficient_funds(engine, checking, savings_account):
    """Test that a transfer larger than the source balance changes nothing."""
    with pytest.raises(InsufficientFundsError, match="Insufficient funds in Savings."):
        engine.transfer_funds(savings_account.id, checking.id, 1)

    assert balance(engine, checking.id) == 100_000
    assert balance(engine, savings_account.id) == 0
    assert engine.snapshot.expenses == []
    assert engine.snapshot.income == []


def test_transfer_to_same_account(engine, checking):
    """Test that a transfer to the same account is rejected regardless of balance."""
    with pytest.raises(ValidationError, match="same account"):
        engine.transfer_funds(checking.id, checking.id, 1)
    assert balance(engine, checking.id) == 100_000


def test_edit_debt_pulls_remaining_down(engine):
    """Test that lowering the total keeps the remaining balance within it."""
    debt = engine.create_debt("Loan", 50_000)
    updated = engine.edit_debt(debt.id, total_amount_cents=30_000)

    assert updated.total_amount_cents == 30_000
    assert updated.remaining_balance_cents == 30_000


def test_edit_debt_raises_total_keeps_remaining(engine, checking):
    debt = engine.create_debt("Loan", 50_000)
    engine.apply_payment(PaymentTarget.DEBT, debt.id, 10_000, checking.id)
    updated = engine.edit_debt(debt.id, total_amount_cents=80_000)

    assert updated.remaining_balance_cents == 40_000


def test_delete_debt_and_goal(engine):
    debt = engine.create_debt("Loan", 1000)
    goal = engine.create_savings_goal("Bike", 1000)

    engine.delete_debt(debt.id)
    engine.delete_savings_goal(goal.id)

    assert engine.snapshot.debts == []
    assert engine.snapshot.savings == []
    with pytest.raises(NotFoundError, match="Goal not found."):
        engine.delete_savings_goal(goal.id)


def test_edit_savings_goal(engine):
    goal = engine.create_savings_goal("Bike", 1000)
    updated = engine.edit_savings_goal(goal.id, name="E-Bike", goal_cents=2500, active=False)

    assert updated.name == "E-Bike"
    assert updated.goal_cents == 2500
    assert updated.active is False


def test_xp_awarded_per_action(engine, checking):
    """Test that actions award their XP."""
    # checking fixture already awarded 50 XP for the new account
    engine.create_transaction(TransactionKind.EXPENSE, 100, checking.id)
    engine.create_transaction(TransactionKind.INCOME, 100, checking.id)

    assert engine.snapshot.stats.xp == 80
    assert engine.snapshot.stats.level == 1


def test_update_profile(engine):
    profile = engine.update_profile(currency="eur", risk_tolerance="high", monthly_income_cents=400_000)

    assert profile.currency == "EUR"
    assert profile.risk_tolerance.value == "high"
    assert profile.monthly_income_cents == 400_000
    assert profile.name == "tester"
