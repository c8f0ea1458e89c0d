"""Tests for the financial summary."""

from datetime import date

from vaultledger.domain.entities import TransactionKind
from vaultledger.domain.summary import financial_rank, summarize


def test_empty_ledger_summary(snapshot):
    summary = summarize(snapshot, today=date(2024, 3, 15))

    assert summary.net_worth_cents == 0
    assert summary.rank.title == "Ground Zero"
    assert summary.next_rank.title == "Saver Scout"


def test_summary_totals(engine, checking):
    engine.create_account("Visa", type="CREDIT", starting_balance_cents=-20_000)
    engine.create_debt("Loan", 30_000)
    goal = engine.create_savings_goal("Trip", 10_000)
    engine.apply_payment("SAVINGS", goal.id, 5_000, checking.id)
    engine.create_transaction(TransactionKind.INCOME, 7_000, checking.id)
    engine.create_transaction(TransactionKind.EXPENSE, 1_000, checking.id, txn_date=date(2024, 2, 28))

    summary = summarize(engine.snapshot, today=date(2024, 3, 20))

    # 100,000 - 5,000 + 7,000 - 1,000 on checking, -20,000 on the card
    assert summary.total_assets_cents == 81_000
    assert summary.total_liabilities_cents == 30_000
    assert summary.net_worth_cents == 51_000
    assert summary.total_saved_cents == 5_000
    # The February expense falls outside March; the contribution does not.
    assert summary.month_expenses_cents == 5_000
    assert summary.month_income_cents == 7_000
    assert summary.month_cash_flow_cents == 2_000


def test_financial_rank_thresholds():
    assert financial_rank(-500_000).title == "Broke Baron"
    assert financial_rank(0).title == "Ground Zero"
    assert financial_rank(100_000).title == "Saver Scout"
    assert financial_rank(99_999).title == "Ground Zero"
    assert financial_rank(2_000_000_000).title == "Empire Builder"
