"""Financial summary over a ledger snapshot."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from vaultledger.domain.constants import FINANCIAL_RANKS
from vaultledger.domain.entities import FinancialRank, LedgerSnapshot


@dataclass(frozen=True)
class FinancialSummary:
    """Headline figures for the dashboard and the assistant."""

    total_assets_cents: int
    total_liabilities_cents: int
    net_worth_cents: int
    total_saved_cents: int
    month_expenses_cents: int
    month_income_cents: int
    rank: FinancialRank
    next_rank: Optional[FinancialRank]

    @property
    def month_cash_flow_cents(self) -> int:
        return self.month_income_cents - self.month_expenses_cents


def financial_rank(net_worth_cents: int) -> FinancialRank:
    """Return the highest rank whose threshold the net worth reaches.

    Net worth below the lowest threshold still maps to the lowest rank.
    """
    active = FINANCIAL_RANKS[0]
    for rank in FINANCIAL_RANKS:
        if net_worth_cents >= rank.min_net_worth_cents:
            active = rank
    return active


def _next_rank(rank: FinancialRank) -> Optional[FinancialRank]:
    index = FINANCIAL_RANKS.index(rank)
    if index + 1 < len(FINANCIAL_RANKS):
        return FINANCIAL_RANKS[index + 1]
    return None


def summarize(snapshot: LedgerSnapshot, today: Optional[date] = None) -> FinancialSummary:
    """Build a financial summary.

    Assets are the sum of account balances (credit accounts carry negative
    balances and reduce it); liabilities are the remaining debt balances.

    Args:
        snapshot: Ledger snapshot to summarize
        today: Reference date for the monthly figures (defaults to today)

    Returns:
        FinancialSummary
    """
    today = today or date.today()
    assets = sum(a.balance_cents for a in snapshot.accounts)
    liabilities = sum(d.remaining_balance_cents for d in snapshot.debts)
    net_worth = assets - liabilities
    rank = financial_rank(net_worth)

    def in_month(d: date) -> bool:
        return d.year == today.year and d.month == today.month

    return FinancialSummary(
        total_assets_cents=assets,
        total_liabilities_cents=liabilities,
        net_worth_cents=net_worth,
        total_saved_cents=sum(g.current_cents for g in snapshot.savings),
        month_expenses_cents=sum(e.amount_cents for e in snapshot.expenses if in_month(e.date)),
        month_income_cents=sum(i.amount_cents for i in snapshot.income if in_month(i.date)),
        rank=rank,
        next_rank=_next_rank(rank),
    )
