"""Domain model entities for vaultledger.

These are pure data classes representing the ledger, independent of how a
snapshot is stored. All money is held as integer cents. Entities are frozen;
the ledger engine replaces them wholesale when a field changes, so a snapshot
never holds a half-updated record.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, date
from enum import Enum
from typing import Optional, Union


class AccountType(str, Enum):
    BANK = "BANK"
    CASH = "CASH"
    CREDIT = "CREDIT"
    INVESTMENT = "INVESTMENT"
    OTHER = "OTHER"


class TransactionKind(str, Enum):
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class PaymentTarget(str, Enum):
    DEBT = "DEBT"
    SAVINGS = "SAVINGS"


class MetaOrigin(str, Enum):
    """Where an expense record came from."""

    MANUAL = "manual"
    RECURRING = "recurring"
    AI_GENERATED = "ai_generated"
    RECEIPT_SCAN = "receipt_scan"
    TRANSFER = "transfer"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class RiskTolerance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Category:
    """Expense category from the fixed catalogue."""

    id: int
    name: str
    color: str


@dataclass(frozen=True)
class FinancialRank:
    """Net-worth tier shown on the roadmap."""

    title: str
    min_net_worth_cents: int
    perks: str


@dataclass(frozen=True)
class Account:
    """Account domain entity.

    ``balance_cents`` is maintained incrementally by the ledger engine and is
    never recomputed from transaction history.
    """

    id: int
    name: str
    type: AccountType
    balance_cents: int
    created_at: datetime
    notes: Optional[str] = None


@dataclass(frozen=True)
class Expense:
    """Debit against an account."""

    id: int
    date: date
    amount_cents: int
    category_id: int
    account_id: int
    notes: str
    created_at: datetime
    meta_origin: MetaOrigin = MetaOrigin.MANUAL
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    next_due_date: Optional[date] = None

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.EXPENSE


@dataclass(frozen=True)
class Income:
    """Credit to an account."""

    id: int
    date: date
    amount_cents: int
    source: str
    account_id: int
    notes: str
    created_at: datetime
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    next_due_date: Optional[date] = None

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.INCOME


Transaction = Union[Expense, Income]


@dataclass(frozen=True)
class Debt:
    """Liability paid down by payments; remaining balance stays in [0, total]."""

    id: int
    name: str
    total_amount_cents: int
    remaining_balance_cents: int
    due_date: Optional[date] = None
    min_payment_cents: Optional[int] = None


@dataclass(frozen=True)
class SavingsGoal:
    """Savings target; contributions may overshoot the goal."""

    id: int
    name: str
    goal_cents: int
    current_cents: int
    target_date: Optional[date] = None
    active: bool = True

    @property
    def progress(self) -> float:
        return self.current_cents / self.goal_cents if self.goal_cents else 0.0


@dataclass(frozen=True)
class UserProfile:
    name: str = "guest"
    currency: str = "USD"
    financial_goal: str = "Financial Freedom"
    risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM
    occupation: Optional[str] = None
    monthly_income_cents: Optional[int] = None
    voice_name: Optional[str] = None


@dataclass(frozen=True)
class UserStats:
    """Gamification counters; see ``vaultledger.domain.stats``."""

    level: int = 1
    xp: int = 0
    next_level_xp: int = 100
    title: str = "Novice"
    streak_days: int = 0


@dataclass
class LedgerSnapshot:
    """Complete ledger state for one user.

    ``last_id`` is the high-water mark of the ID sequence shared by every
    entity kind, so expense and income IDs never collide.
    """

    accounts: list[Account] = field(default_factory=list)
    expenses: list[Expense] = field(default_factory=list)
    income: list[Income] = field(default_factory=list)
    debts: list[Debt] = field(default_factory=list)
    savings: list[SavingsGoal] = field(default_factory=list)
    stats: UserStats = field(default_factory=UserStats)
    profile: UserProfile = field(default_factory=UserProfile)
    last_id: int = 0

    @classmethod
    def empty(cls, user_name: str = "guest") -> "LedgerSnapshot":
        return cls(profile=UserProfile(name=user_name))

    def allocate_id(self) -> int:
        """Return the next unused entity ID."""
        self.last_id += 1
        return self.last_id

    def highest_id(self) -> int:
        """Return the largest ID held by any entity in the snapshot."""
        collections = (self.accounts, self.expenses, self.income, self.debts, self.savings)
        return max((item.id for items in collections for item in items), default=0)

    def find_account(self, account_id: int) -> Optional[Account]:
        return next((a for a in self.accounts if a.id == account_id), None)

    def find_transaction(self, transaction_id: int) -> Optional[Transaction]:
        for txn in self.expenses:
            if txn.id == transaction_id:
                return txn
        for txn in self.income:
            if txn.id == transaction_id:
                return txn
        return None

    def find_debt(self, debt_id: int) -> Optional[Debt]:
        return next((d for d in self.debts if d.id == debt_id), None)

    def find_goal(self, goal_id: int) -> Optional[SavingsGoal]:
        return next((g for g in self.savings if g.id == goal_id), None)

    def account_transaction_count(self, account_id: int) -> int:
        """Count expenses and income that reference an account."""
        return sum(1 for e in self.expenses if e.account_id == account_id) + sum(
            1 for i in self.income if i.account_id == account_id
        )

    def copy(self) -> "LedgerSnapshot":
        """Return an independent copy; entities are shared since they are immutable."""
        return replace(
            self,
            accounts=list(self.accounts),
            expenses=list(self.expenses),
            income=list(self.income),
            debts=list(self.debts),
            savings=list(self.savings),
        )
