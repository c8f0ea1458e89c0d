"""Ledger engine: the single writer of a ledger snapshot.

Every operation validates all of its inputs before touching the snapshot and
then applies the entity change together with the matching balance change, so
a failed call leaves the snapshot exactly as it was.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, UTC
from typing import Callable, Optional, Sequence

from dateutil.relativedelta import relativedelta

from vaultledger.domain import errors
from vaultledger.domain.constants import (
    DEBT_PAYMENT_CATEGORY_ID,
    DEFAULT_EXPENSE_CATEGORY_ID,
    DEFAULT_INCOME_SOURCE,
    SAVINGS_CATEGORY_ID,
    TRANSFER_CATEGORY_ID,
    XP_PER_ACTION,
)
from vaultledger.domain.entities import (
    Account,
    AccountType,
    Debt,
    Expense,
    Frequency,
    Income,
    LedgerSnapshot,
    MetaOrigin,
    PaymentTarget,
    RiskTolerance,
    SavingsGoal,
    Transaction,
    TransactionKind,
    UserProfile,
)
from vaultledger.domain.stats import award_xp

logger = logging.getLogger(__name__)

RECURRENCE_STEPS = {
    Frequency.DAILY: relativedelta(days=1),
    Frequency.WEEKLY: relativedelta(weeks=1),
    Frequency.BIWEEKLY: relativedelta(weeks=2),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.YEARLY: relativedelta(years=1),
}


def next_occurrence(start: date, frequency: Frequency) -> date:
    """Return the date one recurrence period after ``start``."""
    return start + RECURRENCE_STEPS[frequency]


@dataclass(frozen=True)
class Recurrence:
    """Recurring schedule attached to a transaction."""

    frequency: Frequency
    next_due_date: Optional[date] = None


@dataclass(frozen=True)
class BatchItem:
    """One entry of a batch transaction import."""

    kind: TransactionKind
    amount_cents: int
    notes: str = ""
    category_or_source: int | str | None = None
    txn_date: Optional[date] = None


def balance_effect(txn: Transaction) -> int:
    """Return the signed amount a transaction applied to its account."""
    if isinstance(txn, Expense):
        return -txn.amount_cents
    return txn.amount_cents


def _coerce(enum_type, value, label: str):
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise errors.ValidationError(f"Invalid {label} '{value}'. Expected one of: {allowed}.")


def _require_positive(amount_cents: int) -> None:
    if amount_cents is None or amount_cents <= 0:
        raise errors.ValidationError(errors.amount_not_positive())


def _require_name(name: Optional[str], entity: str) -> str:
    if name is None or not name.strip():
        raise errors.ValidationError(errors.empty_name(entity))
    return name.strip()


class LedgerEngine:
    """Mutation operations over one ledger snapshot."""

    def __init__(
        self,
        snapshot: LedgerSnapshot,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize ledger engine.

        Args:
            snapshot: Snapshot to mutate in place
            clock: Optional callable returning the current UTC datetime
        """
        self.snapshot = snapshot
        self._clock = clock or (lambda: datetime.now(UTC))

    # Helpers
    def _today(self) -> date:
        return self._clock().date()

    def _require_account(self, account_id: int) -> Account:
        account = self.snapshot.find_account(account_id)
        if account is None:
            raise errors.NotFoundError(errors.account_not_found())
        return account

    def _require_transaction(self, transaction_id: int) -> Transaction:
        txn = self.snapshot.find_transaction(transaction_id)
        if txn is None:
            raise errors.NotFoundError(errors.transaction_not_found())
        return txn

    def _require_debt(self, debt_id: int) -> Debt:
        debt = self.snapshot.find_debt(debt_id)
        if debt is None:
            raise errors.NotFoundError(errors.debt_not_found())
        return debt

    def _require_goal(self, goal_id: int) -> SavingsGoal:
        goal = self.snapshot.find_goal(goal_id)
        if goal is None:
            raise errors.NotFoundError(errors.goal_not_found())
        return goal

    def _store_account(self, account: Account) -> None:
        self.snapshot.accounts = [account if a.id == account.id else a for a in self.snapshot.accounts]

    def _adjust_balance(self, account_id: int, delta: int) -> None:
        account = self.snapshot.find_account(account_id)
        if account is None:
            # Only reachable for records loaded with a dangling account reference.
            logger.warning("Skipping balance change of %d on missing account %d", delta, account_id)
            return
        self._store_account(replace(account, balance_cents=account.balance_cents + delta))

    def _store_transaction(self, txn: Transaction) -> None:
        if isinstance(txn, Expense):
            self.snapshot.expenses = [txn if e.id == txn.id else e for e in self.snapshot.expenses]
        else:
            self.snapshot.income = [txn if i.id == txn.id else i for i in self.snapshot.income]

    def _append_transaction(self, txn: Transaction) -> None:
        if isinstance(txn, Expense):
            self.snapshot.expenses = [*self.snapshot.expenses, txn]
        else:
            self.snapshot.income = [*self.snapshot.income, txn]
        self._adjust_balance(txn.account_id, balance_effect(txn))

    def _award(self, action: str) -> None:
        amount = XP_PER_ACTION[action]
        self.snapshot.stats = award_xp(self.snapshot.stats, amount)
        logger.debug("Awarded %d XP for %s", amount, action)

    def _companion_expense(
        self, account_id: int, amount_cents: int, category_id: int, notes: str, origin: MetaOrigin
    ) -> Expense:
        return Expense(
            id=self.snapshot.allocate_id(),
            date=self._today(),
            amount_cents=amount_cents,
            category_id=category_id,
            account_id=account_id,
            notes=notes,
            created_at=self._clock(),
            meta_origin=origin,
        )

    # Transactions
    def create_transaction(
        self,
        kind: TransactionKind | str,
        amount_cents: int,
        account_id: int,
        category_or_source: int | str | None = None,
        notes: str = "",
        txn_date: Optional[date] = None,
        recurrence: Optional[Recurrence] = None,
        meta_origin: MetaOrigin = MetaOrigin.MANUAL,
    ) -> Transaction:
        """Record an expense or income and move the account balance.

        Args:
            kind: EXPENSE or INCOME
            amount_cents: Positive amount in cents
            account_id: Account the money leaves (expense) or enters (income)
            category_or_source: Category ID for expenses, source label for income
            notes: Free-text description
            txn_date: Transaction date (defaults to today)
            recurrence: Optional recurring schedule
            meta_origin: Origin tag stored on expenses

        Returns:
            The created Expense or Income

        Raises:
            ValidationError: If kind is unknown or amount is not positive
            NotFoundError: If the account does not exist
        """
        kind = _coerce(TransactionKind, kind, "transaction type")
        _require_positive(amount_cents)
        self._require_account(account_id)

        txn = self._build_transaction(
            kind, amount_cents, account_id, category_or_source, notes, txn_date, recurrence, meta_origin
        )
        self._append_transaction(txn)
        self._award("ADD_EXPENSE" if kind is TransactionKind.EXPENSE else "ADD_INCOME")
        return txn

    def _build_transaction(
        self,
        kind: TransactionKind,
        amount_cents: int,
        account_id: int,
        category_or_source: int | str | None,
        notes: str,
        txn_date: Optional[date],
        recurrence: Optional[Recurrence],
        meta_origin: MetaOrigin,
    ) -> Transaction:
        txn_date = txn_date or self._today()
        schedule = {}
        if recurrence is not None:
            schedule = {
                "is_recurring": True,
                "frequency": recurrence.frequency,
                "next_due_date": recurrence.next_due_date
                or next_occurrence(txn_date, recurrence.frequency),
            }

        if kind is TransactionKind.EXPENSE:
            category_id = category_or_source if isinstance(category_or_source, int) else None
            return Expense(
                id=self.snapshot.allocate_id(),
                date=txn_date,
                amount_cents=amount_cents,
                category_id=category_id or DEFAULT_EXPENSE_CATEGORY_ID,
                account_id=account_id,
                notes=notes or "",
                created_at=self._clock(),
                meta_origin=meta_origin,
                **schedule,
            )
        source = category_or_source if isinstance(category_or_source, str) else None
        return Income(
            id=self.snapshot.allocate_id(),
            date=txn_date,
            amount_cents=amount_cents,
            source=source or DEFAULT_INCOME_SOURCE,
            account_id=account_id,
            notes=notes or "",
            created_at=self._clock(),
            **schedule,
        )

    def create_transactions(self, account_id: int, items: Sequence[BatchItem]) -> list[Transaction]:
        """Record several transactions on one account, all or none.

        Raises:
            ValidationError: If the batch is empty or any item is invalid
            NotFoundError: If the account does not exist
        """
        if not items:
            raise errors.ValidationError("No transactions to add.")
        self._require_account(account_id)
        checked = []
        for item in items:
            kind = _coerce(TransactionKind, item.kind, "transaction type")
            _require_positive(item.amount_cents)
            checked.append(replace(item, kind=kind))

        return [
            self.create_transaction(
                kind=item.kind,
                amount_cents=item.amount_cents,
                account_id=account_id,
                category_or_source=item.category_or_source,
                notes=item.notes,
                txn_date=item.txn_date,
                meta_origin=MetaOrigin.AI_GENERATED,
            )
            for item in checked
        ]

    def edit_transaction(
        self,
        transaction_id: int,
        amount_cents: Optional[int] = None,
        notes: Optional[str] = None,
        txn_date: Optional[date] = None,
        category_id: Optional[int] = None,
        source: Optional[str] = None,
    ) -> Transaction:
        """Update transaction fields, moving the account balance by the amount delta.

        Args:
            transaction_id: Expense or income ID
            amount_cents: Optional new amount
            notes: Optional new notes
            txn_date: Optional new date
            category_id: Optional new category (expenses only)
            source: Optional new source (income only)

        Returns:
            The updated record

        Raises:
            NotFoundError: If the transaction does not exist
            ValidationError: If the amount is not positive or the field does not
                apply to this kind of transaction
        """
        txn = self._require_transaction(transaction_id)
        if amount_cents is not None:
            _require_positive(amount_cents)
        if category_id is not None and isinstance(txn, Income):
            raise errors.ValidationError("Income records have no category.")
        if source is not None and isinstance(txn, Expense):
            raise errors.ValidationError("Expense records have no source.")

        changes = {}
        if amount_cents is not None:
            changes["amount_cents"] = amount_cents
        if notes is not None:
            changes["notes"] = notes
        if txn_date is not None:
            changes["date"] = txn_date
        if category_id is not None:
            changes["category_id"] = category_id
        if source is not None:
            changes["source"] = source

        updated = replace(txn, **changes)
        self._store_transaction(updated)
        delta = balance_effect(updated) - balance_effect(txn)
        if delta:
            self._adjust_balance(txn.account_id, delta)
        return updated

    def delete_transaction(self, transaction_id: int) -> Transaction:
        """Remove a transaction and reverse its balance effect.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        txn = self._require_transaction(transaction_id)
        if isinstance(txn, Expense):
            self.snapshot.expenses = [e for e in self.snapshot.expenses if e.id != transaction_id]
        else:
            self.snapshot.income = [i for i in self.snapshot.income if i.id != transaction_id]
        self._adjust_balance(txn.account_id, -balance_effect(txn))
        return txn

    # Accounts
    def create_account(
        self,
        name: str,
        type: AccountType | str = AccountType.BANK,
        starting_balance_cents: int = 0,
        notes: Optional[str] = None,
    ) -> Account:
        """Create an account with the given opening balance.

        The starting balance may be negative (e.g. a credit card).

        Raises:
            ValidationError: If name is empty or type is unknown
        """
        name = _require_name(name, "Account")
        account_type = _coerce(AccountType, type, "account type")
        account = Account(
            id=self.snapshot.allocate_id(),
            name=name,
            type=account_type,
            balance_cents=starting_balance_cents,
            created_at=self._clock(),
            notes=notes,
        )
        self.snapshot.accounts = [*self.snapshot.accounts, account]
        self._award("ADD_ACCOUNT")
        return account

    def edit_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        type: AccountType | str | None = None,
        notes: Optional[str] = None,
    ) -> Account:
        """Update descriptive account fields. The balance is never touched here."""
        account = self._require_account(account_id)
        changes = {}
        if name is not None:
            changes["name"] = _require_name(name, "Account")
        if type is not None:
            changes["type"] = _coerce(AccountType, type, "account type")
        if notes is not None:
            changes["notes"] = notes
        updated = replace(account, **changes)
        self._store_account(updated)
        return updated

    def correct_account_balance(self, account_id: int, balance_cents: int) -> Account:
        """Overwrite an account balance without reconciling against history.

        This is a correction tool: afterwards the balance no longer equals the
        sum of the account's transaction effects.
        """
        account = self._require_account(account_id)
        updated = replace(account, balance_cents=balance_cents)
        self._store_account(updated)
        logger.info(
            "Balance of account %d corrected from %d to %d",
            account_id,
            account.balance_cents,
            balance_cents,
        )
        return updated

    def delete_account(self, account_id: int) -> Account:
        """Delete an account that no transaction references.

        Raises:
            NotFoundError: If the account does not exist
            DependencyError: If expenses or income still reference the account
        """
        account = self._require_account(account_id)
        transaction_count = self.snapshot.account_transaction_count(account_id)
        if transaction_count > 0:
            raise errors.DependencyError(errors.account_delete_blocked(account.name, transaction_count))
        self.snapshot.accounts = [a for a in self.snapshot.accounts if a.id != account_id]
        return account

    # Payments and transfers
    def apply_payment(
        self,
        target_kind: PaymentTarget | str,
        target_id: int,
        amount_cents: int,
        account_id: int,
    ) -> Expense:
        """Pay toward a debt or contribute to a savings goal from an account.

        The account is debited without an overdraft check. Debt balances are
        clamped at zero; goal balances are not capped. A companion expense
        records the movement in the transaction history.

        Returns:
            The companion expense

        Raises:
            ValidationError: If amount is not positive or target kind is unknown
            NotFoundError: If the debt, goal or account does not exist
        """
        target_kind = _coerce(PaymentTarget, target_kind, "payment target")
        _require_positive(amount_cents)
        if target_kind is PaymentTarget.DEBT:
            target = self._require_debt(target_id)
        else:
            target = self._require_goal(target_id)
        self._require_account(account_id)

        if target_kind is PaymentTarget.DEBT:
            remaining = max(0, target.remaining_balance_cents - amount_cents)
            updated_debt = replace(target, remaining_balance_cents=remaining)
            self.snapshot.debts = [updated_debt if d.id == target.id else d for d in self.snapshot.debts]
            expense = self._companion_expense(
                account_id, amount_cents, DEBT_PAYMENT_CATEGORY_ID, f"Payment to {target.name}", MetaOrigin.MANUAL
            )
            action = "PAY_DEBT"
        else:
            updated_goal = replace(target, current_cents=target.current_cents + amount_cents)
            self.snapshot.savings = [updated_goal if g.id == target.id else g for g in self.snapshot.savings]
            expense = self._companion_expense(
                account_id, amount_cents, SAVINGS_CATEGORY_ID, f"Contribution to {target.name}", MetaOrigin.MANUAL
            )
            action = "CONTRIBUTE_SAVINGS"

        self._append_transaction(expense)
        self._award(action)
        return expense

    def transfer_funds(
        self, from_account_id: int, to_account_id: int, amount_cents: int
    ) -> tuple[Expense, Income]:
        """Move money between two accounts.

        Returns:
            The companion expense (source) and income (destination)

        Raises:
            ValidationError: If amount is not positive or both accounts are the same
            NotFoundError: If either account does not exist
            InsufficientFundsError: If the source balance is below the amount
        """
        _require_positive(amount_cents)
        if from_account_id == to_account_id:
            raise errors.ValidationError(errors.same_account_transfer())
        source = self._require_account(from_account_id)
        destination = self._require_account(to_account_id)
        if source.balance_cents < amount_cents:
            raise errors.InsufficientFundsError(errors.insufficient_funds(source.name))

        note = f"Transfer from {source.name} to {destination.name}"
        expense = self._companion_expense(
            from_account_id, amount_cents, TRANSFER_CATEGORY_ID, note, MetaOrigin.TRANSFER
        )
        income = Income(
            id=self.snapshot.allocate_id(),
            date=self._today(),
            amount_cents=amount_cents,
            source=f"Transfer from {source.name}",
            account_id=to_account_id,
            notes=note,
            created_at=self._clock(),
        )
        self._append_transaction(expense)
        self._append_transaction(income)
        self._award("TRANSFER")
        return expense, income

    # Debts
    def create_debt(
        self,
        name: str,
        total_amount_cents: int,
        due_date: Optional[date] = None,
        min_payment_cents: Optional[int] = None,
    ) -> Debt:
        """Create a debt with its full amount outstanding."""
        name = _require_name(name, "Debt")
        _require_positive(total_amount_cents)
        debt = Debt(
            id=self.snapshot.allocate_id(),
            name=name,
            total_amount_cents=total_amount_cents,
            remaining_balance_cents=total_amount_cents,
            due_date=due_date,
            min_payment_cents=min_payment_cents,
        )
        self.snapshot.debts = [*self.snapshot.debts, debt]
        return debt

    def edit_debt(
        self,
        debt_id: int,
        name: Optional[str] = None,
        total_amount_cents: Optional[int] = None,
        due_date: Optional[date] = None,
        min_payment_cents: Optional[int] = None,
    ) -> Debt:
        """Patch debt fields.

        Lowering the total below the remaining balance pulls the remaining
        balance down with it.
        """
        debt = self._require_debt(debt_id)
        changes = {}
        if name is not None:
            changes["name"] = _require_name(name, "Debt")
        if total_amount_cents is not None:
            _require_positive(total_amount_cents)
            changes["total_amount_cents"] = total_amount_cents
            changes["remaining_balance_cents"] = min(debt.remaining_balance_cents, total_amount_cents)
        if due_date is not None:
            changes["due_date"] = due_date
        if min_payment_cents is not None:
            changes["min_payment_cents"] = min_payment_cents
        updated = replace(debt, **changes)
        self.snapshot.debts = [updated if d.id == debt_id else d for d in self.snapshot.debts]
        return updated

    def delete_debt(self, debt_id: int) -> Debt:
        debt = self._require_debt(debt_id)
        self.snapshot.debts = [d for d in self.snapshot.debts if d.id != debt_id]
        return debt

    # Savings goals
    def create_savings_goal(
        self, name: str, goal_cents: int, target_date: Optional[date] = None
    ) -> SavingsGoal:
        """Create an active savings goal with nothing saved yet."""
        name = _require_name(name, "Goal")
        _require_positive(goal_cents)
        goal = SavingsGoal(
            id=self.snapshot.allocate_id(),
            name=name,
            goal_cents=goal_cents,
            current_cents=0,
            target_date=target_date,
            active=True,
        )
        self.snapshot.savings = [*self.snapshot.savings, goal]
        return goal

    def edit_savings_goal(
        self,
        goal_id: int,
        name: Optional[str] = None,
        goal_cents: Optional[int] = None,
        target_date: Optional[date] = None,
        active: Optional[bool] = None,
        current_cents: Optional[int] = None,
    ) -> SavingsGoal:
        """Patch savings goal fields."""
        goal = self._require_goal(goal_id)
        changes = {}
        if name is not None:
            changes["name"] = _require_name(name, "Goal")
        if goal_cents is not None:
            _require_positive(goal_cents)
            changes["goal_cents"] = goal_cents
        if target_date is not None:
            changes["target_date"] = target_date
        if active is not None:
            changes["active"] = active
        if current_cents is not None:
            if current_cents < 0:
                raise errors.ValidationError("Saved amount cannot be negative.")
            changes["current_cents"] = current_cents
        updated = replace(goal, **changes)
        self.snapshot.savings = [updated if g.id == goal_id else g for g in self.snapshot.savings]
        return updated

    def delete_savings_goal(self, goal_id: int) -> SavingsGoal:
        goal = self._require_goal(goal_id)
        self.snapshot.savings = [g for g in self.snapshot.savings if g.id != goal_id]
        return goal

    # Profile
    def update_profile(
        self,
        name: Optional[str] = None,
        currency: Optional[str] = None,
        financial_goal: Optional[str] = None,
        risk_tolerance: RiskTolerance | str | None = None,
        occupation: Optional[str] = None,
        monthly_income_cents: Optional[int] = None,
        voice_name: Optional[str] = None,
    ) -> UserProfile:
        """Patch descriptive profile fields; None leaves a field unchanged."""
        changes = {}
        if name is not None:
            changes["name"] = _require_name(name, "Profile")
        if currency is not None:
            changes["currency"] = currency.strip().upper()
        if financial_goal is not None:
            changes["financial_goal"] = financial_goal
        if risk_tolerance is not None:
            changes["risk_tolerance"] = _coerce(RiskTolerance, risk_tolerance, "risk tolerance")
        if occupation is not None:
            changes["occupation"] = occupation
        if monthly_income_cents is not None:
            if monthly_income_cents < 0:
                raise errors.ValidationError("Monthly income cannot be negative.")
            changes["monthly_income_cents"] = monthly_income_cents
        if voice_name is not None:
            changes["voice_name"] = voice_name
        self.snapshot.profile = replace(self.snapshot.profile, **changes)
        return self.snapshot.profile
