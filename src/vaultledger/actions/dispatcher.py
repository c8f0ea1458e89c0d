"""Named-action command surface shared by the assistant and the UI.

``ActionDispatcher.dispatch(name, params)`` maps one named action and a bag of
primitive parameters onto one ledger engine call. Money parameters arrive in
major units (dollars) and are converted to cents here. Expected failures come
back as ``ActionResult(success=False, ...)``; only programmer errors raise.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from vaultledger.actions.params import (
    optional_amount,
    optional_date,
    optional_enum,
    optional_text,
    require,
    require_amount,
)
from vaultledger.database import mappers
from vaultledger.domain import errors
from vaultledger.domain.entities import (
    Frequency,
    LedgerSnapshot,
    MetaOrigin,
    PaymentTarget,
    TransactionKind,
)
from vaultledger.domain.ledger import BatchItem, Recurrence
from vaultledger.domain.summary import summarize
from vaultledger.session import Session
from vaultledger.utils.amount_parser import format_cents
from vaultledger.utils.entity_resolver import (
    resolve,
    resolve_category,
    resolve_or_default,
    resolve_transaction,
)

logger = logging.getLogger(__name__)

RECENT_TRANSACTION_LIMIT = 15


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one dispatched action."""

    success: bool
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        result = {"success": self.success, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result


def _log_kind(action: str) -> str:
    if action.startswith("get"):
        return "READ"
    if action.startswith("delete"):
        return "DELETE"
    if action.startswith(("add", "batchAdd", "pay", "contribute", "transfer")):
        return "ADD"
    return "EDIT"


class ActionDispatcher:
    """Routes named actions to ledger operations for one session."""

    def __init__(self, session: Session):
        """Initialize dispatcher.

        Args:
            session: Session whose ledger the actions read and mutate
        """
        self.session = session
        self._handlers: dict[str, Callable[[dict[str, Any]], ActionResult]] = {
            "getAccounts": self.get_accounts,
            "getDebts": self.get_debts,
            "getSavingsGoals": self.get_savings_goals,
            "getRecentTransactions": self.get_recent_transactions,
            "getFinancialSummary": self.get_financial_summary,
            "addAccount": self.add_account,
            "editAccount": self.edit_account,
            "deleteAccount": self.delete_account,
            "addTransaction": self.add_transaction,
            "batchAddTransactions": self.batch_add_transactions,
            "editTransaction": self.edit_transaction,
            "deleteTransaction": self.delete_transaction,
            "transferFunds": self.transfer_funds,
            "payDebt": self.pay_debt,
            "contributeToSavings": self.contribute_to_savings,
            "addDebt": self.add_debt,
            "updateDebt": self.update_debt,
            "deleteDebt": self.delete_debt,
            "addSavingsGoal": self.add_savings_goal,
            "updateSavingsGoal": self.update_savings_goal,
            "deleteSavingsGoal": self.delete_savings_goal,
            "updateProfile": self.update_profile,
            "rememberFact": self.remember_fact,
        }

    @property
    def actions(self) -> list[str]:
        """Names of all supported actions."""
        return sorted(self._handlers)

    def dispatch(self, action: str, params: Optional[dict[str, Any]] = None) -> ActionResult:
        """Run one named action.

        Unknown action names are treated as no-ops that still report success,
        so a caller guessing at an action name is not interrupted.

        Args:
            action: Action name, e.g. "addTransaction"
            params: Parameter bag; money fields are in major currency units

        Returns:
            ActionResult describing the outcome
        """
        params = dict(params or {})
        logger.info("Action %s %s", action, params)

        handler = self._handlers.get(action)
        if handler is None:
            logger.warning("Unrecognized action %r treated as no-op", action)
            return ActionResult(True, "Action Processed")

        self.session.log_action(_log_kind(action), f"{action} {params}")
        try:
            return handler(params)
        except errors.DomainError as e:
            logger.info("Action %s failed (%s): %s", action, e.kind, e)
            return ActionResult(False, str(e))

    # Reads
    def _view(self) -> LedgerSnapshot:
        return self.session.view()

    def get_accounts(self, params: dict[str, Any]) -> ActionResult:
        accounts = self._view().accounts
        return ActionResult(
            True, f"Found {len(accounts)} accounts.", [mappers.account_to_dict(a) for a in accounts]
        )

    def get_debts(self, params: dict[str, Any]) -> ActionResult:
        debts = self._view().debts
        return ActionResult(True, f"Found {len(debts)} debts.", [mappers.debt_to_dict(d) for d in debts])

    def get_savings_goals(self, params: dict[str, Any]) -> ActionResult:
        goals = self._view().savings
        return ActionResult(
            True, f"Found {len(goals)} savings goals.", [mappers.goal_to_dict(g) for g in goals]
        )

    def get_recent_transactions(self, params: dict[str, Any]) -> ActionResult:
        """Newest expenses and income first, by date then creation order."""
        limit = params.get("limit") or RECENT_TRANSACTION_LIMIT
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            raise errors.ValidationError(f"Invalid limit '{limit}'.")
        view = self._view()
        transactions = sorted(
            [*view.expenses, *view.income], key=lambda t: (t.date, t.id), reverse=True
        )[: max(limit, 0)]
        return ActionResult(
            True,
            f"Found {len(transactions)} recent transactions.",
            [mappers.transaction_to_dict(t) for t in transactions],
        )

    def get_financial_summary(self, params: dict[str, Any]) -> ActionResult:
        summary = summarize(self._view())
        data = {
            "total_assets_cents": summary.total_assets_cents,
            "total_liabilities_cents": summary.total_liabilities_cents,
            "net_worth_cents": summary.net_worth_cents,
            "total_saved_cents": summary.total_saved_cents,
            "month_expenses_cents": summary.month_expenses_cents,
            "month_income_cents": summary.month_income_cents,
            "rank": summary.rank.title,
            "next_rank": summary.next_rank.title if summary.next_rank else None,
        }
        return ActionResult(True, f"Net worth is {format_cents(summary.net_worth_cents)}.", data)

    # Accounts
    def add_account(self, params: dict[str, Any]) -> ActionResult:
        require(params, "name")
        balance_cents = optional_amount(params, "balance") or 0
        account_type = optional_text(params, "type")
        with self.session.mutate() as engine:
            account = engine.create_account(
                name=str(params["name"]),
                type=account_type.upper() if account_type else "BANK",
                starting_balance_cents=balance_cents,
                notes=optional_text(params, "notes"),
            )
        return ActionResult(
            True, f"Account {account.name} created successfully.", mappers.account_to_dict(account)
        )

    def edit_account(self, params: dict[str, Any]) -> ActionResult:
        """Rename/retype/annotate an account; ``newBalance`` is a balance correction."""
        require(params, "currentName")
        new_balance = optional_amount(params, "newBalance")
        new_type = optional_text(params, "newType")
        with self.session.mutate() as engine:
            account = self._resolve_account(params["currentName"])
            account = engine.edit_account(
                account.id,
                name=optional_text(params, "newName"),
                type=new_type.upper() if new_type else None,
                notes=optional_text(params, "newNotes"),
            )
            if new_balance is not None:
                account = engine.correct_account_balance(account.id, new_balance)
        return ActionResult(True, "Account updated.", mappers.account_to_dict(account))

    def delete_account(self, params: dict[str, Any]) -> ActionResult:
        require(params, "name")
        with self.session.mutate() as engine:
            account = self._resolve_account(params["name"])
            engine.delete_account(account.id)
        return ActionResult(True, f"Account {account.name} deleted.")

    # Transactions
    def add_transaction(self, params: dict[str, Any]) -> ActionResult:
        """Log an expense or income; falls back to the first account when none matches."""
        require(params, "type", "amount")
        amount_cents = require_amount(params, "amount")
        txn_date = optional_date(params, "date")
        kind = str(params["type"]).strip().upper()
        origin = optional_enum(params, "origin", MetaOrigin) or MetaOrigin.AI_GENERATED
        notes = optional_text(params, "notes")
        if notes is None:
            notes = "AI Generated" if origin is MetaOrigin.AI_GENERATED else ""
        category = optional_text(params, "category")
        if kind == TransactionKind.EXPENSE.value:
            category_or_source = resolve_category(category)
        else:
            category_or_source = category

        recurrence = None
        frequency = optional_enum(params, "frequency", Frequency)
        if frequency is not None:
            recurrence = Recurrence(frequency, optional_date(params, "nextDueDate"))

        with self.session.mutate() as engine:
            account = resolve_or_default(optional_text(params, "accountName"), self.session.snapshot.accounts)
            if account is None:
                raise errors.NotFoundError(errors.account_not_found())
            txn = engine.create_transaction(
                kind=kind,
                amount_cents=amount_cents,
                account_id=account.id,
                category_or_source=category_or_source,
                notes=notes,
                txn_date=txn_date,
                recurrence=recurrence,
                meta_origin=origin,
            )
        return ActionResult(True, "Transaction added.", mappers.transaction_to_dict(txn))

    def batch_add_transactions(self, params: dict[str, Any]) -> ActionResult:
        """Import several statement lines into one account; nothing is added if any line is invalid."""
        require(params, "transactions", "accountName")
        lines = params["transactions"]
        if not isinstance(lines, (list, tuple)):
            raise errors.ValidationError("Parameter transactions must be a list.")

        items = []
        for index, line in enumerate(lines, start=1):
            if not isinstance(line, dict):
                raise errors.ValidationError(f"Transaction {index} must be an object.")
            require(line, "amount")
            kind = str(line.get("type") or TransactionKind.EXPENSE.value).strip().upper()
            category = optional_text(line, "category")
            items.append(
                BatchItem(
                    kind=kind,
                    amount_cents=abs(require_amount(line, "amount")),
                    notes=optional_text(line, "merchant") or optional_text(line, "notes") or "",
                    category_or_source=resolve_category(category)
                    if kind == TransactionKind.EXPENSE.value
                    else category,
                    txn_date=optional_date(line, "date"),
                )
            )

        with self.session.mutate() as engine:
            account = self._resolve_account(params["accountName"])
            created = engine.create_transactions(account.id, items)
        return ActionResult(
            True,
            f"Added {len(created)} transactions to {account.name}.",
            [mappers.transaction_to_dict(t) for t in created],
        )

    def edit_transaction(self, params: dict[str, Any]) -> ActionResult:
        require(params, "searchTerm")
        amount_cents = optional_amount(params, "newAmount")
        txn_date = optional_date(params, "newDate")
        with self.session.mutate() as engine:
            txn = resolve_transaction(str(params["searchTerm"]), self.session.snapshot)
            if txn is None:
                raise errors.NotFoundError(errors.transaction_not_found())
            txn = engine.edit_transaction(
                txn.id,
                amount_cents=amount_cents,
                notes=optional_text(params, "newNotes"),
                txn_date=txn_date,
            )
        return ActionResult(True, "Transaction updated.", mappers.transaction_to_dict(txn))

    def delete_transaction(self, params: dict[str, Any]) -> ActionResult:
        require(params, "searchTerm")
        with self.session.mutate() as engine:
            txn = resolve_transaction(str(params["searchTerm"]), self.session.snapshot)
            if txn is None:
                raise errors.NotFoundError(errors.transaction_not_found())
            engine.delete_transaction(txn.id)
        return ActionResult(True, "Transaction deleted and balance restored.", mappers.transaction_to_dict(txn))

    # Money movement
    def transfer_funds(self, params: dict[str, Any]) -> ActionResult:
        require(params, "fromAccountName", "toAccountName", "amount")
        amount_cents = require_amount(params, "amount")
        with self.session.mutate() as engine:
            source = self._resolve_account(params["fromAccountName"])
            destination = self._resolve_account(params["toAccountName"])
            expense, income = engine.transfer_funds(source.id, destination.id, amount_cents)
        return ActionResult(
            True,
            f"Transfer completed: {format_cents(amount_cents)} from {source.name} to {destination.name}.",
            {"expense": mappers.expense_to_dict(expense), "income": mappers.income_to_dict(income)},
        )

    def pay_debt(self, params: dict[str, Any]) -> ActionResult:
        require(params, "debtName", "amount")
        amount_cents = require_amount(params, "amount")
        with self.session.mutate() as engine:
            debt = resolve(str(params["debtName"]), self.session.snapshot.debts)
            if debt is None:
                raise errors.NotFoundError(errors.debt_not_found())
            account = self._resolve_payment_account(params)
            expense = engine.apply_payment(PaymentTarget.DEBT, debt.id, amount_cents, account.id)
            debt = self.session.snapshot.find_debt(debt.id)
        return ActionResult(
            True,
            f"Payment processed. {debt.name} has {format_cents(debt.remaining_balance_cents)} remaining.",
            {"debt": mappers.debt_to_dict(debt), "expense": mappers.expense_to_dict(expense)},
        )

    def contribute_to_savings(self, params: dict[str, Any]) -> ActionResult:
        require(params, "goalName", "amount")
        amount_cents = require_amount(params, "amount")
        with self.session.mutate() as engine:
            goal = resolve(str(params["goalName"]), self.session.snapshot.savings)
            if goal is None:
                raise errors.NotFoundError(errors.goal_not_found())
            account = self._resolve_payment_account(params)
            expense = engine.apply_payment(PaymentTarget.SAVINGS, goal.id, amount_cents, account.id)
            goal = self.session.snapshot.find_goal(goal.id)
        return ActionResult(
            True,
            f"Contribution processed. {goal.name} is at {format_cents(goal.current_cents)}.",
            {"goal": mappers.goal_to_dict(goal), "expense": mappers.expense_to_dict(expense)},
        )

    # Debts
    def add_debt(self, params: dict[str, Any]) -> ActionResult:
        require(params, "name", "totalAmount")
        total_cents = require_amount(params, "totalAmount")
        due_date = optional_date(params, "dueDate")
        min_payment_cents = optional_amount(params, "minPayment")
        with self.session.mutate() as engine:
            debt = engine.create_debt(
                str(params["name"]), total_cents, due_date=due_date, min_payment_cents=min_payment_cents
            )
        return ActionResult(True, f"Debt {debt.name} added.", mappers.debt_to_dict(debt))

    def update_debt(self, params: dict[str, Any]) -> ActionResult:
        require(params, "debtName")
        total_cents = optional_amount(params, "newTotal")
        due_date = optional_date(params, "newDueDate")
        with self.session.mutate() as engine:
            debt = resolve(str(params["debtName"]), self.session.snapshot.debts)
            if debt is None:
                raise errors.NotFoundError(errors.debt_not_found())
            debt = engine.edit_debt(
                debt.id,
                name=optional_text(params, "newName"),
                total_amount_cents=total_cents,
                due_date=due_date,
            )
        return ActionResult(True, "Debt details updated.", mappers.debt_to_dict(debt))

    def delete_debt(self, params: dict[str, Any]) -> ActionResult:
        require(params, "name")
        with self.session.mutate() as engine:
            debt = resolve(str(params["name"]), self.session.snapshot.debts)
            if debt is None:
                raise errors.NotFoundError(errors.debt_not_found())
            engine.delete_debt(debt.id)
        return ActionResult(True, "Debt record deleted.")

    # Savings goals
    def add_savings_goal(self, params: dict[str, Any]) -> ActionResult:
        require(params, "name", "targetAmount")
        goal_cents = require_amount(params, "targetAmount")
        target_date = optional_date(params, "targetDate")
        with self.session.mutate() as engine:
            goal = engine.create_savings_goal(str(params["name"]), goal_cents, target_date=target_date)
        return ActionResult(True, f"Goal {goal.name} created.", mappers.goal_to_dict(goal))

    def update_savings_goal(self, params: dict[str, Any]) -> ActionResult:
        require(params, "currentName")
        goal_cents = optional_amount(params, "newTarget")
        target_date = optional_date(params, "newTargetDate")
        with self.session.mutate() as engine:
            goal = resolve(str(params["currentName"]), self.session.snapshot.savings)
            if goal is None:
                raise errors.NotFoundError(errors.goal_not_found())
            goal = engine.edit_savings_goal(
                goal.id,
                name=optional_text(params, "newName"),
                goal_cents=goal_cents,
                target_date=target_date,
            )
        return ActionResult(True, "Goal updated.", mappers.goal_to_dict(goal))

    def delete_savings_goal(self, params: dict[str, Any]) -> ActionResult:
        require(params, "name")
        with self.session.mutate() as engine:
            goal = resolve(str(params["name"]), self.session.snapshot.savings)
            if goal is None:
                raise errors.NotFoundError(errors.goal_not_found())
            engine.delete_savings_goal(goal.id)
        return ActionResult(True, "Goal deleted.")

    # Profile and memory
    def update_profile(self, params: dict[str, Any]) -> ActionResult:
        monthly_income_cents = optional_amount(params, "monthlyIncome")
        risk = optional_text(params, "riskTolerance")
        with self.session.mutate() as engine:
            profile = engine.update_profile(
                name=optional_text(params, "name"),
                currency=optional_text(params, "currency"),
                financial_goal=optional_text(params, "financialGoal"),
                risk_tolerance=risk.lower() if risk else None,
                occupation=optional_text(params, "occupation"),
                monthly_income_cents=monthly_income_cents,
                voice_name=optional_text(params, "voiceName"),
            )
        return ActionResult(True, "Profile updated.", mappers.profile_to_dict(profile))

    def remember_fact(self, params: dict[str, Any]) -> ActionResult:
        require(params, "fact")
        self.session.remember_fact(str(params["fact"]).strip())
        return ActionResult(True, "I have saved that to my memory.")

    # Resolution helpers; callers hold the session lock.
    def _resolve_account(self, name: Any):
        account = resolve(str(name), self.session.snapshot.accounts)
        if account is None:
            raise errors.NotFoundError(errors.account_not_found())
        return account

    def _resolve_payment_account(self, params: dict[str, Any]):
        """Resolve the paying account. Only an omitted name means the first account."""
        name = optional_text(params, "fromAccountName")
        if name is not None:
            return self._resolve_account(name)
        accounts = self.session.snapshot.accounts
        account = accounts[0] if accounts else None
        if account is None:
            raise errors.NotFoundError(errors.account_not_found())
        return account
