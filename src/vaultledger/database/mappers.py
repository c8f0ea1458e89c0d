"""Mapper functions to convert between domain entities and plain dicts.

The dict form is what gets stored as a snapshot payload and what the action
dispatcher returns as ``data``. Dates are ISO strings, enums their values.
"""

from datetime import date, datetime
from typing import Any, Optional

from vaultledger.domain import entities as domain
from vaultledger.domain.errors import SnapshotCorruptedError

SCHEMA_VERSION = 1


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _enum(enum_type, value):
    return enum_type(value) if value is not None else None


def account_to_dict(account: domain.Account) -> dict[str, Any]:
    """Convert Account entity to dict."""
    return {
        "id": account.id,
        "name": account.name,
        "type": account.type.value,
        "balance_cents": account.balance_cents,
        "notes": account.notes,
        "created_at": account.created_at.isoformat(),
    }


def account_from_dict(data: dict[str, Any]) -> domain.Account:
    """Convert dict to Account entity."""
    return domain.Account(
        id=data["id"],
        name=data["name"],
        type=domain.AccountType(data["type"]),
        balance_cents=data["balance_cents"],
        notes=data.get("notes"),
        created_at=datetime.fromisoformat(data["created_at"]),
    )


def _schedule_to_dict(txn: domain.Transaction) -> dict[str, Any]:
    return {
        "is_recurring": txn.is_recurring,
        "frequency": txn.frequency.value if txn.frequency else None,
        "next_due_date": _iso(txn.next_due_date),
    }


def _schedule_from_dict(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "is_recurring": data.get("is_recurring", False),
        "frequency": _enum(domain.Frequency, data.get("frequency")),
        "next_due_date": _date(data.get("next_due_date")),
    }


def expense_to_dict(expense: domain.Expense) -> dict[str, Any]:
    """Convert Expense entity to dict."""
    return {
        "id": expense.id,
        "kind": domain.TransactionKind.EXPENSE.value,
        "date": expense.date.isoformat(),
        "amount_cents": expense.amount_cents,
        "category_id": expense.category_id,
        "account_id": expense.account_id,
        "notes": expense.notes,
        "created_at": expense.created_at.isoformat(),
        "meta_origin": expense.meta_origin.value,
        **_schedule_to_dict(expense),
    }


def expense_from_dict(data: dict[str, Any]) -> domain.Expense:
    """Convert dict to Expense entity."""
    return domain.Expense(
        id=data["id"],
        date=date.fromisoformat(data["date"]),
        amount_cents=data["amount_cents"],
        category_id=data["category_id"],
        account_id=data["account_id"],
        notes=data.get("notes", ""),
        created_at=datetime.fromisoformat(data["created_at"]),
        meta_origin=domain.MetaOrigin(data.get("meta_origin", "manual")),
        **_schedule_from_dict(data),
    )


def income_to_dict(income: domain.Income) -> dict[str, Any]:
    """Convert Income entity to dict."""
    return {
        "id": income.id,
        "kind": domain.TransactionKind.INCOME.value,
        "date": income.date.isoformat(),
        "amount_cents": income.amount_cents,
        "source": income.source,
        "account_id": income.account_id,
        "notes": income.notes,
        "created_at": income.created_at.isoformat(),
        **_schedule_to_dict(income),
    }


def income_from_dict(data: dict[str, Any]) -> domain.Income:
    """Convert dict to Income entity."""
    return domain.Income(
        id=data["id"],
        date=date.fromisoformat(data["date"]),
        amount_cents=data["amount_cents"],
        source=data["source"],
        account_id=data["account_id"],
        notes=data.get("notes", ""),
        created_at=datetime.fromisoformat(data["created_at"]),
        **_schedule_from_dict(data),
    )


def transaction_to_dict(txn: domain.Transaction) -> dict[str, Any]:
    if isinstance(txn, domain.Expense):
        return expense_to_dict(txn)
    return income_to_dict(txn)


def debt_to_dict(debt: domain.Debt) -> dict[str, Any]:
    """Convert Debt entity to dict."""
    return {
        "id": debt.id,
        "name": debt.name,
        "total_amount_cents": debt.total_amount_cents,
        "remaining_balance_cents": debt.remaining_balance_cents,
        "due_date": _iso(debt.due_date),
        "min_payment_cents": debt.min_payment_cents,
    }


def debt_from_dict(data: dict[str, Any]) -> domain.Debt:
    """Convert dict to Debt entity."""
    return domain.Debt(
        id=data["id"],
        name=data["name"],
        total_amount_cents=data["total_amount_cents"],
        remaining_balance_cents=data["remaining_balance_cents"],
        due_date=_date(data.get("due_date")),
        min_payment_cents=data.get("min_payment_cents"),
    )


def goal_to_dict(goal: domain.SavingsGoal) -> dict[str, Any]:
    """Convert SavingsGoal entity to dict."""
    return {
        "id": goal.id,
        "name": goal.name,
        "goal_cents": goal.goal_cents,
        "current_cents": goal.current_cents,
        "target_date": _iso(goal.target_date),
        "active": goal.active,
    }


def goal_from_dict(data: dict[str, Any]) -> domain.SavingsGoal:
    """Convert dict to SavingsGoal entity."""
    return domain.SavingsGoal(
        id=data["id"],
        name=data["name"],
        goal_cents=data["goal_cents"],
        current_cents=data["current_cents"],
        target_date=_date(data.get("target_date")),
        active=data.get("active", True),
    )


def profile_to_dict(profile: domain.UserProfile) -> dict[str, Any]:
    return {
        "name": profile.name,
        "currency": profile.currency,
        "financial_goal": profile.financial_goal,
        "risk_tolerance": profile.risk_tolerance.value,
        "occupation": profile.occupation,
        "monthly_income_cents": profile.monthly_income_cents,
        "voice_name": profile.voice_name,
    }


def profile_from_dict(data: dict[str, Any]) -> domain.UserProfile:
    return domain.UserProfile(
        name=data["name"],
        currency=data.get("currency", "USD"),
        financial_goal=data.get("financial_goal", "Financial Freedom"),
        risk_tolerance=domain.RiskTolerance(data.get("risk_tolerance", "medium")),
        occupation=data.get("occupation"),
        monthly_income_cents=data.get("monthly_income_cents"),
        voice_name=data.get("voice_name"),
    )


def stats_to_dict(stats: domain.UserStats) -> dict[str, Any]:
    return {
        "level": stats.level,
        "xp": stats.xp,
        "next_level_xp": stats.next_level_xp,
        "title": stats.title,
        "streak_days": stats.streak_days,
    }


def stats_from_dict(data: dict[str, Any]) -> domain.UserStats:
    return domain.UserStats(
        level=data["level"],
        xp=data["xp"],
        next_level_xp=data["next_level_xp"],
        title=data.get("title", "Novice"),
        streak_days=data.get("streak_days", 0),
    )


def snapshot_to_dict(snapshot: domain.LedgerSnapshot) -> dict[str, Any]:
    """Convert a full ledger snapshot to a versioned dict."""
    return {
        "schema_version": SCHEMA_VERSION,
        "last_id": snapshot.last_id,
        "accounts": [account_to_dict(a) for a in snapshot.accounts],
        "expenses": [expense_to_dict(e) for e in snapshot.expenses],
        "income": [income_to_dict(i) for i in snapshot.income],
        "debts": [debt_to_dict(d) for d in snapshot.debts],
        "savings": [goal_to_dict(g) for g in snapshot.savings],
        "stats": stats_to_dict(snapshot.stats),
        "profile": profile_to_dict(snapshot.profile),
    }


def snapshot_from_dict(data: dict[str, Any]) -> domain.LedgerSnapshot:
    """Convert a stored dict back to a ledger snapshot.

    Raises:
        SnapshotCorruptedError: If the payload has an unknown version or
            missing/invalid fields
    """
    try:
        version = data.get("schema_version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            raise SnapshotCorruptedError(f"Unsupported snapshot schema version {version}")
        snapshot = domain.LedgerSnapshot(
            accounts=[account_from_dict(a) for a in data["accounts"]],
            expenses=[expense_from_dict(e) for e in data["expenses"]],
            income=[income_from_dict(i) for i in data["income"]],
            debts=[debt_from_dict(d) for d in data["debts"]],
            savings=[goal_from_dict(g) for g in data["savings"]],
            stats=stats_from_dict(data["stats"]),
            profile=profile_from_dict(data["profile"]),
        )
        # Keep the ID sequence ahead of every stored entity.
        snapshot.last_id = max(int(data.get("last_id", 0)), snapshot.highest_id())
    except SnapshotCorruptedError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise SnapshotCorruptedError(f"Could not decode ledger snapshot: {e!r}")
    return snapshot
