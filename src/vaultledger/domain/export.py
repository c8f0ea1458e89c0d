"""CSV export of transaction history."""

import csv
from typing import TextIO

from vaultledger.domain.constants import get_category
from vaultledger.domain.entities import LedgerSnapshot

EXPORT_HEADER = ["Type", "Date", "Amount", "Category/Source", "Notes"]


def _format_cents(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    return f"{sign}{abs(cents) // 100}.{abs(cents) % 100:02d}"


def export_transactions_csv(snapshot: LedgerSnapshot, stream: TextIO) -> int:
    """Write income and expense rows to ``stream``.

    Income rows come first, then expenses; expense amounts are written as
    negative numbers.

    Returns:
        Number of rows written, excluding the header
    """
    writer = csv.writer(stream)
    writer.writerow(EXPORT_HEADER)
    rows = 0
    for income in snapshot.income:
        writer.writerow(
            ["INCOME", income.date.isoformat(), _format_cents(income.amount_cents), income.source, income.notes]
        )
        rows += 1
    for expense in snapshot.expenses:
        category = get_category(expense.category_id)
        writer.writerow(
            [
                "EXPENSE",
                expense.date.isoformat(),
                _format_cents(-expense.amount_cents),
                category.name if category else "Unknown",
                expense.notes,
            ]
        )
        rows += 1
    return rows
