"""Tests for CSV export."""

import csv
import io
from datetime import date

from vaultledger.domain.entities import TransactionKind
from vaultledger.domain.export import EXPORT_HEADER, export_transactions_csv


def test_export_empty_ledger(snapshot):
    stream = io.StringIO()

    assert export_transactions_csv(snapshot, stream) == 0
    assert list(csv.reader(io.StringIO(stream.getvalue()))) == [EXPORT_HEADER]


def test_export_rows(engine, checking):
    engine.create_transaction(
        TransactionKind.EXPENSE, 1250, checking.id, category_or_source=2, notes="Bus pass", txn_date=date(2024, 3, 2)
    )
    engine.create_transaction(
        TransactionKind.INCOME, 300_000, checking.id, category_or_source="Salary", txn_date=date(2024, 3, 1)
    )
    stream = io.StringIO()

    rows = export_transactions_csv(engine.snapshot, stream)

    assert rows == 2
    lines = list(csv.reader(io.StringIO(stream.getvalue())))
    assert lines[1] == ["INCOME", "2024-03-01", "3000.00", "Salary", ""]
    assert lines[2] == ["EXPENSE", "2024-03-02", "-12.50", "Transportation", "Bus pass"]
