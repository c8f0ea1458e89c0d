"""Domain layer for vaultledger application."""

from vaultledger.domain.entities import LedgerSnapshot
from vaultledger.domain.ledger import LedgerEngine
from vaultledger.domain.summary import summarize
from vaultledger.domain.export import export_transactions_csv

__all__ = [
    "LedgerSnapshot",
    "LedgerEngine",
    "summarize",
    "export_transactions_csv",
]
