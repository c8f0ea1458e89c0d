"""Database layer for vaultledger application."""

from vaultledger.database.base import Database
from vaultledger.database.factories import create_sqlite_database
from vaultledger.database.write_behind import WriteBehindSaver

__all__ = ["Database", "create_sqlite_database", "WriteBehindSaver"]
