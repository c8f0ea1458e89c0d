"""Build the database that backs a user's Session."""

import os
from pathlib import Path
from typing import Optional

from vaultledger.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "VAULTLEDGER_DB_PATH"


def default_database_path() -> Path:
    """Location of the shared ledger file when no path is configured.

    Every user's snapshot lives in this one file, keyed by user ID.
    """
    data_dir = Path.home() / ".vaultledger"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "vaultledger.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create the SQLite gateway a Session saves snapshots and memory to.

    The path is taken from ``database_path`` (the CLI's ``--db-path``), then
    the VAULTLEDGER_DB_PATH environment variable, then
    :func:`default_database_path`. Call ``initialize_schema`` on the result
    before opening a Session.
    """
    path = database_path or os.environ.get(DB_PATH_ENV) or default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{path}")
