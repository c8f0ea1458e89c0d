"""Shared pytest fixtures for vaultledger tests."""

import os
import tempfile
from datetime import datetime, UTC

import pytest

from vaultledger.actions import ActionDispatcher
from vaultledger.database.factories import create_sqlite_database
from vaultledger.domain.entities import LedgerSnapshot
from vaultledger.domain.ledger import LedgerEngine
from vaultledger.session import Session

FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def clock():
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def snapshot():
    """An empty ledger snapshot."""
    return LedgerSnapshot.empty("tester")


@pytest.fixture
def engine(snapshot, clock):
    """A ledger engine over an empty snapshot."""
    return LedgerEngine(snapshot, clock=clock)


@pytest.fixture
def checking(engine):
    """A bank account holding $1,000.00."""
    return engine.create_account("Checking", starting_balance_cents=100_000)


@pytest.fixture
def savings_account(engine):
    """A bank account holding nothing."""
    return engine.create_account("Savings", starting_balance_cents=0)


@pytest.fixture
def session(temp_db, clock):
    """A database-backed session for user 'tester'."""
    session = Session.open(temp_db, "tester", clock=clock)
    yield session
    session.close()


@pytest.fixture
def dispatcher(session):
    """An action dispatcher over the test session."""
    return ActionDispatcher(session)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
