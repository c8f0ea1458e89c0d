"""SQLAlchemy models for vaultledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class LedgerSnapshotRecord(Base):
    """Serialized ledger snapshot, one row per user."""

    __tablename__ = "ledger_snapshots"

    user_id = Column(String, primary_key=True)
    schema_version = Column(Integer, nullable=False)
    payload = Column(Text, nullable=False)
    saved_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class MemoryFact(Base):
    """Free-text fact the assistant was asked to remember."""

    __tablename__ = "memory_facts"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    fact = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Snapshots are written from the background saver thread.
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    return sessionmaker(bind=engine)
