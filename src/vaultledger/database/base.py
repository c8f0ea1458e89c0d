"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from vaultledger.domain.entities import LedgerSnapshot


class Database(ABC):
    """Abstract persistence gateway for vaultledger.

    Ledger state is stored as whole snapshots keyed by an opaque user ID.
    Callers run initialize_schema once before any other operation.
    Implementations may connect lazily, making connect a no-op.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Snapshot operations
    @abstractmethod
    def save_snapshot(self, user_id: str, snapshot: LedgerSnapshot) -> None:
        """Store the full snapshot for a user, replacing any previous one."""
        pass

    @abstractmethod
    def load_snapshot(self, user_id: str) -> Optional[LedgerSnapshot]:
        """Load the stored snapshot for a user.

        Returns None when nothing is stored. Raises SnapshotCorruptedError
        when a stored payload cannot be decoded.
        """
        pass

    @abstractmethod
    def clear_snapshot(self, user_id: str) -> None:
        """Remove the stored snapshot for a user."""
        pass

    # Assistant memory operations
    @abstractmethod
    def add_memory_fact(self, user_id: str, fact: str) -> bool:
        """Remember a fact for a user. Returns False if it was already known."""
        pass

    @abstractmethod
    def list_memory_facts(self, user_id: str) -> list[str]:
        """List remembered facts for a user in insertion order."""
        pass
