"""User session owning one ledger snapshot."""

import logging
import threading
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Callable, Iterator, Optional

from vaultledger.database.base import Database
from vaultledger.database.write_behind import WriteBehindSaver
from vaultledger.domain import errors
from vaultledger.domain.entities import LedgerSnapshot
from vaultledger.domain.ledger import LedgerEngine

logger = logging.getLogger(__name__)

ACTION_LOG_LIMIT = 50


@dataclass(frozen=True)
class ActionLogEntry:
    timestamp: datetime
    kind: str
    details: str


class Session:
    """The active ledger of one user.

    All mutations go through :meth:`mutate`, which serializes callers and
    schedules a background save after each successful change. Sessions share
    nothing, so several can live in one process.
    """

    def __init__(
        self,
        user_id: str,
        snapshot: Optional[LedgerSnapshot] = None,
        db: Optional[Database] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize session.

        Args:
            user_id: Opaque user identifier
            snapshot: Ledger to own (a fresh one if None)
            db: Optional database for saving snapshots and assistant memory
            clock: Optional callable returning the current UTC datetime
        """
        self.user_id = user_id
        self.snapshot = snapshot if snapshot is not None else LedgerSnapshot.empty(user_id)
        self.db = db
        self._clock = clock or (lambda: datetime.now(UTC))
        self.engine = LedgerEngine(self.snapshot, clock=self._clock)
        self.action_log: deque[ActionLogEntry] = deque(maxlen=ACTION_LOG_LIMIT)

        self._lock = threading.RLock()
        self._saver = WriteBehindSaver(db, user_id) if db is not None else None
        self._closed = False
        self._memory: list[str] = db.list_memory_facts(user_id) if db is not None else []

    @classmethod
    def open(
        cls,
        db: Database,
        user_id: str,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "Session":
        """Load a user's stored ledger, or start a fresh one.

        An unreadable stored snapshot is treated as no prior state.
        """
        try:
            snapshot = db.load_snapshot(user_id)
        except errors.SnapshotCorruptedError:
            logger.warning("Stored ledger for user %s is unreadable, starting fresh", user_id, exc_info=True)
            snapshot = None
        if snapshot is None:
            logger.info("Starting new ledger for user %s", user_id)
        return cls(user_id, snapshot=snapshot, db=db, clock=clock)

    @contextmanager
    def mutate(self) -> Iterator[LedgerEngine]:
        """Hold the session lock while the caller runs engine operations.

        A save is scheduled only if the block completes without raising.
        Raises SessionClosedError, before the engine is handed out, once the
        session has been closed.
        """
        with self._lock:
            if self._closed:
                raise errors.SessionClosedError(errors.session_closed())
            yield self.engine
            if self._saver is not None:
                self._saver.schedule(self.snapshot.copy())

    def view(self) -> LedgerSnapshot:
        """Return a consistent copy of the current ledger."""
        with self._lock:
            return self.snapshot.copy()

    def remember_fact(self, fact: str) -> bool:
        """Add a fact to the assistant memory. Returns False if already known.

        Raises:
            StorageError: If the database write fails; the fact is not kept
        """
        with self._lock:
            if fact in self._memory:
                return False
            if self.db is not None:
                try:
                    self.db.add_memory_fact(self.user_id, fact)
                except Exception as e:
                    logger.exception("Failed to save memory fact for user %s", self.user_id)
                    raise errors.StorageError(errors.memory_not_saved()) from e
            self._memory.append(fact)
            return True

    @property
    def memory_facts(self) -> list[str]:
        return list(self._memory)

    def log_action(self, kind: str, details: str) -> None:
        self.action_log.appendleft(ActionLogEntry(self._clock(), kind, details))

    def recent_actions(self, limit: int = 10) -> list[ActionLogEntry]:
        """Return the newest logged actions first."""
        return list(self.action_log)[:limit]

    @property
    def last_save_error(self) -> Optional[Exception]:
        """Error from the most recent save attempt, or None if it succeeded."""
        return self._saver.last_error if self._saver is not None else None

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for scheduled saves to be attempted."""
        if self._saver is None:
            return True
        return self._saver.flush(timeout)

    def close(self) -> None:
        """Write any pending save and stop the saver. Later mutations are refused."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._saver is not None:
            self._saver.close()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
