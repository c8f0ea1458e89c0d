"""Write-behind snapshot saver.

Mutations hand the saver a copy of the snapshot and return immediately; a
background thread writes it out. Only the newest pending snapshot is kept, so
a burst of mutations costs one write and a failed write is superseded by the
next one.
"""

import logging
import threading
from typing import Optional

from vaultledger.database.base import Database
from vaultledger.domain.entities import LedgerSnapshot

logger = logging.getLogger(__name__)


class WriteBehindSaver:
    """Background writer for one user's snapshots."""

    def __init__(self, db: Database, user_id: str):
        """Initialize the saver and start its thread.

        Args:
            db: Database to write to
            user_id: Key the snapshots are stored under
        """
        self.db = db
        self.user_id = user_id
        self.last_error: Optional[Exception] = None
        self.saves_completed = 0

        self._lock = threading.Lock()
        self._pending: Optional[LedgerSnapshot] = None
        self._wakeup = threading.Event()
        self._idle = threading.Event()
        self._idle.set()
        self._stopped = False
        self._thread = threading.Thread(
            target=self._run, name=f"vaultledger-saver-{user_id}", daemon=True
        )
        self._thread.start()

    def schedule(self, snapshot: LedgerSnapshot) -> None:
        """Queue a snapshot for saving, replacing any snapshot not yet written."""
        with self._lock:
            if self._stopped:
                raise RuntimeError("Saver is closed")
            self._pending = snapshot
            self._idle.clear()
            self._wakeup.set()

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait until every scheduled snapshot has been attempted.

        Returns:
            False if the timeout expired first
        """
        return self._idle.wait(timeout)

    def close(self, timeout: Optional[float] = None) -> None:
        """Write any pending snapshot and stop the thread."""
        with self._lock:
            self._stopped = True
            self._wakeup.set()
        self._thread.join(timeout)

    def _run(self) -> None:
        while True:
            self._wakeup.wait()
            with self._lock:
                snapshot, self._pending = self._pending, None
                self._wakeup.clear()
                stopping = self._stopped

            if snapshot is not None:
                self._write(snapshot)

            with self._lock:
                if self._pending is None:
                    self._idle.set()
                    if stopping:
                        return

    def _write(self, snapshot: LedgerSnapshot) -> None:
        try:
            self.db.save_snapshot(self.user_id, snapshot)
        except Exception as e:
            # The in-memory ledger stays authoritative; the next mutation retries.
            logger.exception("Failed to save ledger for user %s", self.user_id)
            self.last_error = e
        else:
            self.last_error = None
            self.saves_completed += 1
            logger.debug("Saved ledger for user %s", self.user_id)
