"""
Ledger state store for CarePass - one SQLite database shared by the token,
counter and audit tables
"""

import sqlite3
import threading
from contextlib import contextmanager
from typing import Callable, Iterator
import logging

from ..utils.errors import LedgerStoreError


logger = logging.getLogger(__name__)


class LedgerStateStore:
    """
    Single state store holding every ledger table

    All mutations go through transaction(), which serializes writers with a
    re-entrant lock and wraps the work in an immediate SQLite transaction so
    a failed operation leaves no partial state behind.
    """

    def __init__(self, db_path: str = "carepass_ledger.db"):
        """
        Initialize the state store

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = db_path
        self._lock = threading.RLock()
        self._depth = 0
        self._pending_callbacks = []
        # autocommit mode; transactions are opened explicitly
        self._conn = sqlite3.connect(db_path, isolation_level=None, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row  # Enable column access by name
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._init_database()

    def _init_database(self) -> None:
        """Initialize SQLite database with required tables"""
        with self.transaction() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS access_tokens (
                    token_id INTEGER PRIMARY KEY,
                    record_owner_id TEXT NOT NULL,
                    current_holder TEXT NOT NULL,
                    granted_to TEXT NOT NULL,
                    scopes TEXT NOT NULL,
                    issued_at INTEGER NOT NULL,
                    expiry INTEGER NOT NULL,
                    terms TEXT NOT NULL DEFAULT '',
                    active INTEGER NOT NULL DEFAULT 1,
                    CONSTRAINT chk_expiry CHECK (expiry > issued_at)
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_tokens_owner
                ON access_tokens(record_owner_id)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_tokens_holder
                ON access_tokens(current_holder, active)
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS owner_token_counters (
                    record_owner_id TEXT PRIMARY KEY,
                    count INTEGER NOT NULL DEFAULT 0,
                    CONSTRAINT chk_count CHECK (count >= 0)
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS audit_entries (
                    token_id INTEGER NOT NULL,
                    sequence_id INTEGER NOT NULL,
                    action TEXT NOT NULL,
                    actor TEXT NOT NULL,
                    timestamp INTEGER NOT NULL,
                    notes TEXT NOT NULL DEFAULT '',
                    PRIMARY KEY (token_id, sequence_id),
                    FOREIGN KEY (token_id) REFERENCES access_tokens(token_id),
                    CONSTRAINT chk_sequence CHECK (sequence_id >= 0)
                )
            """)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block as one atomic, serialized transaction

        Nested use joins the outer transaction. Any exception rolls the
        whole transaction back; sqlite3 errors are re-raised as
        LedgerStoreError. Callbacks registered with after_commit() run
        once the commit has succeeded, still under the store lock.
        """
        with self._lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield self._conn
                finally:
                    self._depth -= 1
                return

            try:
                self._conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                logger.error(f"Failed to open ledger transaction on {self.db_path}: {str(e)}")
                raise LedgerStoreError(f"Could not open transaction: {str(e)}")

            self._depth = 1
            try:
                yield self._conn
            except sqlite3.Error as e:
                self._conn.execute("ROLLBACK")
                logger.error(f"Ledger transaction rolled back: {str(e)}")
                raise LedgerStoreError(f"Ledger transaction failed: {str(e)}")
            except BaseException:
                self._conn.execute("ROLLBACK")
                raise
            else:
                try:
                    self._commit()
                except sqlite3.Error as e:
                    self._conn.execute("ROLLBACK")
                    logger.error(f"Ledger commit failed: {str(e)}")
                    raise LedgerStoreError(f"Ledger commit failed: {str(e)}")
                for callback in self._pending_callbacks:
                    callback()
            finally:
                self._depth = 0
                self._pending_callbacks = []

    def _commit(self) -> None:
        self._conn.execute("COMMIT")

    def after_commit(self, callback: Callable[[], None]) -> None:
        """
        Run a callback once the enclosing transaction commits

        Dropped if the transaction rolls back.

        Raises:
            RuntimeError: If called outside a transaction
        """
        with self._lock:
            if self._depth == 0:
                raise RuntimeError("after_commit() requires an open transaction")
            self._pending_callbacks.append(callback)

    @contextmanager
    def snapshot(self) -> Iterator[sqlite3.Connection]:
        """Consistent read access; waits for any in-flight transaction"""
        with self._lock:
            try:
                yield self._conn
            except sqlite3.Error as e:
                logger.error(f"Ledger read failed: {str(e)}")
                raise LedgerStoreError(f"Ledger read failed: {str(e)}")

    def close(self) -> None:
        with self._lock:
            self._conn.close()
