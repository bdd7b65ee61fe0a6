"""
Append-only audit trail for CarePass access tokens
"""

import sqlite3
from typing import List, Optional
import logging

from ..models.audit_entry import AuditEntry, AuditAction
from ..models.access_token import MAX_TEXT_LENGTH


logger = logging.getLogger(__name__)


class AuditTrail:
    """
    Per-token audit log with contiguous, zero-based sequence ids

    Entries are only ever inserted. The next sequence id is the number of
    entries already stored for the token, read inside the same transaction
    as the insert; the (token_id, sequence_id) primary key turns any
    collision into an error instead of a silently dropped entry.
    """

    def _row_to_audit_entry(self, row) -> AuditEntry:
        """Convert database row to AuditEntry instance"""
        return AuditEntry(
            token_id=row['token_id'],
            sequence_id=row['sequence_id'],
            action=AuditAction(row['action']),
            actor=row['actor'],
            timestamp=row['timestamp'],
            notes=row['notes']
        )

    def count_entries(self, conn: sqlite3.Connection, token_id: int) -> int:
        cursor = conn.execute("""
            SELECT COUNT(*) FROM audit_entries WHERE token_id = ?
        """, (token_id,))
        return cursor.fetchone()[0]

    def append(self, conn: sqlite3.Connection, token_id: int, action: AuditAction,
               actor: str, timestamp: int, notes: str = "") -> AuditEntry:
        """
        Append an entry at the token's next sequence id

        Args:
            conn: Connection of the enclosing ledger transaction
            token_id: Token the event belongs to
            action: Action performed
            actor: Account that performed the action
            timestamp: Ledger time of the action
            notes: Free-text annotation

        Returns:
            The stored AuditEntry

        Raises:
            ValueError: If the entry is malformed
        """
        entry = AuditEntry(
            token_id=token_id,
            sequence_id=self.count_entries(conn, token_id),
            action=action,
            actor=actor,
            timestamp=timestamp,
            notes=notes
        )
        if not entry.validate():
            raise ValueError(
                f"Invalid audit entry for token {token_id}: notes limited to {MAX_TEXT_LENGTH} characters"
            )

        conn.execute("""
            INSERT INTO audit_entries
            (token_id, sequence_id, action, actor, timestamp, notes)
            VALUES (?, ?, ?, ?, ?, ?)
        """, (
            entry.token_id,
            entry.sequence_id,
            entry.action.value,
            entry.actor,
            entry.timestamp,
            entry.notes
        ))

        logger.debug(f"Audit entry {token_id}/{entry.sequence_id} recorded: {action.value} by {actor}")
        return entry

    def get_entry(self, conn: sqlite3.Connection, token_id: int,
                  sequence_id: int) -> Optional[AuditEntry]:
        cursor = conn.execute("""
            SELECT * FROM audit_entries
            WHERE token_id = ? AND sequence_id = ?
        """, (token_id, sequence_id))
        row = cursor.fetchone()
        return self._row_to_audit_entry(row) if row else None

    def list_entries(self, conn: sqlite3.Connection, token_id: int) -> List[AuditEntry]:
        """All entries for a token in sequence order"""
        cursor = conn.execute("""
            SELECT * FROM audit_entries
            WHERE token_id = ?
            ORDER BY sequence_id
        """, (token_id,))
        return [self._row_to_audit_entry(row) for row in cursor.fetchall()]
