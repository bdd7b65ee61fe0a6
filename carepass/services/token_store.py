"""
Token and per-owner counter tables of the ledger state store
"""

import json
import sqlite3
from typing import Optional
import logging

from ..models.access_token import AccessToken
from ..models.token_counter import OwnerTokenCounter


logger = logging.getLogger(__name__)


class TokenStore:
    """
    Data access for access tokens

    Methods take the connection of the caller's transaction so reads and
    writes made by one engine operation commit or roll back together.
    """

    def _row_to_access_token(self, row) -> AccessToken:
        """Convert database row to AccessToken instance"""
        return AccessToken(
            token_id=row['token_id'],
            record_owner_id=row['record_owner_id'],
            current_holder=row['current_holder'],
            granted_to=row['granted_to'],
            scopes=json.loads(row['scopes']),
            issued_at=row['issued_at'],
            expiry=row['expiry'],
            terms=row['terms'],
            active=bool(row['active'])
        )

    def get(self, conn: sqlite3.Connection, token_id: int) -> Optional[AccessToken]:
        cursor = conn.execute("""
            SELECT * FROM access_tokens WHERE token_id = ?
        """, (token_id,))
        row = cursor.fetchone()
        return self._row_to_access_token(row) if row else None

    def next_token_id(self, conn: sqlite3.Connection) -> int:
        """Next ledger-wide token id (ids are never reused)"""
        cursor = conn.execute("SELECT COALESCE(MAX(token_id), 0) FROM access_tokens")
        return cursor.fetchone()[0] + 1

    def insert(self, conn: sqlite3.Connection, token: AccessToken) -> None:
        if not token.validate():
            raise ValueError(f"Refusing to store invalid token {token.token_id}")

        conn.execute("""
            INSERT INTO access_tokens
            (token_id, record_owner_id, current_holder, granted_to, scopes,
             issued_at, expiry, terms, active)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            token.token_id,
            token.record_owner_id,
            token.current_holder,
            token.granted_to,
            json.dumps(token.scopes),
            token.issued_at,
            token.expiry,
            token.terms,
            1 if token.active else 0
        ))
        logger.debug(f"Stored token {token.token_id} for owner {token.record_owner_id}")

    def set_holder(self, conn: sqlite3.Connection, token_id: int, new_holder: str) -> None:
        """Move the token to a new holder; granted_to follows the holder"""
        conn.execute("""
            UPDATE access_tokens
            SET current_holder = ?, granted_to = ?
            WHERE token_id = ?
        """, (new_holder, new_holder, token_id))

    def deactivate(self, conn: sqlite3.Connection, token_id: int) -> None:
        # one-way: nothing ever sets active back to 1
        conn.execute("""
            UPDATE access_tokens
            SET active = 0
            WHERE token_id = ?
        """, (token_id,))


class OwnerCounterStore:
    """Data access for the per-owner mint counters"""

    def get(self, conn: sqlite3.Connection, record_owner_id: str) -> OwnerTokenCounter:
        """Counter for an owner; a zero counter when the owner never minted"""
        cursor = conn.execute("""
            SELECT record_owner_id, count FROM owner_token_counters
            WHERE record_owner_id = ?
        """, (record_owner_id,))
        row = cursor.fetchone()
        if not row:
            return OwnerTokenCounter.create_new(record_owner_id)
        return OwnerTokenCounter(record_owner_id=row['record_owner_id'], count=row['count'])

    def save(self, conn: sqlite3.Connection, counter: OwnerTokenCounter) -> None:
        if not counter.validate():
            raise ValueError(f"Refusing to store invalid counter for {counter.record_owner_id}")

        conn.execute("""
            INSERT INTO owner_token_counters (record_owner_id, count)
            VALUES (?, ?)
            ON CONFLICT(record_owner_id) DO UPDATE SET count = excluded.count
            WHERE excluded.count > owner_token_counters.count
        """, (counter.record_owner_id, counter.count))
