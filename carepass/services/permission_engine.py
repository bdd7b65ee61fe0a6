"""
Permission Engine for CarePass - mints, revokes, transfers and audits
access tokens over patient records
"""

from typing import List, Optional
import logging

from ..config.settings import LedgerConfig, get_ledger_config
from ..models.access_token import AccessToken, MAX_TEXT_LENGTH, scopes_are_valid
from ..models.audit_entry import AuditEntry, AuditAction
from ..models.patient_profile import PatientProfile
from ..models.result import Result, ErrorCode
from ..utils.errors import IdentityOracleError
from .audit_trail import AuditTrail
from .ledger_clock import LedgerClock, ManualLedgerClock
from .patient_registry import PatientRegistry
from .state_store import LedgerStateStore
from .token_store import TokenStore, OwnerCounterStore


logger = logging.getLogger(__name__)


class PermissionEngine:
    """
    Orchestrates the access-token lifecycle

    Every mutating operation runs inside one ledger transaction covering the
    registry checks, the token and counter writes and the audit append.
    Business-rule violations come back as failed Results; only
    infrastructure problems (store or registry failures) raise.
    """

    def __init__(self, state_store: LedgerStateStore, patient_registry: PatientRegistry,
                 clock: LedgerClock, auto_advance_clock: bool = True):
        """
        Initialize the permission engine

        Args:
            state_store: Shared ledger state store
            patient_registry: Identity verification oracle
            clock: Source of ledger time
            auto_advance_clock: Advance the clock one unit after each
                committed mutation, as block production does on the ledger
        """
        self.state_store = state_store
        self.patient_registry = patient_registry
        self.clock = clock
        self.auto_advance_clock = auto_advance_clock

        self.tokens = TokenStore()
        self.counters = OwnerCounterStore()
        self.audit_trail = AuditTrail()

    @classmethod
    def from_config(cls, patient_registry: PatientRegistry, config: LedgerConfig = None,
                    clock: LedgerClock = None) -> 'PermissionEngine':
        """Build an engine from ledger configuration"""
        config = config or get_ledger_config()
        state_store = LedgerStateStore(db_path=config.db_path)
        clock = clock or ManualLedgerClock(start=config.genesis_height)
        return cls(
            state_store=state_store,
            patient_registry=patient_registry,
            clock=clock,
            auto_advance_clock=config.auto_advance_clock
        )

    def _resolve_profile(self, owner_id: str) -> Optional[PatientProfile]:
        try:
            return self.patient_registry.resolve_owner_profile(owner_id)
        except IdentityOracleError as e:
            logger.error(f"Patient registry unavailable while resolving {owner_id}: {str(e)}")
            raise

    def _is_verified(self, owner_id: str) -> bool:
        try:
            return self.patient_registry.is_verified(owner_id)
        except IdentityOracleError as e:
            logger.error(f"Patient registry unavailable while verifying {owner_id}: {str(e)}")
            raise

    def _reject(self, operation: str, subject: str, code: ErrorCode) -> Result:
        logger.info(f"{operation} rejected for {subject}: {code.name}")
        return Result.failure(code)

    def _is_valid_account(self, account) -> bool:
        # transfer records the new holder as audit notes, so the notes cap applies
        return isinstance(account, str) and 0 < len(account.strip()) and len(account) <= MAX_TEXT_LENGTH

    def _tick(self) -> None:
        if self.auto_advance_clock:
            self.clock.advance(1)

    def _check_holder(self, token: Optional[AccessToken], caller: str, now: int) -> Optional[ErrorCode]:
        """Shared guards of transfer and log-access"""
        if token is None:
            return ErrorCode.TOKEN_NOT_FOUND
        if not token.is_held_by(caller):
            return ErrorCode.NOT_TOKEN_HOLDER
        if not token.is_usable(now):
            return ErrorCode.TOKEN_EXPIRED
        return None

    async def mint_token(self, caller: str, record_owner_id: str, recipient: str,
                         scopes: List[str], duration: int, terms: str) -> Result:
        """
        Mint a new access token on behalf of a verified record owner

        Args:
            caller: Account requesting the mint (must be the registered owner)
            record_owner_id: Record owner the token grants access to
            recipient: Account that will hold the token
            scopes: Permission scopes granted (at most 5)
            duration: Ledger-time units the token stays usable
            terms: Free-text terms, at most 200 characters

        Returns:
            Result carrying the new token id
        """
        with self.state_store.transaction() as conn:
            profile = self._resolve_profile(record_owner_id)
            if profile is None:
                return self._reject("Mint", record_owner_id, ErrorCode.INVALID_OWNER)
            if profile.registered_owner_account != caller:
                return self._reject("Mint", record_owner_id, ErrorCode.NOT_OWNER)
            if not self._is_verified(record_owner_id):
                return self._reject("Mint", record_owner_id, ErrorCode.INVALID_OWNER)
            if not scopes_are_valid(scopes):
                return self._reject("Mint", record_owner_id, ErrorCode.INVALID_SCOPE)
            if duration <= 0:
                return self._reject("Mint", record_owner_id, ErrorCode.INVALID_DURATION)
            # over-long terms share the duration code
            if len(terms) > MAX_TEXT_LENGTH:
                return self._reject("Mint", record_owner_id, ErrorCode.INVALID_DURATION)
            if recipient == caller or not self._is_valid_account(recipient):
                return self._reject("Mint", record_owner_id, ErrorCode.INVALID_RECIPIENT)

            now = self.clock.now()
            token_id = self.tokens.next_token_id(conn)
            token = AccessToken.create_new(
                token_id=token_id,
                record_owner_id=record_owner_id,
                recipient=recipient,
                scopes=scopes,
                issued_at=now,
                duration=duration,
                terms=terms
            )
            self.tokens.insert(conn, token)

            counter = self.counters.get(conn, record_owner_id)
            counter.record_mint(token_id)
            self.counters.save(conn, counter)

            self.audit_trail.append(conn, token_id, AuditAction.MINTED, caller, now, terms)
            self.state_store.after_commit(self._tick)

        logger.info(f"Minted token {token_id} for owner {record_owner_id} to {recipient}, "
                    f"expires at {token.expiry}")
        return Result.success(token_id)

    async def revoke_token(self, caller: str, token_id: int) -> Result:
        """
        Permanently deactivate a token

        Either the record owner's registered account or the current holder
        may revoke.
        """
        with self.state_store.transaction() as conn:
            token = self.tokens.get(conn, token_id)
            if token is None:
                return self._reject("Revoke", f"token {token_id}", ErrorCode.TOKEN_NOT_FOUND)

            profile = self._resolve_profile(token.record_owner_id)
            if profile is None:
                return self._reject("Revoke", f"token {token_id}", ErrorCode.INVALID_OWNER)
            if caller not in (profile.registered_owner_account, token.current_holder):
                return self._reject("Revoke", f"token {token_id}", ErrorCode.UNAUTHORIZED)

            now = self.clock.now()
            if not token.is_usable(now):
                return self._reject("Revoke", f"token {token_id}", ErrorCode.TOKEN_EXPIRED)

            self.tokens.deactivate(conn, token_id)
            self.audit_trail.append(conn, token_id, AuditAction.REVOKED, caller, now, "")
            self.state_store.after_commit(self._tick)

        logger.info(f"Revoked token {token_id} by {caller}")
        return Result.success(True)

    async def transfer_token(self, caller: str, token_id: int, new_holder: str) -> Result:
        """
        Hand a token to a new holder

        The record owner's registered account can never become a holder.
        """
        with self.state_store.transaction() as conn:
            token = self.tokens.get(conn, token_id)
            now = self.clock.now()
            code = self._check_holder(token, caller, now)
            if code is not None:
                return self._reject("Transfer", f"token {token_id}", code)

            profile = self._resolve_profile(token.record_owner_id)
            if (profile is None or not self._is_valid_account(new_holder)
                    or profile.registered_owner_account == new_holder):
                return self._reject("Transfer", f"token {token_id}", ErrorCode.INVALID_RECIPIENT)

            self.tokens.set_holder(conn, token_id, new_holder)
            self.audit_trail.append(conn, token_id, AuditAction.TRANSFERRED, caller, now, new_holder)
            self.state_store.after_commit(self._tick)

        logger.info(f"Transferred token {token_id} from {caller} to {new_holder}")
        return Result.success(True)

    async def log_access(self, caller: str, token_id: int, notes: str = "") -> Result:
        """
        Record that the holder actually read the records covered by a token

        Record storage calls this before releasing decrypted content.
        """
        with self.state_store.transaction() as conn:
            token = self.tokens.get(conn, token_id)
            now = self.clock.now()
            code = self._check_holder(token, caller, now)
            if code is not None:
                return self._reject("Access log", f"token {token_id}", code)
            if len(notes) > MAX_TEXT_LENGTH:
                return self._reject("Access log", f"token {token_id}", ErrorCode.INVALID_DURATION)

            entry = self.audit_trail.append(conn, token_id, AuditAction.ACCESSED, caller, now, notes)
            self.state_store.after_commit(self._tick)

        logger.info(f"Access on token {token_id} by {caller} logged at sequence {entry.sequence_id}")
        return Result.success(True)

    async def get_token_details(self, token_id: int) -> Optional[AccessToken]:
        with self.state_store.snapshot() as conn:
            return self.tokens.get(conn, token_id)

    async def get_token_count(self, record_owner_id: str) -> int:
        """Last token id minted for the owner, 0 if none"""
        with self.state_store.snapshot() as conn:
            return self.counters.get(conn, record_owner_id).count

    async def get_audit_entry(self, token_id: int, sequence_id: int) -> Optional[AuditEntry]:
        with self.state_store.snapshot() as conn:
            return self.audit_trail.get_entry(conn, token_id, sequence_id)

    async def get_audit_trail(self, token_id: int) -> List[AuditEntry]:
        """Every audit entry of a token in sequence order"""
        with self.state_store.snapshot() as conn:
            return self.audit_trail.list_entries(conn, token_id)

    async def has_access(self, token_id: int, account: str) -> bool:
        """
        Check if an account may currently use a token

        Returns:
            True if the account holds the token and it is active and unexpired
        """
        with self.state_store.snapshot() as conn:
            token = self.tokens.get(conn, token_id)
            if token is None:
                return False
            return token.is_held_by(account) and token.is_usable(self.clock.now())

    async def get_token_scopes(self, token_id: int) -> Result:
        with self.state_store.snapshot() as conn:
            token = self.tokens.get(conn, token_id)
        if token is None:
            return Result.failure(ErrorCode.TOKEN_NOT_FOUND)
        return Result.success(list(token.scopes))
