"""
AccessToken data model for scope-limited, time-bound access to patient records
"""

from dataclasses import dataclass, asdict, field
from typing import Dict, Any, List


VALID_SCOPES = (
    "read-lab",
    "read-consult",
    "write-consult",
    "read-imaging",
    "emergency-access",
)
MAX_SCOPES = 5
MAX_TEXT_LENGTH = 200


def scopes_are_valid(scopes: List[str]) -> bool:
    """Check a requested scope list against the fixed scope enumeration"""
    if not isinstance(scopes, (list, tuple)):
        return False
    if len(scopes) > MAX_SCOPES:
        return False
    if not all(isinstance(scope, str) and scope in VALID_SCOPES for scope in scopes):
        return False
    return len(set(scopes)) == len(scopes)


@dataclass
class AccessToken:
    """
    Represents a transferable access token granted by a record owner

    Attributes:
        token_id: Ledger-wide identifier assigned at mint
        record_owner_id: Opaque identifier of the patient whose records are shared
        current_holder: Account currently entitled to use the token
        granted_to: Account the token was last issued or transferred to
        scopes: Ordered permission scopes covered by the token
        issued_at: Ledger time at mint
        expiry: Ledger time from which the token is no longer usable
        terms: Free-text terms attached by the owner
        active: False once the token has been revoked
    """
    token_id: int
    record_owner_id: str
    current_holder: str
    granted_to: str
    scopes: List[str] = field(default_factory=list)
    issued_at: int = 0
    expiry: int = 0
    terms: str = ""
    active: bool = True

    @classmethod
    def create_new(cls, token_id: int, record_owner_id: str, recipient: str,
                   scopes: List[str], issued_at: int, duration: int,
                   terms: str) -> 'AccessToken':
        """Create a freshly minted token held by the recipient"""
        return cls(
            token_id=token_id,
            record_owner_id=record_owner_id,
            current_holder=recipient,
            granted_to=recipient,
            scopes=list(scopes),
            issued_at=issued_at,
            expiry=issued_at + duration,
            terms=terms,
            active=True
        )

    def validate(self) -> bool:
        """Validate the AccessToken instance"""
        if not isinstance(self.token_id, int) or self.token_id <= 0:
            return False
        if not self.record_owner_id or not isinstance(self.record_owner_id, str):
            return False
        if not self.current_holder or not isinstance(self.current_holder, str):
            return False
        if not self.granted_to or not isinstance(self.granted_to, str):
            return False
        if not scopes_are_valid(self.scopes):
            return False
        if not isinstance(self.issued_at, int) or not isinstance(self.expiry, int):
            return False
        if self.expiry <= self.issued_at:
            return False
        if not isinstance(self.terms, str) or len(self.terms) > MAX_TEXT_LENGTH:
            return False
        if not isinstance(self.active, bool):
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        data = asdict(self)
        data['scopes'] = list(self.scopes)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AccessToken':
        """Create AccessToken from dictionary"""
        data = dict(data)
        data['scopes'] = list(data.get('scopes', []))
        data['active'] = bool(data.get('active', True))
        return cls(**data)

    def is_expired(self, now: int) -> bool:
        """Check if the token is past its expiry at the given ledger time"""
        return now >= self.expiry

    def is_usable(self, now: int) -> bool:
        """Check if the token is usable (active and not expired)"""
        return self.active and not self.is_expired(now)

    def is_held_by(self, account: str) -> bool:
        return self.current_holder == account
