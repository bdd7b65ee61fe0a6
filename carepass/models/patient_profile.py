"""
PatientProfile data model returned by the identity verification registry
"""

from dataclasses import dataclass, asdict, field
from typing import Dict, Any, List, Optional


VERIFIED = "verified"
PENDING = "pending"


@dataclass
class PatientProfile:
    """
    Registry view of a record owner

    Attributes:
        owner_id: Opaque record-owner identifier the profile is registered under
        registered_owner_account: Account allowed to act for the record owner
        verification_status: Verification state ("verified" once checked)
        registration_timestamp: Ledger time the profile was registered
        last_updated: Ledger time of the last profile change
        metadata: Free-text profile metadata
        verifier: Account that verified the profile, if any
        emergency_contacts: Accounts listed as emergency contacts
    """
    owner_id: str
    registered_owner_account: str
    verification_status: str = PENDING
    registration_timestamp: int = 0
    last_updated: int = 0
    metadata: str = ""
    verifier: Optional[str] = None
    emergency_contacts: List[str] = field(default_factory=list)

    def validate(self) -> bool:
        """Validate the PatientProfile instance"""
        if not self.owner_id or not isinstance(self.owner_id, str):
            return False
        if not self.registered_owner_account or not isinstance(self.registered_owner_account, str):
            return False
        if not self.verification_status or not isinstance(self.verification_status, str):
            return False
        if self.last_updated < self.registration_timestamp:
            return False
        if self.verifier is not None and not isinstance(self.verifier, str):
            return False
        return True

    def is_verified(self) -> bool:
        return self.verification_status == VERIFIED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PatientProfile':
        """Create PatientProfile from dictionary"""
        data = dict(data)
        data['emergency_contacts'] = list(data.get('emergency_contacts', []))
        return cls(**data)
