"""
AuditEntry data model for the append-only per-token audit trail
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any

from .access_token import MAX_TEXT_LENGTH


class AuditAction(str, Enum):
    """Actions recorded against a token"""
    MINTED = "minted"
    TRANSFERRED = "transferred"
    REVOKED = "revoked"
    ACCESSED = "accessed"


@dataclass
class AuditEntry:
    """
    Represents one immutable, sequenced event on an access token

    Attributes:
        token_id: Token the event belongs to
        sequence_id: Zero-based position of the event in the token's trail
        action: What happened to the token
        actor: Account that performed the action
        timestamp: Ledger time of the action
        notes: Free-text annotation (terms on mint, new holder on transfer)
    """
    token_id: int
    sequence_id: int
    action: AuditAction
    actor: str
    timestamp: int
    notes: str = ""

    def validate(self) -> bool:
        """Validate the AuditEntry instance"""
        if not isinstance(self.token_id, int) or self.token_id <= 0:
            return False
        if not isinstance(self.sequence_id, int) or self.sequence_id < 0:
            return False
        if not isinstance(self.action, AuditAction):
            return False
        if not self.actor or not isinstance(self.actor, str):
            return False
        if not isinstance(self.timestamp, int) or self.timestamp < 0:
            return False
        if not isinstance(self.notes, str) or len(self.notes) > MAX_TEXT_LENGTH:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        data = asdict(self)
        data['action'] = self.action.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuditEntry':
        """Create AuditEntry from dictionary"""
        data = dict(data)
        data['action'] = AuditAction(data['action'])
        return cls(**data)
