"""
OwnerTokenCounter data model tracking the last token minted per record owner
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass
class OwnerTokenCounter:
    """
    Per-owner mint counter

    Attributes:
        record_owner_id: Opaque identifier of the record owner
        count: Token id of the most recent mint for this owner
    """
    record_owner_id: str
    count: int = 0

    @classmethod
    def create_new(cls, record_owner_id: str) -> 'OwnerTokenCounter':
        return cls(record_owner_id=record_owner_id, count=0)

    def validate(self) -> bool:
        """Validate the OwnerTokenCounter instance"""
        if not self.record_owner_id or not isinstance(self.record_owner_id, str):
            return False
        if not isinstance(self.count, int) or self.count < 0:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OwnerTokenCounter':
        return cls(**data)

    def record_mint(self, token_id: int) -> None:
        """Advance the counter to a newly minted token id"""
        if token_id <= self.count:
            raise ValueError(
                f"Counter for {self.record_owner_id} cannot move from {self.count} to {token_id}"
            )
        self.count = token_id
