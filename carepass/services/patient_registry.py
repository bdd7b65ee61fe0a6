"""
Patient registry interface - the identity verification oracle consulted by
the permission engine
"""

from abc import ABC, abstractmethod
from dataclasses import replace
import threading
from typing import Dict, List, Optional
import logging

from ..models.patient_profile import PatientProfile, VERIFIED, PENDING


logger = logging.getLogger(__name__)


class PatientRegistry(ABC):
    """
    Read-only view of the identity verification service

    Implementations must be side-effect free. An unreachable backend is
    reported by raising IdentityOracleError, never by returning None.
    """

    @abstractmethod
    def resolve_owner_profile(self, owner_id: str) -> Optional[PatientProfile]:
        """Profile registered for the record owner, or None if unknown"""

    @abstractmethod
    def is_verified(self, owner_id: str) -> bool:
        """True if the record owner's identity has been verified"""


class InMemoryPatientRegistry(PatientRegistry):
    """Registry kept in process memory, for local setups and tests"""

    def __init__(self):
        self._profiles: Dict[str, PatientProfile] = {}
        self._lock = threading.Lock()

    def register_patient(self, owner_id: str, owner_account: str, metadata: str = "",
                         registered_at: int = 0,
                         emergency_contacts: List[str] = None) -> PatientProfile:
        """
        Register a record owner pending verification

        Raises:
            ValueError: If the owner id is empty or already registered
        """
        if not owner_id or not owner_id.strip():
            raise ValueError("Owner ID cannot be empty")
        if not owner_account or not owner_account.strip():
            raise ValueError("Owner account cannot be empty")

        profile = PatientProfile(
            owner_id=owner_id,
            registered_owner_account=owner_account,
            verification_status=PENDING,
            registration_timestamp=registered_at,
            last_updated=registered_at,
            metadata=metadata,
            emergency_contacts=list(emergency_contacts or [])
        )

        with self._lock:
            if owner_id in self._profiles:
                raise ValueError(f"Patient already registered: {owner_id}")
            self._profiles[owner_id] = profile

        logger.info(f"Registered patient {owner_id} for account {owner_account}")
        return profile

    def set_profile(self, profile: PatientProfile) -> None:
        """Insert or replace a profile as-is"""
        if not profile.validate():
            raise ValueError(f"Invalid patient profile: {profile.owner_id}")
        with self._lock:
            self._profiles[profile.owner_id] = profile

    def set_verification_status(self, owner_id: str, status: str, verifier: str = None,
                                updated_at: int = None) -> PatientProfile:
        """
        Record the outcome of an identity check

        Raises:
            ValueError: If the owner is not registered
        """
        with self._lock:
            profile = self._profiles.get(owner_id)
            if profile is None:
                raise ValueError(f"Patient not found: {owner_id}")
            updated = replace(
                profile,
                verification_status=status,
                verifier=verifier,
                last_updated=profile.last_updated if updated_at is None else updated_at
            )
            self._profiles[owner_id] = updated

        logger.info(f"Patient {owner_id} verification status set to {status}")
        return updated

    def verify_patient(self, owner_id: str, verifier: str, updated_at: int = None) -> PatientProfile:
        return self.set_verification_status(owner_id, VERIFIED, verifier=verifier,
                                            updated_at=updated_at)

    def resolve_owner_profile(self, owner_id: str) -> Optional[PatientProfile]:
        with self._lock:
            profile = self._profiles.get(owner_id)
        return PatientProfile.from_dict(profile.to_dict()) if profile else None

    def is_verified(self, owner_id: str) -> bool:
        with self._lock:
            profile = self._profiles.get(owner_id)
        return profile is not None and profile.is_verified()
