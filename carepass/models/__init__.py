"""
Core data models for CarePass
"""

from .access_token import AccessToken, VALID_SCOPES, MAX_SCOPES, MAX_TEXT_LENGTH
from .audit_entry import AuditEntry, AuditAction
from .token_counter import OwnerTokenCounter
from .patient_profile import PatientProfile
from .result import Result, ErrorCode

__all__ = [
    "AccessToken",
    "AuditEntry",
    "AuditAction",
    "OwnerTokenCounter",
    "PatientProfile",
    "Result",
    "ErrorCode",
    "VALID_SCOPES",
    "MAX_SCOPES",
    "MAX_TEXT_LENGTH"
]
