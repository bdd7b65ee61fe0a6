"""
Core services for CarePass
"""

from .state_store import LedgerStateStore
from .token_store import TokenStore, OwnerCounterStore
from .audit_trail import AuditTrail
from .ledger_clock import LedgerClock, ManualLedgerClock
from .patient_registry import PatientRegistry, InMemoryPatientRegistry
from .permission_engine import PermissionEngine

__all__ = ['LedgerStateStore', 'TokenStore', 'OwnerCounterStore', 'AuditTrail', 'LedgerClock',
           'ManualLedgerClock', 'PatientRegistry', 'InMemoryPatientRegistry', 'PermissionEngine']
