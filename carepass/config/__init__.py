"""
Configuration for CarePass
"""

from .settings import LedgerConfig, ledger_config, get_ledger_config, configure_logging

__all__ = ['LedgerConfig', 'ledger_config', 'get_ledger_config', 'configure_logging']
