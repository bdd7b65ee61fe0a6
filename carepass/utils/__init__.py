"""
Utility functions and helpers for CarePass
"""

from .errors import CarePassError, LedgerStoreError, IdentityOracleError, ResultError

__all__ = ['CarePassError', 'LedgerStoreError', 'IdentityOracleError', 'ResultError']
