"""
Exception hierarchy for infrastructure failures

Business-rule violations are never raised; they are returned as
failed Results carrying an ErrorCode.
"""


class CarePassError(RuntimeError):
    """Base class for CarePass infrastructure errors"""
    pass


class LedgerStoreError(CarePassError):
    """The ledger state store could not complete an operation"""
    pass


class IdentityOracleError(CarePassError):
    """The identity verification registry could not be reached"""
    pass


class ResultError(CarePassError):
    """Raised when unwrapping a failed Result"""

    def __init__(self, code):
        self.code = code
        super().__init__(f"Operation failed with {code.name} ({code.value})")
