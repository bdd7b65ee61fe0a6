"""
Tagged success/failure result returned by every PermissionEngine operation
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

from ..utils.errors import ResultError


class ErrorCode(IntEnum):
    """Business-rule failures, numbered as on the ledger"""
    NOT_OWNER = 200
    NOT_TOKEN_HOLDER = 201
    INVALID_OWNER = 202
    INVALID_SCOPE = 203
    TOKEN_NOT_FOUND = 204
    TOKEN_EXPIRED = 205
    UNAUTHORIZED = 206
    INVALID_DURATION = 207
    INVALID_RECIPIENT = 208


@dataclass(frozen=True)
class Result:
    """
    Outcome of an engine operation

    Attributes:
        ok: True on success
        value: Operation value on success, None on failure
        error: Failure code, None on success
    """
    ok: bool
    value: Any = None
    error: Optional[ErrorCode] = None

    @classmethod
    def success(cls, value: Any = True) -> 'Result':
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorCode) -> 'Result':
        return cls(ok=False, error=error)

    def unwrap(self) -> Any:
        """Return the value, raising ResultError for a failed result"""
        if not self.ok:
            raise ResultError(self.error)
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: failures carry the numeric error code as their value"""
        if self.ok:
            value = self.value
            if hasattr(value, 'to_dict'):
                value = value.to_dict()
            return {'ok': True, 'value': value}
        return {'ok': False, 'value': int(self.error)}

    def __bool__(self) -> bool:
        return self.ok
