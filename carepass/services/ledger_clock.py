"""
Ledger clock abstraction - a monotonically non-decreasing time counter
"""

from abc import ABC, abstractmethod
import threading
import logging


logger = logging.getLogger(__name__)


class LedgerClock(ABC):
    """Source of ledger time used for issuance and expiry"""

    @abstractmethod
    def now(self) -> int:
        """Current ledger time"""

    @abstractmethod
    def advance(self, units: int = 1) -> int:
        """Move ledger time forward and return the new time"""


class ManualLedgerClock(LedgerClock):
    """
    Clock driven explicitly by its owner, like a block height

    Args:
        start: Initial ledger time
    """

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError("Ledger time cannot be negative")
        self._time = start
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            return self._time

    def advance(self, units: int = 1) -> int:
        if units < 0:
            raise ValueError("Ledger time cannot move backwards")
        with self._lock:
            self._time += units
            logger.debug(f"Ledger time advanced to {self._time}")
            return self._time
