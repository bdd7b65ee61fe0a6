"""
Ledger configuration for CarePass
Values come from the environment, optionally populated from a .env file
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _read_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


class LedgerConfig:
    """Ledger configuration manager"""

    def __init__(self):
        self.db_path = os.getenv('CAREPASS_DB_PATH', 'carepass_ledger.db')
        self.genesis_height = _read_int('CAREPASS_GENESIS_HEIGHT', 0)
        self.auto_advance_clock = _read_bool('CAREPASS_AUTO_ADVANCE_CLOCK', True)
        self.log_level = os.getenv('CAREPASS_LOG_LEVEL', 'INFO').upper()

        if self.genesis_height < 0:
            raise ValueError("CAREPASS_GENESIS_HEIGHT cannot be negative")

    def is_in_memory(self) -> bool:
        """Check if the ledger lives in an in-memory SQLite database"""
        return self.db_path == ':memory:'

    def as_dict(self) -> dict:
        return {
            'db_path': self.db_path,
            'genesis_height': self.genesis_height,
            'auto_advance_clock': self.auto_advance_clock,
            'log_level': self.log_level
        }


# Global ledger config instance
ledger_config = LedgerConfig()


def get_ledger_config() -> LedgerConfig:
    """Get the ledger configuration - use this in your services"""
    return ledger_config


def configure_logging(level: str = None) -> None:
    """Configure root logging for CarePass processes"""
    level_name = (level or ledger_config.log_level).upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.debug(f"Logging configured at {level_name}")
