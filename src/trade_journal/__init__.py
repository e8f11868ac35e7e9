"""
Trade Journal.

FIFO position tracking for journaled cryptocurrency trades.
"""

__version__ = "0.1.0"

from trade_journal.config import TrackerConfig
from trade_journal.positions import FifoPositionTracker, PositionCalculationResult, TradeRecord

# Configure structlog once at import time (quiet by default).
from trade_journal.logging import configure_structlog

configure_structlog()

__all__ = [
    "FifoPositionTracker",
    "PositionCalculationResult",
    "TrackerConfig",
    "TradeRecord",
    "__version__",
]
