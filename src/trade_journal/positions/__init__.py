"""FIFO position tracking and position analytics for journaled trades."""

from trade_journal.positions._fifo_models import PositionCalculationResult
from trade_journal.positions.exceptions import InvalidTradeError, PositionTrackingError
from trade_journal.positions.grouping import GroupingValidationResult, validate_manual_grouping
from trade_journal.positions.metrics import (
    PositionFilter,
    PositionMetrics,
    PositionSummary,
    calculate_position_metrics,
    combine_summaries,
    filter_positions,
    summarize_positions_by_symbol,
)
from trade_journal.positions.models import (
    Position,
    PositionRole,
    PositionStatus,
    PositionTrade,
    TradeRecord,
    TradeType,
)
from trade_journal.positions.symbols import (
    AbbreviatingSymbolResolver,
    StaticSymbolResolver,
    TokenSymbolResolver,
)
from trade_journal.positions.tracker import (
    FifoPositionTracker,
    calculate_multi_wallet_positions,
    calculate_positions,
)

__all__ = [
    "AbbreviatingSymbolResolver",
    "FifoPositionTracker",
    "GroupingValidationResult",
    "InvalidTradeError",
    "Position",
    "PositionCalculationResult",
    "PositionFilter",
    "PositionMetrics",
    "PositionRole",
    "PositionStatus",
    "PositionSummary",
    "PositionTrackingError",
    "PositionTrade",
    "StaticSymbolResolver",
    "TokenSymbolResolver",
    "TradeRecord",
    "TradeType",
    "calculate_multi_wallet_positions",
    "calculate_position_metrics",
    "calculate_positions",
    "combine_summaries",
    "filter_positions",
    "summarize_positions_by_symbol",
    "validate_manual_grouping",
]
