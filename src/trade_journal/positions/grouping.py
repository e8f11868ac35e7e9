"""Integrity checks for user-overridden trade-to-position groupings."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from trade_journal.constants import MAX_TOKENS_PER_GROUP

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from trade_journal.positions.models import TradeRecord


class GroupingValidationResult(BaseModel):
    """Result of validating a manual grouping."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: list[str] = Field(default_factory=list)


def validate_manual_grouping(
    trades: Sequence[TradeRecord],
    grouping: Mapping[str, Sequence[str]],
) -> GroupingValidationResult:
    """
    Validate a caller-supplied `position_id -> [trade_id, ...]` grouping.

    Checks:
    - Coverage: every trade appears in exactly one group. Missing and duplicated trade
      ids are reported as separate errors; ids that match no trade are reported too.
    - Token consistency: a group's trades touch at most two distinct tokens
      (union of `token_in` and `token_out`).
    - Chronology: within a group, trades listed in order have non-decreasing
      `block_time`.

    Does not touch FIFO state.
    """
    errors: list[str] = []
    trades_by_id = {trade.id: trade for trade in trades}

    grouped_ids = [trade_id for trade_ids in grouping.values() for trade_id in trade_ids]
    grouped_counts = Counter(grouped_ids)

    missing = [trade.id for trade in trades if trade.id not in grouped_counts]
    duplicates = [trade_id for trade_id, count in grouped_counts.items() if count > 1]
    unknown = [trade_id for trade_id in grouped_counts if trade_id not in trades_by_id]

    if missing:
        errors.append(f"Missing trades in grouping: {', '.join(missing)}")
    if duplicates:
        errors.append(f"Duplicate trades in grouping: {', '.join(duplicates)}")
    if unknown:
        errors.append(f"Unknown trades in grouping: {', '.join(unknown)}")

    for position_id, trade_ids in grouping.items():
        group_trades = [trades_by_id[tid] for tid in trade_ids if tid in trades_by_id]

        tokens: list[str] = []
        for trade in group_trades:
            for token in (trade.token_in, trade.token_out):
                if token and token not in tokens:
                    tokens.append(token)
        if len(tokens) > MAX_TOKENS_PER_GROUP:
            errors.append(
                f"Position {position_id} contains inconsistent tokens: {', '.join(tokens)}"
            )

        in_order = all(
            earlier.block_time <= later.block_time
            for earlier, later in zip(group_trades, group_trades[1:], strict=False)
        )
        if not in_order:
            errors.append(f"Position {position_id} has trades in non-chronological order")

    return GroupingValidationResult(valid=not errors, errors=errors)
