"""Filtering and aggregate statistics over calculated positions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003 - Required at runtime for pydantic
from decimal import Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from trade_journal.positions.models import PositionStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from trade_journal.positions.models import Position


class PositionFilter(BaseModel):
    """Criteria for selecting positions. Unset fields do not filter."""

    model_config = ConfigDict(frozen=True)

    wallet_address: str | None = None
    token: str | None = None
    symbol: str | None = None
    """Matched case-insensitively."""

    status: PositionStatus | None = None
    start_date: datetime | None = None
    """Inclusive lower bound on `open_date`."""

    end_date: datetime | None = None
    """Inclusive upper bound on `open_date`."""

    min_pnl: Decimal | None = None
    """Inclusive lower bound on realized + unrealized P&L."""

    max_pnl: Decimal | None = None
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)

    def matches(self, position: Position) -> bool:
        """Check whether a position satisfies every set criterion."""
        if self.wallet_address is not None and position.wallet_address != self.wallet_address:
            return False
        if self.token is not None and position.token != self.token:
            return False
        if self.symbol is not None and position.symbol.lower() != self.symbol.lower():
            return False
        if self.status is not None and position.status != self.status:
            return False
        if self.start_date is not None and position.open_date < self.start_date:
            return False
        if self.end_date is not None and position.open_date > self.end_date:
            return False
        if self.min_pnl is not None and position.total_pnl < self.min_pnl:
            return False
        return self.max_pnl is None or position.total_pnl <= self.max_pnl


def filter_positions(
    positions: Iterable[Position],
    position_filter: PositionFilter | None = None,
) -> list[Position]:
    """Apply a filter, then `offset`/`limit` paging, preserving input order."""
    if position_filter is None:
        return list(positions)

    selected = [p for p in positions if position_filter.matches(p)]
    end = None if position_filter.limit is None else position_filter.offset + position_filter.limit
    return selected[position_filter.offset : end]


@dataclass
class PositionMetrics:
    """Aggregate statistics across a set of positions."""

    total_positions: int = 0
    open_positions: int = 0
    closed_positions: int = 0
    total_realized_pnl: Decimal = Decimal(0)
    total_unrealized_pnl: Decimal = Decimal(0)
    total_net_pnl: Decimal = Decimal(0)
    win_rate: float = 0.0  # % of closed positions with positive realized P&L
    avg_duration_hours: float = 0.0  # closed positions only
    avg_position_size: Decimal = Decimal(0)  # quantity * avg entry price
    largest_win: Decimal = Decimal(0)
    largest_loss: Decimal = Decimal(0)
    total_fees: Decimal = Decimal(0)


def _avg_duration_hours(closed: Sequence[Position]) -> float:
    if not closed:
        return 0.0
    return sum(p.duration_hours or 0.0 for p in closed) / len(closed)


def _win_rate(closed: Sequence[Position]) -> float:
    if not closed:
        return 0.0
    return sum(1 for p in closed if p.realized_pnl > 0) / len(closed) * 100


def calculate_position_metrics(positions: Sequence[Position]) -> PositionMetrics:
    """Summarize positions into counts, P&L totals, win rate, and size/duration averages."""
    if not positions:
        return PositionMetrics()

    open_positions = [p for p in positions if p.status == PositionStatus.OPEN]
    closed_positions = [p for p in positions if p.status == PositionStatus.CLOSED]

    realized = sum((p.realized_pnl for p in positions), Decimal(0))
    unrealized = sum((p.unrealized_pnl for p in positions), Decimal(0))

    wins = [p.realized_pnl for p in closed_positions if p.realized_pnl > 0]
    losses = [p.realized_pnl for p in closed_positions if p.realized_pnl < 0]

    return PositionMetrics(
        total_positions=len(positions),
        open_positions=len(open_positions),
        closed_positions=len(closed_positions),
        total_realized_pnl=realized,
        total_unrealized_pnl=unrealized,
        total_net_pnl=realized + unrealized,
        win_rate=_win_rate(closed_positions),
        avg_duration_hours=_avg_duration_hours(closed_positions),
        avg_position_size=sum((p.cost_basis for p in positions), Decimal(0)) / len(positions),
        largest_win=max(wins) if wins else Decimal(0),
        largest_loss=min(losses) if losses else Decimal(0),
        total_fees=sum((p.fees for p in positions), Decimal(0)),
    )


@dataclass
class PositionSummary:
    """Per-symbol rollup of positions."""

    symbol: str
    total_positions: int
    open_positions: int
    total_realized_pnl: Decimal
    total_unrealized_pnl: Decimal
    win_rate: float
    avg_duration_hours: float
    total_volume: Decimal

    @property
    def closed_positions(self) -> int:
        return self.total_positions - self.open_positions

    @property
    def total_pnl(self) -> Decimal:
        return self.total_realized_pnl + self.total_unrealized_pnl


def _sort_by_total_pnl(summaries: Iterable[PositionSummary]) -> list[PositionSummary]:
    return sorted(summaries, key=lambda s: s.total_pnl, reverse=True)


def summarize_positions_by_symbol(positions: Iterable[Position]) -> list[PositionSummary]:
    """Group positions by symbol and summarize each group, best total P&L first."""
    by_symbol: dict[str, list[Position]] = {}
    for position in positions:
        by_symbol.setdefault(position.symbol, []).append(position)

    summaries: list[PositionSummary] = []
    for symbol, group in by_symbol.items():
        closed = [p for p in group if p.status == PositionStatus.CLOSED]
        summaries.append(
            PositionSummary(
                symbol=symbol,
                total_positions=len(group),
                open_positions=len(group) - len(closed),
                total_realized_pnl=sum((p.realized_pnl for p in group), Decimal(0)),
                total_unrealized_pnl=sum((p.unrealized_pnl for p in group), Decimal(0)),
                win_rate=_win_rate(closed),
                avg_duration_hours=_avg_duration_hours(closed),
                total_volume=sum((p.cost_basis for p in group), Decimal(0)),
            )
        )

    return _sort_by_total_pnl(summaries)


def combine_summaries(*summary_lists: Iterable[PositionSummary]) -> list[PositionSummary]:
    """
    Merge per-wallet summary lists by symbol.

    Counts and totals add up; win rate and average duration are weighted by the number
    of closed positions behind each input summary.
    """
    combined: dict[str, PositionSummary] = {}

    for summaries in summary_lists:
        for summary in summaries:
            existing = combined.get(summary.symbol)
            if existing is None:
                combined[summary.symbol] = PositionSummary(**vars(summary))
                continue

            closed_old = existing.closed_positions
            closed_new = summary.closed_positions
            closed_total = closed_old + closed_new
            if closed_total > 0:
                existing.win_rate = (
                    existing.win_rate * closed_old + summary.win_rate * closed_new
                ) / closed_total
                existing.avg_duration_hours = (
                    existing.avg_duration_hours * closed_old
                    + summary.avg_duration_hours * closed_new
                ) / closed_total

            existing.total_positions += summary.total_positions
            existing.open_positions += summary.open_positions
            existing.total_realized_pnl += summary.total_realized_pnl
            existing.total_unrealized_pnl += summary.total_unrealized_pnl
            existing.total_volume += summary.total_volume

    return _sort_by_total_pnl(combined.values())
