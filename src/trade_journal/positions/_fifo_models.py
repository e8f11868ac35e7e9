"""Internal data models for FIFO position tracking.

These dataclasses are used by the tracker and represent:
- Classifier output (ClassifiedTrade)
- FIFO lot tracking (Lot, LotFragment, Consumption)
- Calculation output bundle (PositionCalculationResult)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from trade_journal.positions.models import PositionStatus

if TYPE_CHECKING:
    from datetime import datetime

    from trade_journal.positions.models import Position, PositionTrade


@dataclass(frozen=True)
class ClassifiedTrade:
    """What a trade does to inventory: which token, how much, at what unit price."""

    token: str
    quantity: Decimal
    price: Decimal
    is_buy: bool


@dataclass
class Lot:
    """Open FIFO lot for one (wallet, token) pair.

    `quantity` and `fees` shrink as later sells consume the lot; `price`,
    `trade_id` and `timestamp` never change.
    """

    quantity: Decimal
    price: Decimal
    fees: Decimal
    trade_id: str
    timestamp: datetime

    @property
    def cost(self) -> Decimal:
        return self.quantity * self.price


@dataclass(frozen=True)
class LotFragment:
    """The part of a lot taken by one sell."""

    quantity: Decimal
    price: Decimal
    fees: Decimal
    trade_id: str
    timestamp: datetime

    @property
    def cost(self) -> Decimal:
        return self.quantity * self.price


@dataclass
class Consumption:
    """Result of consuming a quantity from a FIFO queue."""

    fragments: list[LotFragment] = field(default_factory=list)
    shortfall: Decimal = Decimal(0)

    @property
    def quantity(self) -> Decimal:
        return sum((f.quantity for f in self.fragments), Decimal(0))

    @property
    def cost_basis(self) -> Decimal:
        return sum((f.cost for f in self.fragments), Decimal(0))

    @property
    def fees(self) -> Decimal:
        return sum((f.fees for f in self.fragments), Decimal(0))

    @property
    def is_oversold(self) -> bool:
        return self.shortfall > 0


@dataclass
class PositionCalculationResult:
    """Positions, position-trade links, and diagnostics from one calculation."""

    positions: list[Position] = field(default_factory=list)
    position_trades: list[PositionTrade] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def open_positions(self) -> list[Position]:
        return [p for p in self.positions if p.status == PositionStatus.OPEN]

    @property
    def closed_positions(self) -> list[Position]:
        return [p for p in self.positions if p.status == PositionStatus.CLOSED]

    def trades_for_position(self, position_id: str) -> list[PositionTrade]:
        """Return the links belonging to one position, in emission order."""
        return [pt for pt in self.position_trades if pt.position_id == position_id]

    def merge(self, other: PositionCalculationResult) -> None:
        """Append another result's contents to this one."""
        self.positions.extend(other.positions)
        self.position_trades.extend(other.position_trades)
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
