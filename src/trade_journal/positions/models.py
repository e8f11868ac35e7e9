"""Pydantic models for trade records and the positions derived from them."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class TradeType(str, Enum):
    """Kind of trade execution."""

    BUY = "buy"
    SELL = "sell"
    SWAP = "swap"


class PositionStatus(str, Enum):
    """Lifecycle state of a position."""

    OPEN = "open"
    CLOSED = "closed"


class PositionRole(str, Enum):
    """Whether a linked trade opened or closed (part of) a position."""

    ENTRY = "entry"
    EXIT = "exit"


class TradeRecord(BaseModel):
    """One parsed, priced trade execution as supplied by the import pipeline.

    Field aliases accept the camelCase names used by the web application's JSON.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    """Unique trade identifier."""

    wallet_address: str = Field(validation_alias=AliasChoices("wallet_address", "walletAddress"))
    """Wallet that executed the trade."""

    type: TradeType
    """buy, sell, or swap."""

    token_in: str = Field(validation_alias=AliasChoices("token_in", "tokenIn"))
    """Token given up."""

    token_out: str = Field(validation_alias=AliasChoices("token_out", "tokenOut"))
    """Token received."""

    amount_in: Decimal = Field(ge=0, validation_alias=AliasChoices("amount_in", "amountIn"))
    amount_out: Decimal = Field(ge=0, validation_alias=AliasChoices("amount_out", "amountOut"))

    price_in: Decimal | None = Field(
        default=None, validation_alias=AliasChoices("price_in", "priceIn")
    )
    """Unit price of `token_in` (may be absent)."""

    price_out: Decimal | None = Field(
        default=None, validation_alias=AliasChoices("price_out", "priceOut")
    )
    """Unit price of `token_out` (may be absent)."""

    fees: Decimal = Decimal(0)

    block_time: datetime = Field(validation_alias=AliasChoices("block_time", "blockTime"))
    """Execution time; the sole ordering key for FIFO replay."""

    signature: str | None = None
    """Transaction signature, when the trade came from chain data."""

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: object) -> object:
        """Accept trade types in any case ("BUY", "Swap")."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def reference(self) -> str:
        """Identifier used in diagnostics (signature when known, else id)."""
        return self.signature or self.id


class Position(BaseModel):
    """An open holding or one closed (sell-matched) slice of holdings for a token."""

    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str
    """Display symbol for the token."""

    token: str
    """Token address the position is tracked under."""

    wallet_address: str
    open_date: datetime
    close_date: datetime | None = None
    status: PositionStatus

    total_quantity: Decimal
    avg_entry_price: Decimal
    avg_exit_price: Decimal | None = None

    realized_pnl: Decimal = Decimal(0)
    unrealized_pnl: Decimal = Decimal(0)
    """No live pricing in the tracker; always zero."""

    fees: Decimal = Decimal(0)
    """Entry and exit fees attributed to this position."""

    @property
    def is_open(self) -> bool:
        return self.status == PositionStatus.OPEN

    @property
    def total_pnl(self) -> Decimal:
        return self.realized_pnl + self.unrealized_pnl

    @property
    def cost_basis(self) -> Decimal:
        """Acquisition cost excluding fees."""
        return self.total_quantity * self.avg_entry_price

    @property
    def duration_hours(self) -> float | None:
        """Holding time for closed positions."""
        if self.close_date is None:
            return None
        return (self.close_date - self.open_date).total_seconds() / 3600


class PositionTrade(BaseModel):
    """Join record linking a trade (or a fragment of one) to a position."""

    model_config = ConfigDict(frozen=True)

    id: str
    position_id: str
    trade_id: str
    role: PositionRole
    quantity: Decimal
    price: Decimal
    fees: Decimal
    timestamp: datetime
