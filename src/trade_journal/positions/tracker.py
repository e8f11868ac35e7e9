"""FIFO (First-In-First-Out) position tracker.

Replays a wallet's trade history in chronological order and reconstructs positions:

- Buy-like trades (buys and swaps) append a lot to the token's FIFO queue.
- Each sell consumes lots from the head of the queue and produces exactly one closed
  position, one ENTRY link per consumed lot fragment, and one EXIT link for the sell.
- Lots still open at the end of the replay are flushed into one open position per token.

Queues are rebuilt from the full history on every call and live only for that call.
Wallets never share queues, so lots bought in one wallet are never matched against
sells from another.

Fees are handled as:
- Entry fees stay on the lot and are attributed pro-rata to the fragments taken from it.
- The sell's fee is charged in full to the closed position, even when the sell is oversold.
- Realized P&L = exit value - cost basis - (entry fees + exit fee).
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import TYPE_CHECKING

import structlog

from trade_journal.config import TrackerConfig
from trade_journal.constants import FATAL_ERROR_PREFIX
from trade_journal.positions._classifier import classify_trade
from trade_journal.positions._fifo_models import Lot, PositionCalculationResult
from trade_journal.positions._queue import QueueRegistry
from trade_journal.positions.exceptions import InvalidTradeError
from trade_journal.positions.models import (
    Position,
    PositionRole,
    PositionStatus,
    PositionTrade,
)
from trade_journal.positions.symbols import AbbreviatingSymbolResolver

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from trade_journal.positions._fifo_models import ClassifiedTrade, Consumption
    from trade_journal.positions._queue import FifoQueue
    from trade_journal.positions.models import TradeRecord
    from trade_journal.positions.symbols import TokenSymbolResolver

logger = structlog.get_logger()


def _trade_ref(trade: object) -> str:
    """Best-effort identifier for diagnostics, safe on malformed records."""
    return str(getattr(trade, "signature", None) or getattr(trade, "id", None) or "<unknown>")


def sort_trades_chronologically(trades: Iterable[TradeRecord]) -> list[TradeRecord]:
    """
    Order trades for FIFO replay.

    The sort key is `(block_time, input index)`: trades sharing a timestamp keep the
    order in which the caller supplied them.
    """
    indexed = sorted(enumerate(trades), key=lambda item: (item[1].block_time, item[0]))
    return [trade for _, trade in indexed]


def partition_by_wallet(trades: Iterable[TradeRecord]) -> dict[str, list[TradeRecord]]:
    """Group trades by wallet address, preserving first-seen wallet order."""
    partitions: dict[str, list[TradeRecord]] = {}
    for trade in trades:
        partitions.setdefault(trade.wallet_address, []).append(trade)
    return partitions


class FifoPositionTracker:
    """
    Reconstruct open and closed positions from trade history using FIFO lot matching.

    The tracker holds no per-calculation state, so one instance can serve any number of
    calculations, including concurrent ones.

    Usage:
        tracker = FifoPositionTracker(symbol_resolver=StaticSymbolResolver({...}))
        result = tracker.calculate(trades, wallet_address="wallet-1")
    """

    def __init__(
        self,
        symbol_resolver: TokenSymbolResolver | None = None,
        config: TrackerConfig | None = None,
    ) -> None:
        """
        Initialize tracker.

        Args:
            symbol_resolver: Maps token addresses to display symbols
                (default: abbreviated addresses)
            config: Tracker configuration (default: `TrackerConfig()`)
        """
        self.symbol_resolver = symbol_resolver or AbbreviatingSymbolResolver()
        self.config = config or TrackerConfig()

    def calculate(
        self,
        trades: Sequence[TradeRecord],
        wallet_address: str | None = None,
    ) -> PositionCalculationResult:
        """
        Calculate FIFO positions for one wallet.

        Without `wallet_address` the trades are partitioned by their own wallet
        (see `calculate_multi`). With it, every supplied trade is booked under that
        wallet; setting `config.skip_foreign_wallet_trades` instead skips trades recorded
        against another wallet with a warning.

        Never raises for malformed but iterable input: failures are reported through
        the result's `errors` and `warnings`.
        """
        if wallet_address is None:
            return self.calculate_multi(trades)
        return self._replay_wallet(
            trades,
            wallet_address,
            skip_foreign=self.config.skip_foreign_wallet_trades,
        )

    def calculate_multi(self, trades: Sequence[TradeRecord]) -> PositionCalculationResult:
        """
        Calculate FIFO positions for a batch mixing several wallets.

        Each wallet is replayed with its own queue registry. Results are concatenated in
        first-seen wallet order regardless of whether wallets ran in parallel.
        """
        result = PositionCalculationResult()
        try:
            partitions = partition_by_wallet(trades)

            if self.config.parallel_wallets and len(partitions) > 1:
                with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                    wallet_results = list(
                        executor.map(
                            lambda item: self._replay_wallet(item[1], item[0], skip_foreign=False),
                            partitions.items(),
                        )
                    )
            else:
                wallet_results = [
                    self._replay_wallet(wallet_trades, wallet, skip_foreign=False)
                    for wallet, wallet_trades in partitions.items()
                ]

            for wallet_result in wallet_results:
                result.merge(wallet_result)
        except Exception as e:
            logger.error("Multi-wallet position calculation failed", error=str(e), exc_info=True)
            result.errors.append(f"{FATAL_ERROR_PREFIX}: {e}")

        logger.info(
            "Calculated multi-wallet positions",
            positions=len(result.positions),
            errors=len(result.errors),
            warnings=len(result.warnings),
        )
        return result

    def _replay_wallet(
        self,
        trades: Sequence[TradeRecord],
        wallet_address: str,
        *,
        skip_foreign: bool,
    ) -> PositionCalculationResult:
        result = PositionCalculationResult()
        registry = QueueRegistry(wallet_address)

        try:
            ordered = sort_trades_chronologically(trades)
            logger.debug("Replaying wallet trades", wallet=wallet_address, trades=len(ordered))

            for trade in ordered:
                try:
                    if skip_foreign and trade.wallet_address != wallet_address:
                        result.warnings.append(
                            f"Trade {_trade_ref(trade)} belongs to wallet "
                            f"{trade.wallet_address}, not {wallet_address} - skipped"
                        )
                        continue
                    self._process_trade(trade, registry, result)
                except InvalidTradeError:
                    result.warnings.append(f"Invalid trade data for {_trade_ref(trade)}")
                except Exception as e:
                    logger.warning(
                        "Failed to process trade; skipping",
                        wallet=wallet_address,
                        trade=_trade_ref(trade),
                        error=str(e),
                    )
                    result.errors.append(f"Error processing trade {_trade_ref(trade)}: {e}")

            for token, queue in registry.open_queues():
                self._flush_open_position(token, queue, wallet_address, result)
        except Exception as e:
            logger.error(
                "Position calculation failed",
                wallet=wallet_address,
                error=str(e),
                exc_info=True,
            )
            result.errors.append(f"{FATAL_ERROR_PREFIX}: {e}")

        logger.debug(
            "Calculated wallet positions",
            wallet=wallet_address,
            positions=len(result.positions),
            errors=len(result.errors),
            warnings=len(result.warnings),
        )
        return result

    def _process_trade(
        self,
        trade: TradeRecord,
        registry: QueueRegistry,
        result: PositionCalculationResult,
    ) -> None:
        classified = classify_trade(trade)

        if classified.is_buy:
            registry.get(classified.token).enqueue(
                Lot(
                    quantity=classified.quantity,
                    price=classified.price,
                    fees=Decimal(trade.fees),
                    trade_id=trade.id,
                    timestamp=trade.block_time,
                )
            )
            return

        queue = registry.get(classified.token)
        if not queue:
            logger.warning(
                "Sell without prior holdings",
                wallet=registry.wallet_address,
                token=classified.token,
                trade=_trade_ref(trade),
            )
            result.warnings.append(
                f"Sell trade {_trade_ref(trade)} with no prior holdings - possible short position"
            )
            return

        consumption = queue.consume(classified.quantity)
        if consumption.is_oversold:
            logger.warning(
                "Sell exceeds holdings",
                wallet=registry.wallet_address,
                token=classified.token,
                trade=_trade_ref(trade),
                oversold=str(consumption.shortfall),
            )
            result.warnings.append(
                f"Sell quantity exceeds holdings for {classified.token} - "
                f"{consumption.shortfall} tokens oversold"
            )

        self._close_position(trade, classified, consumption, registry.wallet_address, result)

    def _close_position(
        self,
        trade: TradeRecord,
        classified: ClassifiedTrade,
        consumption: Consumption,
        wallet_address: str,
        result: PositionCalculationResult,
    ) -> None:
        matched_qty = consumption.quantity
        cost_basis = consumption.cost_basis

        # The sell's fee was paid in full even when only part of it matched holdings.
        exit_fees = Decimal(trade.fees)
        total_fees = consumption.fees + exit_fees
        exit_value = matched_qty * classified.price
        first = consumption.fragments[0]

        position = Position(
            id=f"pos_{wallet_address}_{classified.token}_{trade.id}",
            symbol=self.symbol_resolver.resolve(classified.token),
            token=classified.token,
            wallet_address=wallet_address,
            open_date=first.timestamp,
            close_date=trade.block_time,
            status=PositionStatus.CLOSED,
            total_quantity=matched_qty,
            avg_entry_price=cost_basis / matched_qty,
            avg_exit_price=classified.price,
            realized_pnl=exit_value - cost_basis - total_fees,
            unrealized_pnl=Decimal(0),
            fees=total_fees,
        )
        result.positions.append(position)

        for fragment in consumption.fragments:
            result.position_trades.append(
                PositionTrade(
                    id=f"pt_entry_{fragment.trade_id}_{position.id}",
                    position_id=position.id,
                    trade_id=fragment.trade_id,
                    role=PositionRole.ENTRY,
                    quantity=fragment.quantity,
                    price=fragment.price,
                    fees=fragment.fees,
                    timestamp=fragment.timestamp,
                )
            )

        result.position_trades.append(
            PositionTrade(
                id=f"pt_exit_{trade.id}_{position.id}",
                position_id=position.id,
                trade_id=trade.id,
                role=PositionRole.EXIT,
                quantity=matched_qty,
                price=classified.price,
                fees=exit_fees,
                timestamp=trade.block_time,
            )
        )

    def _flush_open_position(
        self,
        token: str,
        queue: FifoQueue,
        wallet_address: str,
        result: PositionCalculationResult,
    ) -> None:
        total_quantity = queue.total_quantity
        lots = list(queue)

        position = Position(
            id=f"pos_open_{wallet_address}_{token}",
            symbol=self.symbol_resolver.resolve(token),
            token=token,
            wallet_address=wallet_address,
            open_date=min(lot.timestamp for lot in lots),
            close_date=None,
            status=PositionStatus.OPEN,
            total_quantity=total_quantity,
            avg_entry_price=queue.total_cost / total_quantity,
            avg_exit_price=None,
            realized_pnl=Decimal(0),
            # No live prices here; callers mark open positions to market themselves.
            unrealized_pnl=Decimal(0),
            fees=queue.total_fees,
        )
        result.positions.append(position)

        for lot in lots:
            result.position_trades.append(
                PositionTrade(
                    id=f"pt_entry_{lot.trade_id}_{position.id}",
                    position_id=position.id,
                    trade_id=lot.trade_id,
                    role=PositionRole.ENTRY,
                    quantity=lot.quantity,
                    price=lot.price,
                    fees=lot.fees,
                    timestamp=lot.timestamp,
                )
            )


def calculate_positions(
    trades: Sequence[TradeRecord],
    wallet_address: str,
    *,
    symbol_resolver: TokenSymbolResolver | None = None,
) -> PositionCalculationResult:
    """Calculate FIFO positions for a single wallet with a fresh tracker."""
    tracker = FifoPositionTracker(symbol_resolver=symbol_resolver)
    return tracker.calculate(trades, wallet_address)


def calculate_multi_wallet_positions(
    trades: Sequence[TradeRecord],
    *,
    symbol_resolver: TokenSymbolResolver | None = None,
    config: TrackerConfig | None = None,
) -> PositionCalculationResult:
    """Calculate FIFO positions for trades spanning several wallets."""
    tracker = FifoPositionTracker(symbol_resolver=symbol_resolver, config=config)
    return tracker.calculate_multi(trades)
