"""Trade classification: map one trade record onto a FIFO inventory event."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from trade_journal.positions._fifo_models import ClassifiedTrade
from trade_journal.positions.exceptions import InvalidTradeError
from trade_journal.positions.models import TradeType

if TYPE_CHECKING:
    from trade_journal.positions.models import TradeRecord


def classify_trade(trade: TradeRecord) -> ClassifiedTrade:
    """
    Extract the tracked token, quantity, unit price, and direction of a trade.

    Rules:
    - BUY adds `amount_out` of `token_out` at `price_out`.
    - SELL removes `amount_in` of `token_in` at `price_in`.
    - SWAP is booked as a BUY of `token_out` only. The given-up `token_in` leg is
      not removed from inventory; swaps never close positions.

    Missing prices default to 0.

    Args:
        trade: The trade record to classify.

    Returns:
        Classified inventory event.

    Raises:
        InvalidTradeError: If the token is empty or the quantity is not positive.
    """
    trade_type = TradeType(trade.type)

    if trade_type == TradeType.SELL:
        token = trade.token_in
        quantity = trade.amount_in
        price = trade.price_in
        is_buy = False
    else:
        token = trade.token_out
        quantity = trade.amount_out
        price = trade.price_out
        is_buy = True

    if not token or quantity <= 0:
        raise InvalidTradeError(
            f"Trade {trade.id} has no token or a non-positive quantity "
            f"(token={token!r}, quantity={quantity})",
            trade_id=trade.id,
        )

    return ClassifiedTrade(
        token=token,
        quantity=Decimal(quantity),
        price=Decimal(price) if price is not None else Decimal(0),
        is_buy=is_buy,
    )
