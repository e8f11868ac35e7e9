"""Per-token FIFO lot queues and the per-wallet registry that owns them."""

from __future__ import annotations

from collections import deque
from decimal import Decimal
from typing import TYPE_CHECKING

from trade_journal.positions._fifo_models import Consumption, Lot, LotFragment

if TYPE_CHECKING:
    from collections.abc import Iterator


class FifoQueue:
    """Open lots for one (wallet, token) pair, oldest first."""

    def __init__(self) -> None:
        self._lots: deque[Lot] = deque()

    def __len__(self) -> int:
        return len(self._lots)

    def __bool__(self) -> bool:
        return bool(self._lots)

    def __iter__(self) -> Iterator[Lot]:
        return iter(self._lots)

    @property
    def total_quantity(self) -> Decimal:
        return sum((lot.quantity for lot in self._lots), Decimal(0))

    @property
    def total_cost(self) -> Decimal:
        return sum((lot.cost for lot in self._lots), Decimal(0))

    @property
    def total_fees(self) -> Decimal:
        return sum((lot.fees for lot in self._lots), Decimal(0))

    def enqueue(self, lot: Lot) -> None:
        """Append a lot at the tail."""
        if lot.quantity <= 0:
            raise ValueError(f"Lot quantity must be positive (got {lot.quantity})")
        self._lots.append(lot)

    def consume(self, quantity: Decimal) -> Consumption:
        """
        Take `quantity` from the head of the queue in insertion order.

        Whole lots are removed. A partially taken lot keeps its place at the head with
        its quantity and fees reduced by the taken amounts; the fragment is attributed
        `fees * taken / quantity` of the lot's fees.

        Any quantity the queue cannot cover is returned as `shortfall`; no fragment is
        created for it.
        """
        if quantity <= 0:
            raise ValueError(f"Consume quantity must be positive (got {quantity})")

        consumption = Consumption()
        remaining = quantity

        while remaining > 0 and self._lots:
            lot = self._lots[0]

            if lot.quantity <= remaining:
                consumption.fragments.append(
                    LotFragment(
                        quantity=lot.quantity,
                        price=lot.price,
                        fees=lot.fees,
                        trade_id=lot.trade_id,
                        timestamp=lot.timestamp,
                    )
                )
                remaining -= lot.quantity
                self._lots.popleft()
                continue

            taken_fees = lot.fees * remaining / lot.quantity
            consumption.fragments.append(
                LotFragment(
                    quantity=remaining,
                    price=lot.price,
                    fees=taken_fees,
                    trade_id=lot.trade_id,
                    timestamp=lot.timestamp,
                )
            )
            lot.quantity -= remaining
            lot.fees -= taken_fees
            remaining = Decimal(0)

        consumption.shortfall = remaining
        return consumption


class QueueRegistry:
    """FIFO queues for one wallet, keyed by token and created on first use.

    A registry belongs to a single calculation call; it is never shared between wallets.
    """

    def __init__(self, wallet_address: str) -> None:
        self.wallet_address = wallet_address
        self._queues: dict[str, FifoQueue] = {}

    def __contains__(self, token: object) -> bool:
        return token in self._queues

    def get(self, token: str) -> FifoQueue:
        """Return the queue for `token`, creating an empty one if needed."""
        queue = self._queues.get(token)
        if queue is None:
            queue = FifoQueue()
            self._queues[token] = queue
        return queue

    def open_queues(self) -> Iterator[tuple[str, FifoQueue]]:
        """Yield (token, queue) for every non-empty queue, in first-use order."""
        for token, queue in self._queues.items():
            if queue:
                yield token, queue
