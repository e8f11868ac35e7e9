"""
Shared test fixtures.

PHILOSOPHY: Use REAL objects wherever possible.
- Real Pydantic TradeRecord models (not dicts pretending to be models)
- Real tracker, queues, and registries (no mocks of FIFO internals)
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest

from tests.builders import BASE_TIME, SOL, USDC, WALLET_A
from trade_journal.positions.models import TradeRecord

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def make_trade() -> Callable[..., TradeRecord]:
    """Factory to create REAL TradeRecord objects with sensible defaults."""

    def _make(**overrides: Any) -> TradeRecord:
        base: dict[str, Any] = {
            "id": "trade-1",
            "wallet_address": WALLET_A,
            "type": "buy",
            "token_in": USDC,
            "token_out": SOL,
            "amount_in": Decimal("200"),
            "amount_out": Decimal("10"),
            "price_out": Decimal("20"),
            "fees": Decimal("0"),
            "block_time": BASE_TIME,
        }
        base.update(overrides)
        return TradeRecord(**base)

    return _make


@pytest.fixture(autouse=True)
def _isolate_tracker_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TRADE_JOURNAL_LOG_LEVEL",
        "TRADE_JOURNAL_PARALLEL_WALLETS",
        "TRADE_JOURNAL_MAX_WORKERS",
        "TRADE_JOURNAL_SKIP_FOREIGN_WALLET_TRADES",
    ):
        monkeypatch.delenv(name, raising=False)
