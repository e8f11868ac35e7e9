"""Unit tests for trade classification."""

from decimal import Decimal

import pytest

from tests.builders import BONK, SOL, USDC, buy, sell, swap
from trade_journal.positions._classifier import classify_trade
from trade_journal.positions.exceptions import InvalidTradeError


class TestClassifyTrade:
    """Tests for mapping trades onto inventory events."""

    def test_buy_tracks_token_out(self):
        classified = classify_trade(buy("b1", 10, 20))

        assert classified.is_buy
        assert classified.token == SOL
        assert classified.quantity == Decimal("10")
        assert classified.price == Decimal("20")

    def test_sell_tracks_token_in(self):
        classified = classify_trade(sell("s1", 4, 25))

        assert not classified.is_buy
        assert classified.token == SOL
        assert classified.quantity == Decimal("4")
        assert classified.price == Decimal("25")

    def test_swap_is_a_buy_of_token_out(self):
        """Swaps only add the received token; the given-up leg is ignored."""
        classified = classify_trade(
            swap("x1", give=USDC, give_amount=100, get=BONK, get_amount=1000, get_price="0.1")
        )

        assert classified.is_buy
        assert classified.token == BONK
        assert classified.quantity == Decimal("1000")
        assert classified.price == Decimal("0.1")

    def test_missing_price_defaults_to_zero(self, make_trade):
        classified = classify_trade(make_trade(price_out=None))

        assert classified.price == Decimal("0")

    def test_uppercase_type_is_accepted(self, make_trade):
        classified = classify_trade(make_trade(type="SELL", token_in=SOL, amount_in=Decimal("3")))

        assert not classified.is_buy
        assert classified.quantity == Decimal("3")

    def test_zero_quantity_is_invalid(self, make_trade):
        with pytest.raises(InvalidTradeError) as exc_info:
            classify_trade(make_trade(id="bad", amount_out=Decimal("0")))

        assert exc_info.value.trade_id == "bad"

    def test_empty_token_is_invalid(self, make_trade):
        with pytest.raises(InvalidTradeError):
            classify_trade(make_trade(token_out=""))
