"""Unit tests for the profitability calculator."""

import pytest

from ibkr_scanner.models import OptionType
from ibkr_scanner.scanning.profit import (
    calculate_call_profit,
    calculate_profit_percent,
    calculate_put_profit,
)


class TestCallProfit:
    """Tests for call profit calculation."""

    def test_in_the_money_call(self):
        """(110 - 100 - 5) / 5 * 100 = 100%."""
        assert calculate_call_profit(100.0, 5.0, 110.0) == pytest.approx(100.0)

    def test_out_of_the_money_call(self):
        """Underlying below strike yields zero."""
        assert calculate_call_profit(100.0, 2.0, 95.0) == 0.0

    def test_at_the_money_call(self):
        """Underlying equal to strike yields zero."""
        assert calculate_call_profit(100.0, 5.0, 100.0) == 0.0

    def test_in_the_money_but_below_premium_floors_at_zero(self):
        """Intrinsic value smaller than premium is floored at zero."""
        assert calculate_call_profit(100.0, 5.0, 103.0) == 0.0

    def test_monotonic_in_stock_price(self):
        """Call profit never decreases as the underlying rises."""
        prices = [90.0, 100.0, 104.0, 105.0, 106.0, 120.0, 200.0]
        profits = [calculate_call_profit(100.0, 5.0, p) for p in prices]
        assert profits == sorted(profits)


class TestPutProfit:
    """Tests for put profit calculation."""

    def test_in_the_money_put(self):
        """(100 - 90 - 5) / 5 * 100 = 100%."""
        assert calculate_put_profit(100.0, 5.0, 90.0) == pytest.approx(100.0)

    def test_out_of_the_money_put(self):
        """Underlying above strike yields zero."""
        assert calculate_put_profit(100.0, 2.0, 105.0) == 0.0

    def test_at_the_money_put(self):
        """Underlying equal to strike yields zero."""
        assert calculate_put_profit(100.0, 5.0, 100.0) == 0.0

    def test_monotonic_as_stock_price_falls(self):
        """Put profit never decreases as the underlying falls."""
        prices = [120.0, 100.0, 96.0, 95.0, 94.0, 80.0, 10.0]
        profits = [calculate_put_profit(100.0, 5.0, p) for p in prices]
        assert profits == sorted(profits)


class TestCalculateProfitPercent:
    """Tests for the dispatching calculator."""

    @pytest.mark.parametrize(
        "strike,option_price,stock_price,option_type,expected",
        [
            (100.0, 5.0, 110.0, OptionType.CALL, 100.0),
            (100.0, 2.0, 95.0, OptionType.CALL, 0.0),
            (100.0, 5.0, 90.0, OptionType.PUT, 100.0),
            (100.0, 5.0, 110.0, OptionType.PUT, 0.0),
        ],
    )
    def test_scenarios(self, strike, option_price, stock_price, option_type, expected):
        """Known call and put scenarios."""
        result = calculate_profit_percent(strike, option_price, stock_price, option_type)
        assert result == pytest.approx(expected)

    @pytest.mark.parametrize("option_type", [OptionType.CALL, OptionType.PUT])
    @pytest.mark.parametrize(
        "strike,option_price",
        [(0.0, 5.0), (-10.0, 5.0), (100.0, 0.0), (100.0, -1.0), (0.0, 0.0)],
    )
    @pytest.mark.parametrize("stock_price", [0.0, 50.0, 150.0, 1_000.0])
    def test_unusable_quotes_return_zero(self, strike, option_price, stock_price, option_type):
        """Non-positive strike or option price always yields zero."""
        assert calculate_profit_percent(strike, option_price, stock_price, option_type) == 0.0

    def test_never_negative(self):
        """Results are floored at zero."""
        for stock_price in (0.0, 99.0, 101.0, 104.99):
            assert calculate_profit_percent(100.0, 5.0, stock_price, OptionType.CALL) >= 0.0
            assert calculate_profit_percent(100.0, 5.0, stock_price, OptionType.PUT) >= 0.0
