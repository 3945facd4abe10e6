"""
Simplified option profitability metric.

The metric is the cash value of the option at expiration, if the underlying
stayed at its current price, minus the premium paid, expressed as a
percentage of that premium:

    Call: (stock - strike - premium) / premium * 100
    Put:  (strike - stock - premium) / premium * 100

Negative results are floored at zero. This is NOT an option pricing model:
it ignores time value, volatility, rates and dividends, and should only be
read as a rough intrinsic-value screen.
"""

from ..models import OptionType


def calculate_call_profit(strike: float, option_price: float, stock_price: float) -> float:
    """Profit percent for a call; 0.0 when out of the money or quote unusable."""
    if strike <= 0.0 or option_price <= 0.0:
        return 0.0

    if stock_price > strike:
        return max(0.0, (stock_price - strike - option_price) / option_price * 100.0)
    return 0.0


def calculate_put_profit(strike: float, option_price: float, stock_price: float) -> float:
    """Profit percent for a put; 0.0 when out of the money or quote unusable."""
    if strike <= 0.0 or option_price <= 0.0:
        return 0.0

    if strike > stock_price:
        return max(0.0, (strike - stock_price - option_price) / option_price * 100.0)
    return 0.0


def calculate_profit_percent(
    strike: float,
    option_price: float,
    stock_price: float,
    option_type: OptionType,
) -> float:
    """
    Calculate the simplified profit percentage for one contract.

    A non-positive strike or option price marks an unusable quote and yields
    0.0 rather than an error.

    Args:
        strike: Strike price
        option_price: Premium paid per share
        stock_price: Current underlying price
        option_type: Call or Put

    Returns:
        Profit percentage, never negative
    """
    if option_type is OptionType.CALL:
        return calculate_call_profit(strike, option_price, stock_price)
    return calculate_put_profit(strike, option_price, stock_price)
