"""Shared pytest fixtures for scanner tests."""

from datetime import datetime, timezone

import pytest

from ibkr_scanner.models import OptionContract, OptionType

OBSERVED_AT = datetime(2024, 11, 20, 15, 30, tzinfo=timezone.utc)
EXPIRATION = datetime(2024, 12, 20, tzinfo=timezone.utc)


@pytest.fixture
def make_contract():
    """Factory for OptionContract objects with sensible defaults."""

    def _make(
        symbol: str = "AAPL",
        option_type: OptionType = OptionType.CALL,
        strike: float = 100.0,
        option_price: float = 5.0,
        **kwargs,
    ) -> OptionContract:
        kwargs.setdefault("expiration", EXPIRATION)
        kwargs.setdefault("timestamp", OBSERVED_AT)
        kwargs.setdefault("volume", 1000)
        kwargs.setdefault("implied_volatility", 0.25)
        kwargs.setdefault("contract_id", f"{symbol}-{option_type.name}-{strike}")
        return OptionContract(
            symbol=symbol,
            option_type=option_type,
            strike=strike,
            option_price=option_price,
            **kwargs,
        )

    return _make
