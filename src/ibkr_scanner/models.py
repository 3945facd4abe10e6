"""Data models for option scan results."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class OptionType(Enum):
    """Option kind."""

    CALL = "Call"
    PUT = "Put"

    def __str__(self) -> str:
        return self.name

    @property
    def glyph(self) -> str:
        """Short visual marker used in log rows and console output."""
        return "📈" if self is OptionType.CALL else "📉"


@dataclass
class OptionContract:
    """
    Represents a single quoted option contract.

    ``stock_price`` and ``profit_percent`` start at zero and are filled in by
    the scanner, stock price first.

    Attributes:
        symbol: Underlying stock ticker symbol
        option_type: Call or Put
        expiration: Expiration timestamp (UTC)
        strike: Strike price of the option
        option_price: Quoted option price (bid)
        stock_price: Underlying price at scan time
        profit_percent: Computed profit percentage
        volume: Trading volume for the day
        implied_volatility: Implied volatility as a fraction
        timestamp: When the quote was observed (UTC)
        contract_id: Broker-assigned contract identifier (conid)
    """

    symbol: str
    option_type: OptionType
    expiration: datetime
    strike: float
    option_price: float
    stock_price: float = 0.0
    profit_percent: float = 0.0
    volume: int = 0
    implied_volatility: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    contract_id: str = ""

    @property
    def is_call(self) -> bool:
        """Check if this is a call option."""
        return self.option_type is OptionType.CALL

    @property
    def is_put(self) -> bool:
        """Check if this is a put option."""
        return self.option_type is OptionType.PUT

    @property
    def days_to_expiry(self) -> int:
        """Calendar days from observation to expiration (never negative)."""
        return max(0, (self.expiration.date() - self.timestamp.date()).days)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the contract
        """
        return {
            "symbol": self.symbol,
            "option_type": str(self.option_type),
            "expiration": self.expiration.isoformat(),
            "strike": self.strike,
            "option_price": self.option_price,
            "stock_price": self.stock_price,
            "profit_percent": self.profit_percent,
            "volume": self.volume,
            "implied_volatility": self.implied_volatility,
            "timestamp": self.timestamp.isoformat(),
            "contract_id": self.contract_id,
        }

    def __repr__(self) -> str:
        return (
            f"OptionContract({self.symbol} {self.expiration.date().isoformat()} "
            f"${self.strike} {self.option_type})"
        )


@dataclass
class ContractFilters:
    """
    Filter thresholds applied to priced contracts.

    Attributes:
        min_profit_percent: Minimum profit percentage (inclusive)
        min_volume: Minimum traded volume (inclusive, 0 disables)
        max_days_to_expiry: Maximum days to expiry (None disables)
    """

    min_profit_percent: float = 2.0
    min_volume: int = 0
    max_days_to_expiry: Optional[int] = None


@dataclass
class SymbolScanResult:
    """Outcome of scanning one symbol: kept contracts or a failure reason."""

    symbol: str
    contracts: List[OptionContract] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CycleReport:
    """
    Summary of one completed scan cycle.

    Attributes:
        cycle_number: 1-based cycle counter
        started_at: Cycle start time (UTC)
        finished_at: Cycle end time (UTC)
        contracts: Contracts that passed the filter, in scan order
        failed_symbols: Symbols that could not be scanned this cycle
    """

    cycle_number: int
    started_at: datetime
    finished_at: datetime
    contracts: List[OptionContract]
    failed_symbols: List[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()
