"""
Per-day persistence of profitable contracts.

Each call to ``ResultLogger.log_results`` appends rows to the day's CSV record
(``options_YYYYMMDD.csv``) and rewrites the day's human-readable summary
(``summary_YYYYMMDD.txt``). Files are opened and closed on every call.
"""

import csv
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from ..constants import CSV_COLUMNS
from ..models import OptionContract
from ..utils.formatting import format_currency, format_percent

logger = logging.getLogger(__name__)


class ResultLogError(Exception):
    """Results could not be written to disk."""

    pass


def contract_to_row(contract: OptionContract) -> List[Union[str, float, int]]:
    """Build a CSV row in ``CSV_COLUMNS`` order."""
    return [
        contract.timestamp.isoformat(),
        contract.symbol,
        str(contract.option_type),
        contract.option_type.glyph,
        contract.expiration.isoformat(),
        contract.strike,
        contract.option_price,
        contract.stock_price,
        contract.profit_percent,
        contract.volume,
        contract.implied_volatility,
        contract.contract_id,
    ]


class ResultLogger:
    """
    Writes profitable contracts to per-day files.

    Attributes:
        log_dir: Directory holding the CSV records and summaries
    """

    def __init__(
        self,
        log_dir: Union[str, Path],
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the logger and create the log directory.

        Args:
            log_dir: Output directory
            clock: Returns the current time (defaults to UTC now)

        Raises:
            ResultLogError: If the directory cannot be created
        """
        self.log_dir = Path(log_dir)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ResultLogError(f"Cannot create log directory {self.log_dir}: {e}") from e

    def record_path(self, day: datetime) -> Path:
        return self.log_dir / f"options_{day.strftime('%Y%m%d')}.csv"

    def summary_path(self, day: datetime) -> Path:
        return self.log_dir / f"summary_{day.strftime('%Y%m%d')}.txt"

    def log_results(self, contracts: Sequence[OptionContract]) -> None:
        """
        Append contracts to today's record and rewrite today's summary.

        An empty sequence is a no-op: no file is created or touched.

        Args:
            contracts: Profitable contracts from one scan cycle

        Raises:
            ResultLogError: On any filesystem or CSV failure
        """
        if not contracts:
            return

        now = self._clock()
        record_path = self.record_path(now)

        try:
            file_exists = record_path.exists()
            with open(record_path, "a", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                if not file_exists:
                    writer.writerow(CSV_COLUMNS)
                for contract in contracts:
                    writer.writerow(contract_to_row(contract))

            self._write_summary(contracts, now)
        except (OSError, csv.Error) as e:
            raise ResultLogError(f"Failed to write results to {self.log_dir}: {e}") from e

        logger.info(f"Logged {len(contracts)} contracts to {record_path}")

    def _write_summary(self, contracts: Sequence[OptionContract], now: datetime) -> None:
        """Overwrite the day's summary, grouping contracts by symbol."""
        by_symbol: Dict[str, List[OptionContract]] = {}
        for contract in contracts:
            by_symbol.setdefault(contract.symbol, []).append(contract)

        lines = [
            f"Option Scan Summary - {now.isoformat()}",
            "=" * 38,
            f"Total profitable options found: {len(contracts)}",
            "",
        ]

        for symbol, symbol_contracts in by_symbol.items():
            lines.append(f"{symbol}: {len(symbol_contracts)} options")
            for contract in symbol_contracts:
                lines.append(
                    f"  {contract.option_type.glyph} {contract.option_type}: "
                    f"Strike {format_currency(contract.strike)}, "
                    f"Option {format_currency(contract.option_price)}, "
                    f"Profit {format_percent(contract.profit_percent)}"
                )
            lines.append("")

        self.summary_path(now).write_text("\n".join(lines) + "\n", encoding="utf-8")
