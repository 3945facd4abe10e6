"""
Scan cycle engine for the option scanner.

This module provides the OptionScanner class, which repeatedly walks the
configured symbols, prices their option chains, keeps the profitable
contracts and hands each cycle's results to the result logger and the
console display.
"""

import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from ..config import ScannerConfig
from ..gateway.exceptions import GatewayError
from ..models import CycleReport, OptionContract, SymbolScanResult
from ..reporting.logger import ResultLogError
from .filters import filter_contracts, price_contract

logger = logging.getLogger(__name__)


class ScannerState(Enum):
    """Lifecycle states of the scan loop."""

    IDLE = "idle"
    CONNECTING = "connecting"
    SCANNING = "scanning"
    REPORTING = "reporting"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


class ScannerConnectionError(Exception):
    """The gateway could not be reached at startup."""

    pass


class OptionScanner:
    """
    Periodic option profitability scanner.

    Each cycle scans every configured symbol in order. A symbol whose price or
    option chain cannot be fetched is logged and skipped; it never aborts the
    cycle. The cycle's kept contracts go to the result logger, then to the
    display, and the scanner waits ``scan_interval`` seconds before the next
    cycle.

    Example:
        scanner = OptionScanner(
            client=GatewayClient.from_config(config),
            config=config,
            result_logger=ResultLogger(config.options_log_dir),
            display=ConsoleDisplay(),
        )
        scanner.run()
    """

    def __init__(
        self,
        client: Any,
        config: ScannerConfig,
        result_logger: Any,
        display: Any,
        stop_event: Optional[threading.Event] = None,
    ):
        """
        Initialize the scanner.

        Args:
            client: Market data client (``test_connection``, ``get_stock_price``,
                ``get_option_chain``)
            config: Scanner configuration
            result_logger: Object with ``log_results(contracts)``
            display: Object with ``display(contracts)``
            stop_event: Event used to request shutdown (created if omitted)
        """
        self.client = client
        self.config = config
        self.filters = config.filters
        self.result_logger = result_logger
        self.display = display
        self._stop_event = stop_event or threading.Event()
        self._state = ScannerState.IDLE
        self._cycle_count = 0

        logger.info(
            f"OptionScanner initialized: {len(config.symbols)} symbols, "
            f"threshold={config.min_profit_percent}%, interval={config.scan_interval}s"
        )

    @property
    def state(self) -> ScannerState:
        return self._state

    @property
    def cycle_count(self) -> int:
        """Number of completed scan cycles."""
        return self._cycle_count

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Request shutdown; honored between symbols and during the wait."""
        logger.info("Stop requested")
        self._stop_event.set()

    def connect(self) -> None:
        """
        Verify gateway connectivity once, before the first cycle.

        Raises:
            ScannerConnectionError: If the check fails or the gateway is unreachable
        """
        self._state = ScannerState.CONNECTING

        try:
            connected = self.client.test_connection()
        except GatewayError as e:
            self._state = ScannerState.STOPPED
            raise ScannerConnectionError(f"Failed to connect to IBKR Gateway: {e}") from e

        if not connected:
            self._state = ScannerState.STOPPED
            raise ScannerConnectionError("Failed to connect to IBKR Gateway")

    def scan_symbol(self, symbol: str) -> SymbolScanResult:
        """
        Scan one symbol.

        Gateway failures are returned as a failed result rather than raised.

        Args:
            symbol: Stock ticker symbol

        Returns:
            SymbolScanResult with the kept contracts, or the failure reason
        """
        try:
            stock_price = self.client.get_stock_price(symbol)
        except GatewayError as e:
            logger.warning(f"Failed to get price for {symbol}: {e}")
            return SymbolScanResult(symbol=symbol, error=f"price: {e}")

        try:
            chain = self.client.get_option_chain(symbol, self.config.strike_count)
        except GatewayError as e:
            logger.warning(f"Failed to get option chain for {symbol}: {e}")
            return SymbolScanResult(symbol=symbol, error=f"option chain: {e}")

        priced = [price_contract(contract, stock_price) for contract in chain]
        kept = filter_contracts(priced, self.filters)

        logger.info(f"Scanned {symbol}: found {len(kept)} profitable options")
        return SymbolScanResult(symbol=symbol, contracts=kept)

    def scan_cycle(self) -> CycleReport:
        """
        Scan all symbols once, in configured order.

        Stops early (with the results gathered so far) if shutdown is requested.

        Returns:
            CycleReport for this cycle
        """
        self._state = ScannerState.SCANNING
        started_at = datetime.now(timezone.utc)
        cycle_number = self._cycle_count + 1
        logger.info(f"Starting scan cycle {cycle_number}")

        contracts: List[OptionContract] = []
        failed: List[str] = []

        for symbol in self.config.symbols:
            if self.stop_requested:
                logger.info("Shutdown requested, ending scan cycle early")
                break

            logger.info(f"Scanning {symbol}")
            result = self.scan_symbol(symbol)
            if result.ok:
                contracts.extend(result.contracts)
            else:
                failed.append(symbol)

        logger.info(f"Scan complete. Found {len(contracts)} profitable options")

        return CycleReport(
            cycle_number=cycle_number,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            contracts=contracts,
            failed_symbols=failed,
        )

    def report(self, contracts: List[OptionContract]) -> None:
        """
        Hand a cycle's contracts to the result logger, then the display.

        Raises:
            ResultLogError: If results cannot be written and
                ``fail_on_log_error`` is set
        """
        self._state = ScannerState.REPORTING

        try:
            self.result_logger.log_results(contracts)
        except ResultLogError as e:
            if self.config.fail_on_log_error:
                logger.error(f"Failed to log results: {e}")
                raise
            logger.warning(f"Failed to log results, continuing: {e}")

        self.display.display(contracts)

    def run_once(self) -> CycleReport:
        """Run a single scan cycle and report it."""
        cycle = self.scan_cycle()
        self.report(cycle.contracts)
        self._cycle_count += 1
        return cycle

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Connect, then scan until stopped.

        Args:
            max_cycles: Stop after this many cycles (None runs until stopped)

        Returns:
            Number of completed cycles

        Raises:
            ValueError: If max_cycles is less than 1
            ScannerConnectionError: If the startup connectivity check fails
            ResultLogError: If results cannot be written and
                ``fail_on_log_error`` is set
        """
        if max_cycles is not None and max_cycles < 1:
            raise ValueError(f"max_cycles must be at least 1, got {max_cycles}")

        logger.info("Starting NASDAQ option scanner")
        self.connect()

        try:
            while not self.stop_requested:
                cycle = self.run_once()

                if max_cycles is not None and self._cycle_count >= max_cycles:
                    break

                logger.info(
                    f"Cycle {cycle.cycle_number} took {cycle.duration_seconds:.1f}s. "
                    f"Next scan in {self.config.scan_interval} seconds"
                )
                self._state = ScannerState.SLEEPING
                if self._stop_event.wait(self.config.scan_interval):
                    break
        finally:
            self._state = ScannerState.STOPPED

        logger.info(f"Scanner stopped after {self._cycle_count} cycles")
        return self._cycle_count
