"""
Option scanning package.

This package contains the scan cycle engine and its pure helpers:
- profit: simplified profitability metric
- filters: pricing and threshold filtering of contracts
- scanner: OptionScanner loop with per-symbol failure isolation

Example:
    from ibkr_scanner.scanning import OptionScanner

    scanner = OptionScanner(client, config, result_logger, display)
    scanner.run()
"""

from .filters import filter_contracts, passes_filters, price_contract
from .profit import calculate_call_profit, calculate_profit_percent, calculate_put_profit
from .scanner import OptionScanner, ScannerConnectionError, ScannerState

__all__ = [
    "OptionScanner",
    "ScannerConnectionError",
    "ScannerState",
    "calculate_profit_percent",
    "calculate_call_profit",
    "calculate_put_profit",
    "filter_contracts",
    "passes_filters",
    "price_contract",
]
