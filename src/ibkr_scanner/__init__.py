"""IBKR option profitability scanner."""

__version__ = "0.1.0"
