"""
IBKR Client Portal Gateway client package.

This package provides the HTTP client the scanner uses to fetch market data:

- GatewayClient: HTTP client for connectivity checks, quotes and option chains
- Exception types mapping transport, status and payload failures
- Parsers converting gateway JSON into OptionContract objects
"""

from .client import GatewayClient
from .exceptions import (
    GatewayAPIError,
    GatewayDataError,
    GatewayError,
    GatewayTransportError,
)

__all__ = [
    "GatewayClient",
    "GatewayError",
    "GatewayAPIError",
    "GatewayDataError",
    "GatewayTransportError",
]
