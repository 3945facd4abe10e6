"""
IBKR Client Portal Gateway HTTP client.

This module provides the HTTP client the scanner uses to reach a locally
running Client Portal Gateway. It handles:

- Session management with connection pooling
- Per-request timeouts
- Mapping of transport, status and payload problems onto GatewayError types
- Contract id lookup with a per-client cache

Session authentication is managed by the gateway itself (the user logs in
through the gateway's web page); this client never sends credentials.
Requests are not retried: a failed call surfaces immediately and the scanner
tries again on its next cycle.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import requests

from ..constants import LAST_PRICE_FIELD
from ..models import OptionContract
from . import endpoints
from .exceptions import GatewayAPIError, GatewayTransportError
from .parsers import parse_conid, parse_last_price, parse_option_chain

if TYPE_CHECKING:
    from ..config import ScannerConfig

logger = logging.getLogger(__name__)


class GatewayClient:
    """
    HTTP client for the Client Portal Web API.

    Example:
        with GatewayClient("https://localhost:5000", timeout=10) as client:
            if client.test_connection():
                price = client.get_stock_price("AAPL")
                chain = client.get_option_chain("AAPL", strike_count=20)
    """

    def __init__(
        self,
        base_url: str,
        account_id: str = "",
        timeout: int = 30,
        verify_ssl: bool = False,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize gateway client.

        Args:
            base_url: Gateway base URL, e.g. ``https://localhost:5000``
            account_id: IBKR account identifier
            timeout: Request timeout in seconds
            verify_ssl: Verify the gateway's TLS certificate
            session: Optional pre-built session (mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.account_id = account_id
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.verify = verify_ssl
        self.session.headers.update(
            {"Accept": "application/json", "User-Agent": "IBKROptionScanner/1.0"}
        )
        self._conid_cache: Dict[str, str] = {}

        logger.info(f"GatewayClient initialized for {self.base_url}")

    @classmethod
    def from_config(cls, config: "ScannerConfig") -> "GatewayClient":
        """Build a client from scanner configuration."""
        return cls(
            base_url=config.base_url,
            account_id=config.account_id,
            timeout=config.request_timeout,
            verify_ssl=config.verify_ssl,
        )

    def _get_full_url(self, endpoint: str) -> str:
        """
        Construct full API URL from endpoint path.

        Args:
            endpoint: API endpoint path (e.g., "/v1/api/tickle")

        Returns:
            Full URL with base URL
        """
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{self.base_url}{endpoint}"

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """
        Make an HTTP request to the gateway.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            params: Query parameters

        Returns:
            Response object (status is not checked here)

        Raises:
            GatewayTransportError: On timeout or connection failure
        """
        url = self._get_full_url(endpoint)

        logger.debug(f"{method} {url}")
        if params:
            logger.debug(f"  Params: {params}")

        try:
            response = self.session.request(method, url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise GatewayTransportError(
                f"Request to {endpoint} timed out after {self.timeout}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise GatewayTransportError(f"HTTP request failed: {e}") from e

        logger.debug(f"Response: {response.status_code}")
        return response

    def _get_json(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET an endpoint and decode its JSON body.

        Raises:
            GatewayTransportError: On network failure or invalid JSON
            GatewayAPIError: On a non-success status
        """
        response = self._request("GET", endpoint, params=params)

        if not response.ok:
            raise GatewayAPIError(
                f"API request failed with status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GatewayTransportError(f"Invalid JSON response from {endpoint}: {e}") from e

    def test_connection(self) -> bool:
        """
        Check that the gateway is reachable.

        Returns:
            True on a success status, False otherwise

        Raises:
            GatewayTransportError: If the gateway cannot be reached at all
        """
        logger.info("Testing connection to IBKR Gateway")

        try:
            response = self._request("GET", endpoints.TICKLE)
        except GatewayTransportError as e:
            logger.error(f"Connection error: {e}")
            raise

        if response.ok:
            logger.info("Connection successful")
            return True

        logger.warning(f"Connection failed with status: {response.status_code}")
        return False

    def resolve_conid(self, symbol: str) -> str:
        """
        Look up the stock contract id for a symbol.

        Results are cached for the lifetime of the client.

        Raises:
            GatewayError: If the lookup fails
        """
        symbol = symbol.upper().strip()
        if symbol in self._conid_cache:
            return self._conid_cache[symbol]

        data = self._get_json(endpoints.SECDEF_SEARCH, params={"symbol": symbol})
        conid = parse_conid(symbol, data)
        self._conid_cache[symbol] = conid
        logger.debug(f"Resolved {symbol} to conid {conid}")
        return conid

    def get_stock_price(self, symbol: str) -> float:
        """
        Fetch the last traded price for a stock.

        Args:
            symbol: Stock ticker symbol

        Returns:
            Last price

        Raises:
            GatewayTransportError: On network failure
            GatewayAPIError: On a non-success status
            GatewayDataError: If the price field is missing
        """
        logger.info(f"Fetching stock price for {symbol}")

        conid = self.resolve_conid(symbol)
        data = self._get_json(
            endpoints.MARKETDATA_SNAPSHOT,
            params={"conids": conid, "fields": LAST_PRICE_FIELD},
        )
        return parse_last_price(symbol, data)

    def get_option_chain(self, symbol: str, strike_count: int) -> List[OptionContract]:
        """
        Fetch the option chain for a stock.

        Args:
            symbol: Stock ticker symbol
            strike_count: Strikes to request on each side of at-the-money

        Returns:
            Contracts with stock price and profit not yet populated

        Raises:
            GatewayTransportError: On network failure
            GatewayAPIError: On a non-success status
            GatewayDataError: If the response is not an option chain
        """
        logger.info(f"Fetching option chain for {symbol}")

        conid = self.resolve_conid(symbol)
        params = {
            "conid": conid,
            "sectype": "OPT",
            "month": "ALL",
            "exchange": "SMART",
            "strikeCount": str(strike_count),
        }
        data = self._get_json(endpoints.SECDEF_INFO, params=params)
        return parse_option_chain(symbol.upper().strip(), data)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
        logger.info("GatewayClient closed")

    def __enter__(self) -> "GatewayClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
