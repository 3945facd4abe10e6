"""Tests for the Client Portal Gateway client."""

from unittest import mock

import pytest
import requests

from ibkr_scanner.config import ScannerConfig
from ibkr_scanner.gateway.client import GatewayClient
from ibkr_scanner.gateway.exceptions import (
    GatewayAPIError,
    GatewayDataError,
    GatewayTransportError,
)
from ibkr_scanner.models import OptionType


def _response(status_code=200, payload=None, json_error=None):
    response = mock.Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


class TestGatewayClient:
    """Tests for GatewayClient class."""

    @pytest.fixture
    def session(self):
        """Create mock HTTP session."""
        session = mock.Mock()
        session.headers = {}
        return session

    @pytest.fixture
    def client(self, session):
        """Create gateway client with mocked session."""
        return GatewayClient("https://localhost:5000/", timeout=10, session=session)

    def test_client_initialization(self, client, session):
        """GatewayClient initializes correctly."""
        assert client.base_url == "https://localhost:5000"
        assert client.timeout == 10
        assert session.verify is False
        assert session.headers["Accept"] == "application/json"

    def test_from_config(self):
        """from_config builds the base URL and options from configuration."""
        config = ScannerConfig(
            gateway_host="gateway.local",
            gateway_port=5001,
            gateway_ssl=True,
            verify_ssl=True,
            account_id="U123",
            request_timeout=15,
        )

        with mock.patch("ibkr_scanner.gateway.client.requests.Session") as session_class:
            session_class.return_value.headers = {}
            client = GatewayClient.from_config(config)

        assert client.base_url == "https://gateway.local:5001"
        assert client.account_id == "U123"
        assert client.timeout == 15
        assert client.session.verify is True

    def test_get_full_url_constructs_correct_url(self, client):
        """_get_full_url handles paths with and without a leading slash."""
        assert client._get_full_url("/v1/api/tickle") == "https://localhost:5000/v1/api/tickle"
        assert client._get_full_url("v1/api/tickle") == "https://localhost:5000/v1/api/tickle"

    def test_request_passes_timeout_and_params(self, client, session):
        """_request forwards params and the configured timeout."""
        session.request.return_value = _response(200, {})

        client._request("GET", "/v1/api/iserver/secdef/search", params={"symbol": "AAPL"})

        session.request.assert_called_once_with(
            "GET",
            "https://localhost:5000/v1/api/iserver/secdef/search",
            params={"symbol": "AAPL"},
            timeout=10,
        )

    def test_request_timeout_raises_transport_error(self, client, session):
        """Timeouts surface as GatewayTransportError."""
        session.request.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(GatewayTransportError, match="timed out after 10s"):
            client._request("GET", "/v1/api/tickle")

    def test_request_connection_error_raises_transport_error(self, client, session):
        """Connection failures surface as GatewayTransportError."""
        session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(GatewayTransportError, match="HTTP request failed"):
            client._request("GET", "/v1/api/tickle")

    def test_get_json_raises_on_error_status(self, client, session):
        """Non-success status raises GatewayAPIError carrying the code."""
        session.request.return_value = _response(500)

        with pytest.raises(GatewayAPIError) as exc_info:
            client._get_json("/v1/api/iserver/secdef/search")

        assert exc_info.value.status_code == 500
        assert "status: 500" in str(exc_info.value)

    def test_get_json_raises_on_invalid_json(self, client, session):
        """An undecodable body is a transport error."""
        session.request.return_value = _response(200, json_error=ValueError("Expecting value"))

        with pytest.raises(GatewayTransportError, match="Invalid JSON"):
            client._get_json("/v1/api/iserver/secdef/search")

    def test_test_connection_success(self, client, session):
        """test_connection returns True on a success status."""
        session.request.return_value = _response(200, {"session": "abc"})

        assert client.test_connection() is True
        session.request.assert_called_once_with(
            "GET", "https://localhost:5000/v1/api/tickle", params=None, timeout=10
        )

    def test_test_connection_failure_status(self, client, session):
        """test_connection returns False on a non-success status."""
        session.request.return_value = _response(401)

        assert client.test_connection() is False

    def test_test_connection_unreachable(self, client, session):
        """test_connection propagates transport failures."""
        session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(GatewayTransportError):
            client.test_connection()

    def test_resolve_conid_is_cached(self, client, session):
        """Contract id lookups hit the gateway once per symbol."""
        session.request.return_value = _response(200, [{"conid": 265598, "symbol": "AAPL"}])

        assert client.resolve_conid("aapl") == "265598"
        assert client.resolve_conid("AAPL") == "265598"

        session.request.assert_called_once()
        assert session.request.call_args[1]["params"] == {"symbol": "AAPL"}

    def test_resolve_conid_failure_not_cached(self, client, session):
        """A failed lookup is retried on the next call."""
        session.request.side_effect = [
            _response(200, []),
            _response(200, [{"conid": 265598}]),
        ]

        with pytest.raises(GatewayDataError):
            client.resolve_conid("AAPL")

        assert client.resolve_conid("AAPL") == "265598"

    def test_get_stock_price(self, client, session):
        """get_stock_price requests field 31 for the resolved conid."""
        session.request.side_effect = [
            _response(200, [{"conid": 265598}]),
            _response(200, [{"conid": 265598, "31": "185.50"}]),
        ]

        price = client.get_stock_price("AAPL")

        assert price == 185.50
        snapshot_call = session.request.call_args_list[1]
        assert snapshot_call[0][1].endswith("/v1/api/iserver/marketdata/snapshot")
        assert snapshot_call[1]["params"] == {"conids": "265598", "fields": "31"}

    def test_get_stock_price_missing_field(self, client, session):
        """A snapshot without field 31 raises GatewayDataError."""
        session.request.side_effect = [
            _response(200, [{"conid": 265598}]),
            _response(200, [{"conid": 265598}]),
        ]

        with pytest.raises(GatewayDataError, match="Price not found"):
            client.get_stock_price("AAPL")

    def test_get_stock_price_http_error(self, client, session):
        """A failed snapshot request raises GatewayAPIError."""
        session.request.side_effect = [
            _response(200, [{"conid": 265598}]),
            _response(503),
        ]

        with pytest.raises(GatewayAPIError):
            client.get_stock_price("AAPL")

    def test_get_option_chain(self, client, session):
        """get_option_chain sends the chain parameters and parses the result."""
        chain = {
            "calls": [
                {"symbol": "AAPL", "strike": 180.0, "bid": 7.5, "volume": 1200, "iv": 0.28, "conid": 1},
            ],
            "puts": [
                {"symbol": "AAPL", "strike": 190.0, "bid": 6.0, "volume": 800, "iv": 0.30, "conid": 2},
            ],
        }
        session.request.side_effect = [
            _response(200, [{"conid": 265598}]),
            _response(200, chain),
        ]

        contracts = client.get_option_chain("AAPL", strike_count=20)

        info_call = session.request.call_args_list[1]
        assert info_call[0][1].endswith("/v1/api/iserver/secdef/info")
        assert info_call[1]["params"] == {
            "conid": "265598",
            "sectype": "OPT",
            "month": "ALL",
            "exchange": "SMART",
            "strikeCount": "20",
        }
        assert [c.option_type for c in contracts] == [OptionType.CALL, OptionType.PUT]
        assert contracts[0].strike == 180.0
        assert contracts[0].option_price == 7.5
        assert contracts[0].stock_price == 0.0
        assert contracts[0].profit_percent == 0.0

    def test_context_manager_closes_session(self, session):
        """Exiting the context closes the session."""
        with GatewayClient("http://localhost:5000", session=session):
            pass

        session.close.assert_called_once()
