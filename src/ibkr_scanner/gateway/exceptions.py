"""Exceptions for the IBKR Client Portal Gateway client."""


class GatewayError(Exception):
    """Base exception for gateway errors."""

    pass


class GatewayTransportError(GatewayError):
    """
    Network or HTTP layer failure.

    Raised for timeouts, refused connections and responses that are not
    valid JSON.
    """

    pass


class GatewayAPIError(GatewayError):
    """Gateway answered with a non-success status."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class GatewayDataError(GatewayError):
    """Well-formed response missing an expected field."""

    pass
