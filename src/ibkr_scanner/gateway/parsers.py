"""
Client Portal Gateway response parsers.

This module provides functions for parsing gateway responses into internal
data models. These parsers are used by the GatewayClient to convert raw JSON
into structured objects.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..constants import LAST_PRICE_FIELD
from ..models import OptionContract, OptionType
from .exceptions import GatewayDataError

logger = logging.getLogger(__name__)

# One-letter prefixes the gateway puts in front of snapshot prices
# (C = prior close, H = trading halted).
_PRICE_PREFIXES = "CH"


def parse_conid(symbol: str, data: Any) -> str:
    """
    Extract the underlying contract id from a secdef search response.

    Args:
        symbol: Symbol that was searched
        data: Raw response (list of matches)

    Returns:
        Contract id as a string

    Raises:
        GatewayDataError: If no contract id is present
    """
    if isinstance(data, dict) and "error" in data:
        raise GatewayDataError(f"Contract search failed for {symbol}: {data['error']}")

    if not isinstance(data, list) or not data:
        raise GatewayDataError(f"No contract found for {symbol}")

    conid = data[0].get("conid") if isinstance(data[0], dict) else None
    if conid in (None, ""):
        raise GatewayDataError(f"Contract id not found in search response for {symbol}")

    return str(conid)


def parse_last_price(symbol: str, data: Any) -> float:
    """
    Extract the last traded price from a market data snapshot.

    The gateway returns field values either as numbers or as strings that may
    carry a one-letter prefix, e.g. ``"C185.50"``.

    Args:
        symbol: Symbol the snapshot was requested for
        data: Raw snapshot response (list with one entry per conid)

    Returns:
        Last price

    Raises:
        GatewayDataError: If the price field is absent or unparseable
    """
    entry = data[0] if isinstance(data, list) and data else None
    if not isinstance(entry, dict) or LAST_PRICE_FIELD not in entry:
        raise GatewayDataError(f"Price not found in response for {symbol}")

    raw = entry[LAST_PRICE_FIELD]
    if isinstance(raw, str):
        raw = raw.strip().lstrip(_PRICE_PREFIXES)

    try:
        price = float(raw)
    except (TypeError, ValueError) as e:
        raise GatewayDataError(f"Invalid price {entry[LAST_PRICE_FIELD]!r} for {symbol}") from e

    return price


def parse_expiration(value: Any, default: datetime) -> datetime:
    """
    Parse an expiration given as ``YYYYMMDD`` or ISO date.

    Returns ``default`` when the value is missing or unparseable.
    """
    if not value:
        return default

    text = str(value).strip()
    for fmt in ("%Y%m%d", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    logger.debug(f"Unrecognized expiration format: {text!r}")
    return default


def parse_option_contract(
    symbol: str,
    option_type: OptionType,
    data: Dict[str, Any],
    observed_at: datetime,
) -> Optional[OptionContract]:
    """
    Parse a single option entry.

    Args:
        symbol: Underlying symbol the chain was requested for
        option_type: Call or Put
        data: Raw option entry
        observed_at: Observation timestamp for the contract

    Returns:
        OptionContract, or None if a required field is missing
    """
    try:
        return OptionContract(
            symbol=str(data.get("symbol") or symbol),
            option_type=option_type,
            expiration=parse_expiration(
                data.get("expiration") or data.get("maturityDate"), observed_at
            ),
            strike=float(data["strike"]),
            option_price=float(data["bid"]),
            volume=int(data["volume"]),
            implied_volatility=float(data["iv"]),
            timestamp=observed_at,
            contract_id=str(data["conid"]),
        )
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        logger.debug(f"Skipping malformed {option_type} entry for {symbol}: {e}")
        return None


def parse_option_chain(
    symbol: str, data: Any, observed_at: Optional[datetime] = None
) -> List[OptionContract]:
    """
    Parse an option chain response into contracts.

    Calls are emitted before puts, each in response order.

    Args:
        symbol: Underlying symbol
        data: Raw response with ``calls`` and ``puts`` arrays
        observed_at: Observation timestamp (defaults to now, UTC)

    Returns:
        List of parsed contracts (may be empty)

    Raises:
        GatewayDataError: If the response is not a JSON object
    """
    if not isinstance(data, dict):
        raise GatewayDataError(
            f"Option chain response for {symbol} is not an object, got {type(data).__name__}"
        )

    observed_at = observed_at or datetime.now(timezone.utc)
    contracts: List[OptionContract] = []

    for key, option_type in (("calls", OptionType.CALL), ("puts", OptionType.PUT)):
        entries = data.get(key)
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            contract = parse_option_contract(symbol, option_type, entry, observed_at)
            if contract is not None:
                contracts.append(contract)

    logger.debug(f"Parsed {len(contracts)} contracts for {symbol}")
    return contracts
