"""
Contract filtering for the option scanner.

Filters are plain predicates over priced contracts: they keep no state and
never reorder their input.
"""

import logging
from typing import Iterable, List

from ..models import ContractFilters, OptionContract
from .profit import calculate_profit_percent

logger = logging.getLogger(__name__)


def price_contract(contract: OptionContract, stock_price: float) -> OptionContract:
    """
    Populate underlying price and profit percent on a contract.

    Stock price is set first because the profit calculation reads it.

    Returns:
        The same contract, mutated
    """
    contract.stock_price = stock_price
    contract.profit_percent = calculate_profit_percent(
        contract.strike,
        contract.option_price,
        contract.stock_price,
        contract.option_type,
    )
    return contract


def passes_filters(contract: OptionContract, filters: ContractFilters) -> bool:
    """
    Check whether a priced contract passes all thresholds.

    The profit threshold is inclusive. Volume and expiry checks only apply
    when configured (``min_volume > 0`` / ``max_days_to_expiry`` set).
    """
    if contract.profit_percent < filters.min_profit_percent:
        return False

    if filters.min_volume > 0 and contract.volume < filters.min_volume:
        return False

    if (
        filters.max_days_to_expiry is not None
        and contract.days_to_expiry > filters.max_days_to_expiry
    ):
        return False

    return True


def filter_contracts(
    contracts: Iterable[OptionContract], filters: ContractFilters
) -> List[OptionContract]:
    """
    Keep contracts passing the filters, preserving input order.

    Args:
        contracts: Priced contracts
        filters: Thresholds to apply

    Returns:
        New list of kept contracts
    """
    return [c for c in contracts if passes_filters(c, filters)]
