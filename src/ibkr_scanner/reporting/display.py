"""Console table output for scan results."""

from typing import Sequence

import click

from ..models import OptionContract
from ..utils.formatting import format_currency, format_percent

NO_RESULTS_MESSAGE = "No profitable options found."

_HEADER = (
    f"{'Symbol':<8} {'Type':<8} {'Expiry':<10} {'Strike':>10} {'Option Price':>12} "
    f"{'Stock Price':>12} {'Profit %':>10} {'Volume':>8} {'IV %':>7}"
)


def format_row(contract: OptionContract) -> str:
    """Format one contract as a table row."""
    kind = f"{contract.option_type.glyph} {contract.option_type}"
    return (
        f"{contract.symbol:<8} {kind:<8} {contract.expiration.strftime('%Y-%m-%d'):<10} "
        f"{format_currency(contract.strike):>10} "
        f"{format_currency(contract.option_price):>12} "
        f"{format_currency(contract.stock_price):>12} "
        f"{format_percent(contract.profit_percent):>10} "
        f"{contract.volume:>8} "
        f"{format_percent(contract.implied_volatility * 100, 1):>7}"
    )


class ConsoleDisplay:
    """Prints each cycle's profitable contracts as a table."""

    def display(self, contracts: Sequence[OptionContract]) -> None:
        if not contracts:
            click.echo(NO_RESULTS_MESSAGE)
            return

        click.echo()
        click.secho("Profitable Options Found:", bold=True)
        click.echo(_HEADER)
        click.echo("-" * len(_HEADER))
        for contract in contracts:
            click.echo(format_row(contract))
