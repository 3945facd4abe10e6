"""Number formatting helpers for console and summary output."""


def format_currency(amount: float) -> str:
    """Format a dollar amount with two decimals, e.g. ``$123.46``."""
    return f"${amount:.2f}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Format a percentage value, e.g. ``12.35%``."""
    return f"{value:.{decimals}f}%"
