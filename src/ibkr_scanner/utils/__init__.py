"""Shared utility functions."""

from .formatting import format_currency, format_percent
from .logging_setup import setup_logging

__all__ = ["format_currency", "format_percent", "setup_logging"]
