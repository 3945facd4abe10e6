"""
Result reporting package.

- logger: per-day CSV record and summary files
- display: console table output
"""

from .display import NO_RESULTS_MESSAGE, ConsoleDisplay
from .logger import ResultLogError, ResultLogger

__all__ = [
    "ConsoleDisplay",
    "NO_RESULTS_MESSAGE",
    "ResultLogError",
    "ResultLogger",
]
