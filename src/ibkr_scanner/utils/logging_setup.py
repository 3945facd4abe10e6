"""Logging configuration for the scanner process."""

import logging
from pathlib import Path
from typing import List, Optional

from ..constants import LOG_FORMAT

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Logs go to stderr and, when ``log_file`` is given, to that file as well.
    The file's directory is created if needed; if the file cannot be opened
    the scanner keeps logging to stderr only.

    Args:
        level: Root log level
        log_file: Optional path of the application log file
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    file_error: Optional[OSError] = None

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as e:
            file_error = e

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    if file_error is not None:
        logger.warning(f"Could not open log file {log_file}: {file_error}")
