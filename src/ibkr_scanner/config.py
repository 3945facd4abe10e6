"""Configuration management for the IBKR option scanner.

Configuration is read once at startup from defaults, an optional YAML file and
environment variables (highest precedence), and then handed to the scanner as
an immutable value.
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import yaml

from .constants import (
    DEFAULT_GATEWAY_HOST,
    DEFAULT_GATEWAY_PORT,
    DEFAULT_LOG_FILE_PATH,
    DEFAULT_MIN_PROFIT_PERCENT,
    DEFAULT_OPTIONS_LOG_DIR,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SCAN_INTERVAL,
    DEFAULT_STRIKE_COUNT,
    DEFAULT_SYMBOLS,
)
from .models import ContractFilters

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Exception raised for invalid or missing configuration."""

    pass


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_optional_int(value: Any) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return int(value)


def _parse_symbols(value: Union[str, Iterable[str]]) -> Tuple[str, ...]:
    """Split, normalize and de-duplicate symbols, keeping first-seen order."""
    items = value.split(",") if isinstance(value, str) else value
    symbols: List[str] = []
    for item in items:
        symbol = str(item).strip().upper()
        if symbol and symbol not in symbols:
            symbols.append(symbol)
    return tuple(symbols)


# field name -> (environment variable, YAML section, YAML key, parser)
_FIELD_SOURCES: Dict[str, Tuple[str, str, str, Callable[[Any], Any]]] = {
    "gateway_host": ("IBKR_GATEWAY_HOST", "gateway", "host", str),
    "gateway_port": ("IBKR_GATEWAY_PORT", "gateway", "port", int),
    "gateway_ssl": ("IBKR_GATEWAY_SSL", "gateway", "ssl", _parse_bool),
    "verify_ssl": ("IBKR_VERIFY_SSL", "gateway", "verify_ssl", _parse_bool),
    "account_id": ("IBKR_ACCOUNT_ID", "gateway", "account_id", str),
    "request_timeout": ("REQUEST_TIMEOUT_SECONDS", "gateway", "timeout", int),
    "scan_interval": ("SCAN_INTERVAL_SECONDS", "scanner", "interval", int),
    "min_profit_percent": ("MIN_PROFIT_PERCENT", "scanner", "min_profit_percent", float),
    "symbols": ("NASDAQ_STOCKS", "scanner", "symbols", _parse_symbols),
    "strike_count": ("OPTION_STRIKE_COUNT", "scanner", "strike_count", int),
    "min_volume": ("MIN_VOLUME", "scanner", "min_volume", int),
    "max_days_to_expiry": (
        "MAX_DAYS_TO_EXPIRY",
        "scanner",
        "max_days_to_expiry",
        _parse_optional_int,
    ),
    "log_file_path": ("LOG_FILE_PATH", "logging", "file", str),
    "options_log_dir": ("OPTIONS_LOG_DIR", "logging", "options_dir", str),
    "fail_on_log_error": ("FAIL_ON_LOG_ERROR", "logging", "fail_on_error", _parse_bool),
}


@dataclass(frozen=True)
class ScannerConfig:
    """
    Immutable configuration for one scanner process.

    Attributes:
        gateway_host: Client Portal Gateway host name
        gateway_port: Client Portal Gateway port
        gateway_ssl: Use https to reach the gateway
        verify_ssl: Verify the gateway TLS certificate (the gateway ships a
            self-signed one)
        account_id: IBKR account identifier
        request_timeout: Per-request timeout in seconds
        scan_interval: Seconds to wait between scan cycles
        min_profit_percent: Profitability threshold (inclusive)
        symbols: Ordered tuple of tickers to scan
        strike_count: Strikes requested on each side of at-the-money
        min_volume: Minimum traded volume for a kept contract
        max_days_to_expiry: Maximum days to expiry for a kept contract
        log_file_path: Application log file
        options_log_dir: Directory for per-day CSV and summary files
        fail_on_log_error: Stop the scanner when results cannot be written
    """

    gateway_host: str = DEFAULT_GATEWAY_HOST
    gateway_port: int = DEFAULT_GATEWAY_PORT
    gateway_ssl: bool = False
    verify_ssl: bool = False
    account_id: str = ""
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    scan_interval: int = DEFAULT_SCAN_INTERVAL
    min_profit_percent: float = DEFAULT_MIN_PROFIT_PERCENT
    symbols: Tuple[str, ...] = DEFAULT_SYMBOLS
    strike_count: int = DEFAULT_STRIKE_COUNT
    min_volume: int = 0
    max_days_to_expiry: Optional[int] = None
    log_file_path: str = DEFAULT_LOG_FILE_PATH
    options_log_dir: str = DEFAULT_OPTIONS_LOG_DIR
    fail_on_log_error: bool = True

    def __post_init__(self) -> None:
        """Normalize symbols and validate configuration after initialization."""
        object.__setattr__(self, "symbols", _parse_symbols(self.symbols))

        if not self.gateway_host:
            raise ConfigurationError("Gateway host cannot be empty")

        if not 0 < self.gateway_port < 65536:
            raise ConfigurationError(f"Invalid port number: {self.gateway_port}")

        if self.request_timeout <= 0:
            raise ConfigurationError("Request timeout must be positive")

        if self.scan_interval <= 0:
            raise ConfigurationError("Scan interval must be positive")

        if self.strike_count <= 0:
            raise ConfigurationError("Strike count must be positive")

        if self.min_volume < 0:
            raise ConfigurationError("Minimum volume cannot be negative")

        if self.max_days_to_expiry is not None and self.max_days_to_expiry < 0:
            raise ConfigurationError("Max days to expiry cannot be negative")

        if not self.symbols:
            raise ConfigurationError("At least one symbol must be configured")

    @property
    def base_url(self) -> str:
        """Gateway base URL, e.g. ``https://localhost:5000``."""
        protocol = "https" if self.gateway_ssl else "http"
        return f"{protocol}://{self.gateway_host}:{self.gateway_port}"

    @property
    def filters(self) -> ContractFilters:
        """Contract filter thresholds derived from this configuration."""
        return ContractFilters(
            min_profit_percent=self.min_profit_percent,
            min_volume=self.min_volume,
            max_days_to_expiry=self.max_days_to_expiry,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ScannerConfig":
        """
        Load configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            ScannerConfig instance

        Raises:
            ConfigurationError: If a variable cannot be parsed or a value is invalid
        """
        return cls.merge_with_defaults({}, environ)

    @classmethod
    def load_from_file(
        cls, path: Union[str, Path], environ: Optional[Mapping[str, str]] = None
    ) -> "ScannerConfig":
        """
        Load configuration from a YAML file, with environment overrides.

        Expected layout::

            gateway:
              host: localhost
              port: 5000
            scanner:
              interval: 300
              symbols: [AAPL, MSFT]
            logging:
              options_dir: ./logs/options/

        Args:
            path: Path to the YAML file
            environ: Mapping to read instead of ``os.environ``

        Returns:
            ScannerConfig instance

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        logger.debug(f"Loaded configuration from {config_path}")
        return cls.merge_with_defaults(file_config, environ)

    @classmethod
    def merge_with_defaults(
        cls,
        config_dict: Mapping[str, Any],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ScannerConfig":
        """
        Merge a nested configuration dictionary with defaults and environment.

        Precedence order (highest to lowest):
        1. Environment variables
        2. Config file values
        3. Default values

        Raises:
            ConfigurationError: If any value is invalid
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        for section in dict.fromkeys(source[1] for source in _FIELD_SOURCES.values()):
            section_config = config_dict.get(section)
            if section_config is not None and not isinstance(section_config, dict):
                raise ConfigurationError(f"Section '{section}' must be a mapping")

        for name, (env_var, section, key, parser) in _FIELD_SOURCES.items():
            section_values = config_dict.get(section) or {}
            if env_var in env:
                raw, source = env[env_var], env_var
            elif key in section_values:
                raw, source = section_values[key], f"{section}.{key}"
            else:
                continue

            try:
                values[name] = parser(raw)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid value for {source}: {raw!r}") from e

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a flat dictionary."""
        data = asdict(self)
        data["symbols"] = list(self.symbols)
        return data

    def with_overrides(self, **overrides: Any) -> "ScannerConfig":
        """Return a copy with the given fields replaced (validated again)."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration fields: {sorted(unknown)}")
        data = asdict(self)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return ScannerConfig(**data)
