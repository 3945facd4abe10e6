"""
Click CLI for the IBKR option scanner.

Commands:
    run          Scan periodically until interrupted (or once with --once)
    check        Test the gateway connection
    show-config  Print the effective configuration

Exit codes:
    0    Success
    1    Configuration error
    2    Gateway connectivity failure
    3    Results could not be written
    130  Interrupted by user (SIGINT); SIGTERM stops cleanly with 0
"""

import logging
import signal
import sys
from typing import Optional

import click
import yaml
from dotenv import find_dotenv, load_dotenv

from .config import ConfigurationError, ScannerConfig
from .gateway import GatewayClient, GatewayError
from .reporting import ConsoleDisplay, ResultLogError, ResultLogger
from .scanning import OptionScanner, ScannerConnectionError
from .utils import setup_logging

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 1
EXIT_CONNECTION_ERROR = 2
EXIT_LOG_ERROR = 3
EXIT_INTERRUPTED = 130


def _print_error(message: str) -> None:
    """Print error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def _get_config(ctx: click.Context) -> ScannerConfig:
    return ctx.obj["config"]


@click.group()
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False),
    envvar="SCANNER_CONFIG_FILE",
    help="YAML configuration file (environment variables take precedence)",
)
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    help="Environment file to load (default: .env in the working directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Optional[str],
    env_file: Optional[str],
    verbose: bool,
) -> None:
    """
    IBKR option scanner - find option contracts above a profit threshold.

    Polls a running IBKR Client Portal Gateway for stock prices and option
    chains, logs profitable contracts to per-day files and prints a table.
    """
    ctx.ensure_object(dict)

    load_dotenv(env_file or find_dotenv(usecwd=True))

    try:
        if config_file:
            config = ScannerConfig.load_from_file(config_file)
        else:
            config = ScannerConfig.from_env()
    except ConfigurationError as e:
        _print_error(f"Configuration error: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    setup_logging(logging.DEBUG if verbose else logging.INFO, config.log_file_path)

    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option("--once", is_flag=True, help="Run a single scan cycle and exit")
@click.option("--interval", type=int, help="Seconds between scan cycles")
@click.option("--threshold", type=float, help="Minimum profit percent")
@click.option("--symbols", help="Comma-separated symbols to scan")
@click.pass_context
def run(
    ctx: click.Context,
    once: bool,
    interval: Optional[int],
    threshold: Optional[float],
    symbols: Optional[str],
) -> None:
    """
    Scan the configured symbols periodically.

    Example: ibkr-scanner run --symbols AAPL,MSFT --threshold 5
    """
    try:
        config = _get_config(ctx).with_overrides(
            scan_interval=interval,
            min_profit_percent=threshold,
            symbols=symbols,
        )
    except ConfigurationError as e:
        _print_error(f"Configuration error: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        result_logger = ResultLogger(config.options_log_dir)
    except ResultLogError as e:
        _print_error(str(e))
        sys.exit(EXIT_LOG_ERROR)

    with GatewayClient.from_config(config) as client:
        scanner = OptionScanner(
            client=client,
            config=config,
            result_logger=result_logger,
            display=ConsoleDisplay(),
        )

        received_signals = []

        def _handle_signal(signum, frame) -> None:
            logger.info(f"Received signal {signum}, shutting down")
            received_signals.append(signum)
            scanner.stop()

        previous_handlers = {
            sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)
        }

        try:
            scanner.run(max_cycles=1 if once else None)
        except ScannerConnectionError as e:
            logger.error(f"Scanner failed: {e}")
            _print_error(str(e))
            sys.exit(EXIT_CONNECTION_ERROR)
        except ResultLogError as e:
            logger.error(f"Scanner failed: {e}")
            _print_error(str(e))
            sys.exit(EXIT_LOG_ERROR)
        finally:
            for sig, handler in previous_handlers.items():
                signal.signal(sig, handler)

    # SIGTERM is a requested shutdown and exits 0; only SIGINT reports an interrupt.
    if signal.SIGINT in received_signals:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(EXIT_INTERRUPTED)


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Test the connection to the IBKR Gateway."""
    config = _get_config(ctx)

    with GatewayClient.from_config(config) as client:
        try:
            connected = client.test_connection()
        except GatewayError as e:
            _print_error(f"Cannot reach gateway at {config.base_url}: {e}")
            sys.exit(EXIT_CONNECTION_ERROR)

    if not connected:
        _print_error(f"Gateway at {config.base_url} did not accept the connection")
        sys.exit(EXIT_CONNECTION_ERROR)

    click.secho(f"Connected to IBKR Gateway at {config.base_url}", fg="green")


@cli.command("show-config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the effective configuration."""
    click.echo(yaml.safe_dump(_get_config(ctx).to_dict(), sort_keys=False), nl=False)


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
