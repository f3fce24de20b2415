"""Command-line entrypoint for valuation metrics.

Run as:
    python -m valuation_api.cli AAPL [options]
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from valuation_api.core.config import ENV_API_KEY, load_settings
from valuation_api.core.fundamentals import ConsoleReportSink, build_aggregator
from valuation_api.domain.exceptions import ValuationAPIError

console = Console()

EXIT_OK = 0
EXIT_PIPELINE_ERROR = 1
EXIT_CONFIG_ERROR = 2


def configure_logging(debug: bool = False) -> None:
    """Route logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # httpx logs every request URL, which includes the apikey parameter
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fetch Alpha Vantage fundamentals and derive valuation metrics",
    )
    parser.add_argument("symbol", help="Ticker symbol, e.g. AAPL")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: ALPHA_VANTAGE_TIMEOUT or 30)",
    )
    parser.add_argument(
        "--snapshot-dir",
        type=Path,
        default=None,
        help="Write raw API responses under this directory",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Fetch the four reports one at a time",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    load_dotenv()
    configure_logging(args.debug)

    settings = load_settings()
    if not settings.has_credential:
        console.print(f"[bold red]Error:[/] {ENV_API_KEY} is not set")
        return EXIT_CONFIG_ERROR

    if args.snapshot_dir is not None:
        settings = replace(settings, snapshot_dir=args.snapshot_dir)
    if args.sequential:
        settings = replace(settings, concurrent=False)

    sink = ConsoleReportSink(console=console, as_json=args.json)
    aggregator = build_aggregator(settings, report_sink=sink)

    try:
        aggregator.aggregate(args.symbol, timeout=args.timeout)
    except ValuationAPIError as e:
        console.print(f"[bold red]Error fetching {args.symbol}:[/] {e}")
        return EXIT_PIPELINE_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
