"""
Command-line entry point.

Fetches public market data and prints the normalized records as JSON.

Usage:
    python -m pionex_connector markets
    python -m pionex_connector ticker BTC/USDT
    python -m pionex_connector orderbook BTC/USDT --limit 5
    python -m pionex_connector trades BTC/USDT
    python -m pionex_connector klines BTC/USDT --timeframe 1h

Environment Variables:
    PIONEX_BASE_URL: REST base URL override
    PIONEX_TIMEOUT_SECONDS: Request timeout (default: 10)
    LOG_LEVEL: Logging level (default: INFO)
    LOG_FORMAT: json or text (default: json)
"""

import argparse
import asyncio
import json
import sys
from decimal import Decimal
from typing import Any, List, Optional

import structlog

from pionex_connector.adapters.pionex import PionexAdapter
from pionex_connector.config import ConnectorSettings, load_settings
from pionex_connector.errors import ExchangeError
from pionex_connector.logging_config import configure_logging

logger = structlog.get_logger(__name__)

COMMANDS = ("markets", "ticker", "orderbook", "trades", "klines")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pionex_connector",
        description="Fetch normalized Pionex public market data.",
    )
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("symbol", nargs="?", help="Unified symbol, e.g. BTC/USDT")
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--timeframe", default="1m")
    return parser


def _dump(value: Any) -> Any:
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if isinstance(value, tuple):
        return [str(item) if isinstance(item, Decimal) else item for item in value]
    return value.model_dump(mode="json", exclude={"info"})


async def run(args: argparse.Namespace, settings: ConnectorSettings) -> Any:
    """Execute one CLI command and return the JSON-ready result."""
    async with PionexAdapter(settings) as adapter:
        if args.command == "markets":
            return _dump(await adapter.fetch_markets())
        if args.command == "ticker":
            if args.symbol:
                return _dump(await adapter.fetch_ticker(args.symbol))
            return _dump(await adapter.fetch_tickers())
        if args.command == "orderbook":
            return _dump(await adapter.fetch_order_book(args.symbol, limit=args.limit))
        if args.command == "trades":
            return _dump(await adapter.fetch_trades(args.symbol, limit=args.limit))
        return _dump(
            await adapter.fetch_ohlcv(args.symbol, timeframe=args.timeframe, limit=args.limit)
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command not in ("markets", "ticker") and not args.symbol:
        parser.error(f"{args.command} requires a symbol")

    settings = load_settings()
    configure_logging(settings.log_level, settings.log_format)

    try:
        result = asyncio.run(run(args, settings))
    except ExchangeError as e:
        logger.error("cli_command_failed", command=args.command, error=str(e))
        return 1

    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
