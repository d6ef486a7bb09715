"""CLI entry point for generating trading signals.

Usage:
    python -m app BTC
    python -m app BTC ETH SOL --interval 1h
    python -m app BTC --seed 7 --json
    python -m app BTC --no-fallback -v
"""

import argparse
import asyncio
import logging
import sys

import numpy as np

from app.clients import BinanceRestClient
from app.config import get_settings
from app.report import ReportFormatter
from app.services import MarketDataError, MarketDataProvider, SignalService
from app.services.market_data import interval_to_timedelta
from core.errors import SignalEngineError
from core.strategy import SmartSignalEngine

logger = logging.getLogger(__name__)


def _interval(value: str) -> str:
    try:
        interval_to_timedelta(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate confluence-scored trading signals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m app BTC
  python -m app BTC ETH --interval 1h --limit 100
  python -m app BTC --seed 7 --json
        """,
    )
    parser.add_argument(
        "symbols",
        nargs="+",
        help="Base symbols to analyze (e.g., BTC ETH)",
    )
    parser.add_argument(
        "--interval",
        type=_interval,
        default=None,
        help="K-line interval (default: from settings)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Number of K-lines to fetch (default: from settings)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible pattern/MTF labels",
    )
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Fail instead of using synthetic data when the exchange is unreachable",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of text cards",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    seed = args.seed if args.seed is not None else settings.random_seed
    rng = np.random.default_rng(seed)

    client = BinanceRestClient(
        base_url=settings.binance_base_url,
        api_key=settings.binance_api_key,
        timeout=settings.http_timeout,
    )
    provider = MarketDataProvider(
        client,
        quote_asset=settings.quote_asset,
        interval=args.interval or settings.kline_interval,
        kline_limit=args.limit or settings.kline_limit,
        order_book_depth=settings.order_book_depth,
        synthetic_fallback=settings.synthetic_fallback and not args.no_fallback,
        rng=rng,
    )
    service = SignalService(provider, SmartSignalEngine(), rng=rng)

    reports = []
    exit_code = 0
    try:
        for symbol in args.symbols:
            try:
                reports.append(await service.analyze(symbol))
            except (SignalEngineError, MarketDataError) as e:
                logger.error("%s: %s", symbol, e)
                exit_code = 1
    finally:
        await client.close()

    if args.json:
        print(ReportFormatter.to_json(reports))
    else:
        for report in reports:
            print(ReportFormatter.format_console(report))
    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    level = logging.DEBUG if args.verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
