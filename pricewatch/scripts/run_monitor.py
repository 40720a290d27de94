import argparse
import asyncio
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional

from pricewatch.config import parse_start_date, parse_symbols, settings
from pricewatch.data.ingestion import ClosingPriceFetcher, DataUnavailableError, get_provider
from pricewatch.polling.orchestrator import BatchOrchestrator
from pricewatch.polling.scheduler import PollingScheduler
from pricewatch.polling.worker import SymbolWorker
from pricewatch.reporting.csv_report import CsvReportSink

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _package_version() -> str:
    try:
        return version("pricewatch")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pricewatch",
        description="Poll closing prices for a set of symbols and print a CSV summary per symbol every interval."
    )
    parser.add_argument("-s", "--symbols", type=str, default=settings.DEFAULT_SYMBOLS, help="Comma-separated ticker symbols (e.g. AAPL,MSFT)")
    parser.add_argument("-f", "--from", dest="start", type=str, required=True, help="Start of the period, e.g. 2024-01-01 or 2024-01-01T00:00:00Z")
    parser.add_argument("--interval", type=float, default=settings.POLL_INTERVAL_SECONDS, help="Seconds between polling ticks")
    parser.add_argument("--window", type=int, default=settings.SMA_WINDOW, help="Moving-average window in data points")
    parser.add_argument("--ticks", type=int, default=None, help="Stop after this many ticks (default: run forever)")
    parser.add_argument("--source", type=str, default=settings.DEFAULT_DATA_SOURCE, choices=["yahoo"], help="Data source")
    parser.add_argument("--log-level", type=str.upper, default=settings.LOG_LEVEL, choices=LOG_LEVELS, help="Logging level for stderr output")
    parser.add_argument("--progress", action="store_true", default=settings.SHOW_PROGRESS, help="Show a progress bar per batch on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        start = parse_start_date(args.start)
        symbols = parse_symbols(args.symbols)
    except ValueError as e:
        parser.error(str(e))

    if args.interval <= 0:
        parser.error("--interval must be positive")
    if args.ticks is not None and args.ticks < 1:
        parser.error("--ticks must be at least 1")
    # env-provided defaults skip argparse choices
    if args.log_level not in LOG_LEVELS:
        parser.error(f"--log-level must be one of {', '.join(LOG_LEVELS)}")

    logging.basicConfig(
        level=args.log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    sink = CsvReportSink(sys.stdout)
    sink.write_header()

    fetcher = ClosingPriceFetcher(get_provider(args.source))
    worker = SymbolWorker(fetcher, sma_window=args.window)
    orchestrator = BatchOrchestrator(symbols, worker=worker, sink=sink, show_progress=args.progress)
    scheduler = PollingScheduler(orchestrator, start, interval=args.interval, max_ticks=args.ticks)

    try:
        ticks = asyncio.run(scheduler.run())
    except DataUnavailableError as e:
        logger.error(f"Stopping after batch failure: {e}")
        return 1

    logger.info(f"Finished after {ticks} ticks, {sink.rows_written} rows written")
    return 0


if __name__ == "__main__":
    sys.exit(main())
