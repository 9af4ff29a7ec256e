"""Command-line entry point.

Sub-commands:
- report:   price a Subscan reward ledger and write the income report CSV
- price:    print the one-minute close price of a symbol at a given time
- testdata: print a mock reward ledger for smoke testing

Component wiring for report:
1. AppSettings (configuration, flags override REPORT_* values)
2. Logging setup
3. Ledger reader (events, chronologically sorted)
4. CcxtClient + HistoricalCandleFetcher (candles for the selected events)
5. ReportAssembler (range filter, prices, totals)
6. Report writer (CSV)
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from datetime import date, datetime

from stakegain import __version__
from stakegain.config import AppSettings
from stakegain.data.fetcher import HistoricalCandleFetcher
from stakegain.exceptions import PriceFetchError, StakeGainError
from stakegain.exchange.ccxt_client import CcxtClient
from stakegain.ledger.mock import write_mock_ledger
from stakegain.ledger.reader import read_ledger
from stakegain.logging import get_logger, setup_logging
from stakegain.report.assembler import ReportAssembler
from stakegain.report.range_filter import DateRange, filter_range
from stakegain.report.writer import write_report
from stakegain.timeutil import parse_date, parse_utc_datetime

EXIT_OK = 0
EXIT_DATA_ERROR = 2
EXIT_PRICE_ERROR = 3


# ---------------------------
# argument types
# ---------------------------
def _datetime_arg(value: str) -> datetime:
    try:
        return parse_utc_datetime(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stakegain",
        description="Staking reward income reports priced from historical exchange candles.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--log", default=None, help="Log level (default: LOG_LEVEL or INFO).")
    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser(
        "report",
        help="Create a staking income report, valuing every reward at the price when it was received.",
    )
    r.add_argument("input", help="Subscan reward report in CSV.")
    r.add_argument("-o", "--output", required=True, help="Resulting report CSV.")
    r.add_argument("-c", "--convert", default=None, help="Symbol to use for conversion to fiat, e.g. DOT/EUR.")
    r.add_argument("-b", "--begin", type=_datetime_arg, default=None, help="Start date & time (UTC, inclusive).")
    r.add_argument("-e", "--end", type=_datetime_arg, default=None, help="End date & time (UTC, not inclusive).")
    r.add_argument("--timeframe", default=None, help="Candle timeframe, e.g. 1m, 1h, 1d.")

    pr = sub.add_parser("price", help="Look up a historic coin price.")
    pr.add_argument(
        "date",
        type=_datetime_arg,
        help="Date & time in UTC, e.g. '2023-02-21 17:53:28'. "
        "The close price of that minute is returned; a bare date means 00:00.",
    )
    pr.add_argument("-c", "--convert", default=None, help="Symbol to look up, e.g. DOT/EUR.")

    t = sub.add_parser("testdata", help="Create a mock staking ledger for smoke testing.")
    t.add_argument("-b", "--begin", type=_date_arg, required=True, help="Start date.")
    t.add_argument("-e", "--end", type=_date_arg, required=True, help="End date (not inclusive).")
    t.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible output.")

    return p


# ---------------------------
# commands
# ---------------------------
async def run_report(args: argparse.Namespace, settings: AppSettings) -> int:
    logger = get_logger("stakegain.cli")
    symbol = args.convert or settings.report.symbol
    timeframe = args.timeframe or settings.report.timeframe

    events = read_ledger(args.input)
    selected = list(filter_range(events, DateRange(begin=args.begin, end=args.end)))

    logger.info(
        "report_starting",
        symbol=symbol,
        timeframe=timeframe,
        events=len(events),
        selected=len(selected),
    )

    client = CcxtClient(settings.exchange)
    try:
        fetcher = HistoricalCandleFetcher(client, settings.fetch)
        await fetcher.connect()
        series = await fetcher.fetch_series(
            symbol, timeframe, (event.timestamp for event in selected)
        )
    finally:
        await client.close()

    assembler = ReportAssembler(series, decimal_places=settings.report.decimal_places)
    report = assembler.assemble(events, begin=args.begin, end=args.end)
    write_report(
        report,
        symbol,
        args.output,
        average_price_min_decimals=settings.report.average_price_min_decimals,
    )

    logger.info("report_done", output=args.output, rows=len(report))
    return EXIT_OK


async def run_price(args: argparse.Namespace, settings: AppSettings) -> int:
    symbol = args.convert or settings.report.symbol

    client = CcxtClient(settings.exchange)
    try:
        fetcher = HistoricalCandleFetcher(client, settings.fetch)
        price = await fetcher.fetch_minute_close(symbol, args.date)
    finally:
        await client.close()

    print(price)
    return EXIT_OK


def run_testdata(args: argparse.Namespace) -> int:
    write_mock_ledger(args.begin, args.end, sys.stdout, seed=args.seed)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = AppSettings()

    setup_logging(args.log or settings.log_level)
    logger = get_logger("stakegain.cli")

    try:
        if args.command == "report":
            return asyncio.run(run_report(args, settings))
        if args.command == "price":
            return asyncio.run(run_price(args, settings))
        return run_testdata(args)
    except PriceFetchError as e:
        logger.error("price_source_failed", error=str(e))
        return EXIT_PRICE_ERROR
    except (StakeGainError, OSError) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        return EXIT_DATA_ERROR


if __name__ == "__main__":
    sys.exit(main())
