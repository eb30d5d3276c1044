"""Command-line interface for the POS order engine.

This module provides a small CLI for setting up a database and printing
reports. All order and report logic is in pos_engine.api.

Usage:
    pos-engine --db data/restaurant-pos.db init-db --seed
    pos-engine report top --range week --limit 5
    pos-engine report daily --start 2025-01-01 --end 2025-01-31
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pos_engine.api import PosEngine, bottom_products, daily_sales, list_sales, top_products
from pos_engine.config import EngineConfig
from pos_engine.dates import PRESETS, DateRange
from pos_engine.exceptions import PosEngineError
from pos_engine.reports.formatters import (
    format_daily_for_console,
    format_ranking_for_console,
    format_sales_for_console,
)

logger = logging.getLogger(__name__)

REPORT_KINDS = ("sales", "top", "bottom", "daily")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pos-engine",
        description="POS order engine: database setup and sales reports.",
    )
    parser.add_argument(
        "--db",
        type=str,
        help="Path to the SQLite database. If not provided, uses POS_DB_PATH or data/.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Create the database schema.")
    init.add_argument(
        "--seed",
        action="store_true",
        help="Install the reference menu if the catalog is empty.",
    )

    report = sub.add_parser("report", help="Print a sales report.")
    report.add_argument("kind", choices=REPORT_KINDS, help="Report to print.")
    report.add_argument("--start", type=str, help="Start date YYYY-MM-DD (inclusive).")
    report.add_argument("--end", type=str, help="End date YYYY-MM-DD (inclusive).")
    report.add_argument(
        "--range",
        dest="preset",
        choices=PRESETS,
        help="Named range; ignored when --start or --end is given.",
    )
    report.add_argument(
        "--limit",
        type=int,
        default=3,
        help="Rows in top/bottom rankings (default: 3)",
    )
    return parser


def _resolve_range(args: argparse.Namespace) -> DateRange:
    if args.start or args.end:
        return DateRange.from_strings(args.start, args.end)
    if args.preset:
        return DateRange.preset(args.preset)
    return DateRange()


def run_report(engine: PosEngine, args: argparse.Namespace) -> str:
    """Build the requested report and return it formatted for the console."""
    date_range = _resolve_range(args)
    period = date_range.describe()

    if args.kind == "sales":
        return format_sales_for_console(list_sales(engine, date_range), f"Ventas ({period})")
    elif args.kind == "top":
        df = top_products(engine, date_range, args.limit)
        return format_ranking_for_console(df, f"Productos mas vendidos ({period})")
    elif args.kind == "bottom":
        df = bottom_products(engine, date_range, args.limit)
        return format_ranking_for_console(df, f"Productos menos vendidos ({period})")
    else:  # daily
        return format_daily_for_console(daily_sales(engine, date_range), f"Ventas por dia ({period})")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Process exit code: 0 on success, 1 on an engine error.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = EngineConfig.from_env()
        if args.db:
            config.db_path = Path(args.db)

        if args.command == "init-db":
            engine = PosEngine.open(config, seed=args.seed)
            print(f"[OK] Database ready at {engine.config.db_path}")
            if args.seed:
                print(f"[OK] Catalog has {len(engine.catalog.list_products())} available products")
            return 0

        engine = PosEngine.open(config)
        print(run_report(engine, args))
        return 0

    except (PosEngineError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"[ERROR] {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
