"""
Export token holders, top traders or interval-active wallets to CSV.

How to run:
    From project root (with .env configured):
        python -m holderscope.tools.export_wallets holders --token <mint> --limit 100 --min-amount 10
        python -m holderscope.tools.export_wallets traders --token <mint> --limit 50 --sort lastTx --desc
        python -m holderscope.tools.export_wallets interval --token <mint> --from 2024-01-01 --to 2024-01-31 -o active.csv
    Or via the console script: holderscope-export ...

Required env vars:
    SOLSCAN_API_KEY   (unless SOLSCAN_API_MODE=public)

Output CSV columns (only those the mode produces):
    wallet, amount, volume, lastTx   (lastTx is a Unix timestamp)

A short preview table with shortened addresses is printed to stderr.
"""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path
from typing import Any, TextIO

from holderscope.aggregation import (
    fetch_active_wallets,
    fetch_holders,
    fetch_traders,
)
from holderscope.api_server.routes import (
    DEFAULT_HOLDERS_LIMIT,
    DEFAULT_TRADERS_LIMIT,
    require_token,
)
from holderscope.api_server.schemas import rows_as_json
from holderscope.config import Settings, get_settings
from holderscope.core.exceptions import HolderscopeError, ValidationError
from holderscope.holderscope_logging import get_logger
from holderscope.solscan.client import BaseSolscanClient, build_client
from holderscope.utils.time_utils import parse_timestamp
from holderscope.utils.wallet_utils import format_wallet_address

logger = get_logger(__name__)

MODE_COLUMNS: dict[str, list[str]] = {
    "holders": ["wallet", "amount"],
    "traders": ["wallet", "volume", "lastTx"],
    "interval": ["wallet", "lastTx"],
}
PREVIEW_ROWS = 10


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def sort_rows(rows: list[dict[str, Any]], column: str, descending: bool = False) -> list[dict[str, Any]]:
    """Stable sort by column; rows missing the column sort last."""
    present = [r for r in rows if r.get(column) is not None]
    missing = [r for r in rows if r.get(column) is None]
    return sorted(present, key=lambda r: r[column], reverse=descending) + missing


def write_csv(rows: list[dict[str, Any]], columns: list[str], fp: TextIO) -> None:
    writer = csv.DictWriter(fp, fieldnames=columns, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)


def print_preview(rows: list[dict[str, Any]], columns: list[str], fp: TextIO) -> None:
    """Print up to PREVIEW_ROWS rows with shortened wallet addresses."""
    fp.write("  ".join(f"{c:>14}" for c in columns) + "\n")
    for row in rows[:PREVIEW_ROWS]:
        cells = []
        for c in columns:
            value = row.get(c, "")
            if c == "wallet":
                value = format_wallet_address(str(value))
            elif isinstance(value, float):
                value = f"{value:.4f}"
            cells.append(f"{value!s:>14}")
        fp.write("  ".join(cells) + "\n")
    if len(rows) > PREVIEW_ROWS:
        fp.write(f"... {len(rows) - PREVIEW_ROWS} more\n")


def run_export(args: argparse.Namespace, settings: Settings, client: BaseSolscanClient) -> list[dict[str, Any]]:
    """Run the aggregation selected by args.mode and return JSON-shaped rows."""
    token = require_token(args.token)
    if args.mode == "holders":
        if args.limit < 1:
            raise ValidationError("limit must be at least 1.")
        records = fetch_holders(
            client,
            token,
            limit=args.limit,
            min_amount=args.min_amount,
            page_size=settings.page_size,
        )
    elif args.mode == "traders":
        if args.limit < 1:
            raise ValidationError("limit must be at least 1.")
        decimals = args.decimals if args.decimals is not None else settings.decimals_for(token)
        if decimals < 0:
            raise ValidationError("decimals must not be negative.")
        records = fetch_traders(
            client,
            token,
            limit=args.limit,
            decimals=decimals,
            page_size=settings.page_size,
            max_records=settings.max_trader_records,
        )
    else:
        try:
            start = parse_timestamp(args.start)
            end = parse_timestamp(args.end)
        except ValueError as e:
            raise ValidationError(f"Invalid time range: {e}") from e
        if start > end:
            raise ValidationError("from must not be after to.")
        records = fetch_active_wallets(
            client,
            token,
            start=start,
            end=end,
            page_size=settings.page_size,
            max_records=settings.max_interval_records,
            assume_descending=settings.assume_time_descending,
        )
    return rows_as_json(args.mode, records)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="holderscope-export",
        description="Export Solscan token holders, top traders or active wallets to CSV.",
    )
    sub = parser.add_subparsers(dest="mode", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--token", required=True, help="SPL token mint address")
        p.add_argument("-o", "--output", type=Path, default=None, help="CSV path (default: stdout)")
        p.add_argument("--sort", default=None, help="Column to sort by (wallet, amount, volume, lastTx)")
        p.add_argument("--desc", action="store_true", help="Sort descending")

    holders = sub.add_parser("holders", help="Token holders above a minimum amount")
    add_common(holders)
    holders.add_argument("--limit", type=int, default=DEFAULT_HOLDERS_LIMIT)
    holders.add_argument("--min-amount", type=float, default=0.0)

    traders = sub.add_parser("traders", help="Top wallets by transfer volume")
    add_common(traders)
    traders.add_argument("--limit", type=int, default=DEFAULT_TRADERS_LIMIT)
    traders.add_argument("--decimals", type=int, default=None, help="Token decimals (default from config)")

    interval = sub.add_parser("interval", help="Wallets active in a time range")
    add_common(interval)
    interval.add_argument("--from", dest="start", required=True, help="Unix seconds or ISO date (UTC)")
    interval.add_argument("--to", dest="end", required=True, help="Unix seconds or ISO date (UTC)")

    return parser


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    columns = MODE_COLUMNS[args.mode]
    if args.sort is not None and args.sort not in columns:
        parser.error(f"--sort for {args.mode} must be one of: {', '.join(columns)}")

    try:
        args.token = require_token(args.token)
        settings = get_settings()
        with build_client(settings) as client:
            rows = run_export(args, settings, client)
    except HolderscopeError as e:
        logger.error("export_failed", mode=args.mode, error_kind=e.kind.value, error=e.message)
        print(f"error: {e.message}", file=sys.stderr)
        return 2 if isinstance(e, ValidationError) else 1

    if args.sort is not None:
        rows = sort_rows(rows, args.sort, descending=args.desc)

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with args.output.open("w", newline="", encoding="utf-8") as f:
            write_csv(rows, columns, f)
    else:
        write_csv(rows, columns, sys.stdout)

    print_preview(rows, columns, sys.stderr)
    logger.info("export_written", mode=args.mode, rows=len(rows), output=str(args.output or "-"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
