"""
Command line for the planner calendar engine.

  python -m planner_calendar holidays --year 2025-2026 --country IQ
  python -m planner_calendar occurrences --start 2025-09-01T10:30 --weekdays 1,4 --duration 90 --count 10
  python -m planner_calendar eid-lookup --start-year 2025 --end-year 2035
  python -m planner_calendar academic-extract Academic-Year-2025-2026.txt --label 2025-2026

Results are printed as JSON on stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

import requests

from . import config
from .academic import extract_academic_holidays, load_document, write_academic_extract
from .dates import parse_year_spec
from .eid import build_eid_lookup
from .errors import CalendarInputError, HolidaysUnavailable
from .holidays import HolidayResolver, holidays_for_request
from .materialize import materialize_series
from .recurrence import RecurrenceDefinition
from .sources import FileHolidayStore, NagerDateProvider


def weekday_list(text: str) -> List[int]:
    """Parses "1,4" into [1, 4] (0=Sunday .. 6=Saturday)."""
    try:
        days = [int(p) for p in text.split(",") if p.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"weekdays must be comma-separated integers 0-6, got {text!r}")
    if any(d < 0 or d > 6 for d in days):
        raise argparse.ArgumentTypeError(f"weekdays must be between 0 (Sunday) and 6 (Saturday), got {text!r}")
    return days


def print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


# -----------------------------
# Subcommands
# -----------------------------

def cmd_holidays(args: argparse.Namespace) -> int:
    store = FileHolidayStore(args.cache_dir)
    provider = None if args.offline else NagerDateProvider(args.remote_url, timeout=args.timeout)
    resolver = HolidayResolver(store, provider)
    try:
        rows = holidays_for_request(args.year, args.country, resolver)
    except HolidaysUnavailable as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print_json(rows)
    return 0


def cmd_occurrences(args: argparse.Namespace) -> int:
    definition = RecurrenceDefinition.from_input(
        start=args.start,
        duration_minutes=args.duration,
        weekdays=args.weekdays,
        interval_weeks=args.interval,
        max_count=args.count,
        until=args.until,
    )
    print_json([occ.to_json() for occ in materialize_series(definition)])
    return 0


def cmd_eid_lookup(args: argparse.Namespace) -> int:
    if args.start_year > args.end_year:
        raise CalendarInputError(f"--start-year {args.start_year} is after --end-year {args.end_year}")
    records = build_eid_lookup(args.start_year, args.end_year)
    if args.dry_run:
        print_json(records)
        return 0
    path = FileHolidayStore(args.cache_dir).write_eid_lookup(records)
    print(f"Wrote {path} ({len(records)} years)")
    return 0


def cmd_academic_extract(args: argparse.Namespace) -> int:
    years = parse_year_spec(args.years) if args.years else None
    try:
        document = load_document(args.source, timeout=args.timeout)
    except (OSError, requests.RequestException) as exc:
        print(f"Error: could not read {args.source}: {exc}", file=sys.stderr)
        return 1
    records = extract_academic_holidays(document, args.country, years)
    if not records:
        print(f"Warning: no dated lines found in {args.source}.", file=sys.stderr)
    if args.dry_run:
        for rec in records:
            print(f"[DRY RUN] {rec['date']}: {rec['name']}")
        return 0
    path = write_academic_extract(records, FileHolidayStore(args.cache_dir), args.label)
    print(f"Wrote {path} entries: {len(records)}")
    return 0


# -----------------------------
# Parser
# -----------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="planner-calendar", description="Holiday calendars and recurring-event occurrences.")
    ap.add_argument("--verbose", "-v", action="store_true", help="Log data-source activity to stderr.")
    sub = ap.add_subparsers(dest="command", required=True)

    h = sub.add_parser("holidays", help="Merged holiday list for a year or year range.")
    h.add_argument("--year", type=str, default="", help="YYYY or YYYY-YYYY (default: current year).")
    h.add_argument("--country", type=str, default=config.DEFAULT_REGION, help="2-letter region code.")
    h.add_argument("--cache-dir", type=str, default=config.CACHE_DIR, help="Holiday cache/override directory.")
    h.add_argument("--remote-url", type=str, default=config.REMOTE_BASE_URL, help="Public holiday API base URL.")
    h.add_argument("--timeout", type=float, default=config.REMOTE_TIMEOUT, help="Remote fetch timeout in seconds.")
    h.add_argument("--offline", action="store_true", help="Use cached and computed holidays only.")
    h.set_defaults(func=cmd_holidays)

    o = sub.add_parser("occurrences", help="Materialize a weekly recurrence.")
    o.add_argument("--start", type=str, required=True, help="ISO-8601 start, e.g. 2025-09-01T10:30.")
    o.add_argument("--duration", type=int, required=True, help="Duration in minutes.")
    o.add_argument("--weekdays", type=weekday_list, default=[], help="Comma-separated weekdays, 0=Sunday .. 6=Saturday.")
    o.add_argument("--interval", type=int, default=1, help="Repeat every N weeks.")
    bound = o.add_mutually_exclusive_group(required=True)
    bound.add_argument("--count", type=int, help="Number of occurrences.")
    bound.add_argument("--until", type=str, help="Last possible date, YYYY-MM-DD (inclusive).")
    o.set_defaults(func=cmd_occurrences)

    e = sub.add_parser("eid-lookup", help="Write tabular Eid dates to the lookup file.")
    e.add_argument("--start-year", type=int, required=True)
    e.add_argument("--end-year", type=int, required=True)
    e.add_argument("--cache-dir", type=str, default=config.CACHE_DIR)
    e.add_argument("--dry-run", action="store_true", help="Print the records instead of writing them.")
    e.set_defaults(func=cmd_eid_lookup)

    a = sub.add_parser("academic-extract", help="Extract dated lines from an academic calendar.")
    a.add_argument("source", help="URL, HTML file or text file.")
    a.add_argument("--label", type=str, required=True, help="File label, e.g. 2025-2026.")
    a.add_argument("--country", type=str, default=config.DEFAULT_REGION)
    a.add_argument("--years", type=str, default="", help="Keep only YYYY or YYYY-YYYY.")
    a.add_argument("--cache-dir", type=str, default=config.CACHE_DIR)
    a.add_argument("--timeout", type=int, default=30)
    a.add_argument("--dry-run", action="store_true", help="Print what would be written.")
    a.set_defaults(func=cmd_academic_extract)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except CalendarInputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
